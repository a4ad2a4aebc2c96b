"""
Interest API tests - the lifecycle from a buyer's and an owner's point of view.
"""

import pytest
from httpx import AsyncClient


async def _send_interest(client: AsyncClient, crop_id: str, headers: dict, quantity=4, **extra):
    return await client.post(
        f"/api/crops/{crop_id}/interests", headers=headers, json={"quantity": quantity, **extra}
    )


async def _decide(client: AsyncClient, crop_id: str, interest_id: str, headers: dict, status: str):
    return await client.put(
        f"/api/crops/{crop_id}/interests/{interest_id}", headers=headers, json={"status": status}
    )


@pytest.mark.asyncio
async def test_send_interest_requires_auth(client: AsyncClient, crop_id: str):
    response = await client.post(f"/api/crops/{crop_id}/interests", json={"quantity": 2})
    assert response.status_code == 401
    crop = (await client.get(f"/api/crops/{crop_id}")).json()
    assert crop["interests"] == []


@pytest.mark.asyncio
async def test_send_interest(client: AsyncClient, buyer_a_headers: dict, crop_id: str):
    response = await _send_interest(client, crop_id, buyer_a_headers, quantity=3, message="Need by Friday")
    assert response.status_code == 201
    body = response.json()
    assert body["ok"] is True
    interest = body["interest"]
    assert interest["cropId"] == crop_id
    assert interest["userEmail"] == "a@example.com"
    assert interest["userName"] == "Asha Buyer"
    assert interest["quantity"] == 3
    assert interest["message"] == "Need by Friday"
    assert interest["status"] == "pending"

    crop = (await client.get(f"/api/crops/{crop_id}")).json()
    assert [i["id"] for i in crop["interests"]] == [interest["id"]]


@pytest.mark.asyncio
async def test_send_interest_uses_given_display_name(client: AsyncClient, buyer_a_headers: dict, crop_id: str):
    response = await _send_interest(client, crop_id, buyer_a_headers, userName="Asha Traders")
    assert response.json()["interest"]["userName"] == "Asha Traders"


@pytest.mark.asyncio
async def test_send_interest_to_missing_crop(client: AsyncClient, buyer_a_headers: dict):
    response = await _send_interest(client, "nope", buyer_a_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_owner_cannot_bid_on_own_crop(client: AsyncClient, seller_headers: dict, crop_id: str):
    response = await _send_interest(client, crop_id, seller_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Owners cannot send interest on their own crop"


@pytest.mark.asyncio
@pytest.mark.parametrize("quantity", [0, -2, 1.5, "abc", None, True])
async def test_send_interest_invalid_quantity(client: AsyncClient, buyer_a_headers: dict, crop_id: str, quantity):
    response = await _send_interest(client, crop_id, buyer_a_headers, quantity=quantity)
    assert response.status_code == 400
    assert "Quantity" in response.json()["detail"]


@pytest.mark.asyncio
async def test_send_interest_numeric_string_quantity(client: AsyncClient, buyer_a_headers: dict, crop_id: str):
    response = await _send_interest(client, crop_id, buyer_a_headers, quantity="5")
    assert response.status_code == 201
    assert response.json()["interest"]["quantity"] == 5


@pytest.mark.asyncio
async def test_send_interest_oversized_quantity(client: AsyncClient, buyer_a_headers: dict, crop_id: str):
    response = await _send_interest(client, crop_id, buyer_a_headers, quantity=10**20)
    assert response.status_code == 400
    assert "at most" in response.json()["detail"]
    crop = (await client.get(f"/api/crops/{crop_id}")).json()
    assert crop["interests"] == []


@pytest.mark.asyncio
async def test_duplicate_interest_rejected(client: AsyncClient, buyer_a_headers: dict, crop_id: str):
    assert (await _send_interest(client, crop_id, buyer_a_headers)).status_code == 201
    response = await _send_interest(client, crop_id, buyer_a_headers, quantity=1)
    assert response.status_code == 400
    assert response.json()["detail"] == "You have already sent an interest for this crop"
    crop = (await client.get(f"/api/crops/{crop_id}")).json()
    assert len(crop["interests"]) == 1


@pytest.mark.asyncio
async def test_rejected_buyer_cannot_bid_again(
    client: AsyncClient, seller_headers: dict, buyer_a_headers: dict, crop_id: str
):
    interest_id = (await _send_interest(client, crop_id, buyer_a_headers)).json()["interest"]["id"]
    assert (await _decide(client, crop_id, interest_id, seller_headers, "rejected")).status_code == 200
    response = await _send_interest(client, crop_id, buyer_a_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_accepting_reduces_quantity_and_clamps_at_zero(
    client: AsyncClient, seller_headers: dict, buyer_a_headers: dict, buyer_b_headers: dict, crop_id: str
):
    a_id = (await _send_interest(client, crop_id, buyer_a_headers, quantity=4)).json()["interest"]["id"]
    response = await _decide(client, crop_id, a_id, seller_headers, "accepted")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "status": "accepted", "remainingQuantity": 6}
    assert (await client.get(f"/api/crops/{crop_id}")).json()["quantity"] == 6

    b_id = (await _send_interest(client, crop_id, buyer_b_headers, quantity=10)).json()["interest"]["id"]
    response = await _decide(client, crop_id, b_id, seller_headers, "accepted")
    assert response.status_code == 200
    assert response.json()["remainingQuantity"] == 0

    crop = (await client.get(f"/api/crops/{crop_id}")).json()
    assert crop["quantity"] == 0
    assert {i["userEmail"]: i["status"] for i in crop["interests"]} == {
        "a@example.com": "accepted",
        "b@example.com": "accepted",
    }


@pytest.mark.asyncio
async def test_rejecting_leaves_quantity(
    client: AsyncClient, seller_headers: dict, buyer_a_headers: dict, crop_id: str
):
    interest_id = (await _send_interest(client, crop_id, buyer_a_headers, quantity=4)).json()["interest"]["id"]
    response = await _decide(client, crop_id, interest_id, seller_headers, "rejected")
    assert response.status_code == 200
    assert response.json()["status"] == "rejected"
    assert (await client.get(f"/api/crops/{crop_id}")).json()["quantity"] == 10


@pytest.mark.asyncio
async def test_only_owner_can_decide(
    client: AsyncClient, buyer_a_headers: dict, buyer_b_headers: dict, crop_id: str
):
    interest_id = (await _send_interest(client, crop_id, buyer_a_headers)).json()["interest"]["id"]
    for headers in (buyer_a_headers, buyer_b_headers):
        response = await _decide(client, crop_id, interest_id, headers, "accepted")
        assert response.status_code == 403
    crop = (await client.get(f"/api/crops/{crop_id}")).json()
    assert crop["interests"][0]["status"] == "pending"
    assert crop["quantity"] == 10


@pytest.mark.asyncio
async def test_non_owner_forbidden_even_when_decided(
    client: AsyncClient, seller_headers: dict, buyer_a_headers: dict, crop_id: str
):
    interest_id = (await _send_interest(client, crop_id, buyer_a_headers)).json()["interest"]["id"]
    await _decide(client, crop_id, interest_id, seller_headers, "rejected")
    response = await _decide(client, crop_id, interest_id, buyer_a_headers, "accepted")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_decided_interest_is_final(
    client: AsyncClient, seller_headers: dict, buyer_a_headers: dict, crop_id: str
):
    interest_id = (await _send_interest(client, crop_id, buyer_a_headers, quantity=4)).json()["interest"]["id"]
    await _decide(client, crop_id, interest_id, seller_headers, "accepted")

    response = await _decide(client, crop_id, interest_id, seller_headers, "rejected")
    assert response.status_code == 400
    assert response.json()["detail"] == "Action already taken"
    crop = (await client.get(f"/api/crops/{crop_id}")).json()
    assert crop["interests"][0]["status"] == "accepted"
    assert crop["quantity"] == 6


@pytest.mark.asyncio
async def test_decide_invalid_status(client: AsyncClient, seller_headers: dict, buyer_a_headers: dict, crop_id: str):
    interest_id = (await _send_interest(client, crop_id, buyer_a_headers)).json()["interest"]["id"]
    for status in ("pending", "maybe"):
        response = await _decide(client, crop_id, interest_id, seller_headers, status)
        assert response.status_code == 400


@pytest.mark.asyncio
async def test_decide_missing_interest(client: AsyncClient, seller_headers: dict, crop_id: str):
    response = await _decide(client, crop_id, "missing", seller_headers, "accepted")
    assert response.status_code == 404
    assert response.json()["detail"] == "Interest not found"


@pytest.mark.asyncio
async def test_my_interests_projection(
    client: AsyncClient, seller_headers: dict, buyer_a_headers: dict, buyer_b_headers: dict, crop_id: str
):
    a_id = (await _send_interest(client, crop_id, buyer_a_headers, quantity=4, message="hi")).json()["interest"]["id"]
    await _send_interest(client, crop_id, buyer_b_headers, quantity=2)
    await _decide(client, crop_id, a_id, seller_headers, "accepted")

    response = await client.get("/api/my-interests", headers=buyer_a_headers)
    assert response.status_code == 200
    sent = response.json()
    assert len(sent) == 1
    assert sent[0]["id"] == a_id
    assert sent[0]["cropId"] == crop_id
    assert sent[0]["cropName"] == "Basmati Rice"
    assert sent[0]["ownerName"] == "Ravi Seller"
    assert sent[0]["quantity"] == 4
    assert sent[0]["totalPrice"] == 20
    assert sent[0]["status"] == "accepted"
    assert sent[0]["message"] == "hi"


@pytest.mark.asyncio
async def test_my_interests_total_price_follows_current_price(
    client: AsyncClient, seller_headers: dict, buyer_a_headers: dict, crop_id: str
):
    await _send_interest(client, crop_id, buyer_a_headers, quantity=3)
    await client.put(f"/api/crops/{crop_id}", headers=seller_headers, json={"pricePerUnit": 8})
    sent = (await client.get("/api/my-interests", headers=buyer_a_headers)).json()
    assert sent[0]["totalPrice"] == 24


@pytest.mark.asyncio
async def test_my_interests_requires_auth(client: AsyncClient):
    assert (await client.get("/api/my-interests")).status_code == 401
