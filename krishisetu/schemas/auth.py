"""Authenticated principal - the trusted identity behind a request."""

from pydantic import BaseModel


class Principal(BaseModel):
    uid: str
    email: str
    name: str = ""

    model_config = {"frozen": True}
