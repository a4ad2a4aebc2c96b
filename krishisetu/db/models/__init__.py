from krishisetu.db.models.crop import Crop
from krishisetu.db.models.interest import Interest, InterestStatus

__all__ = ["Crop", "Interest", "InterestStatus"]
