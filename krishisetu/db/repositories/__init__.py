# Repository pattern: abstract data access (SOLID - Dependency Inversion)

from krishisetu.db.repositories.crop_repository import CropRepository

__all__ = ["CropRepository"]
