"""Yacht reference document model."""

from beanie import Document, Indexed
from pydantic import BaseModel, Field


class YachtPackage(BaseModel):
    """An entry of a yacht's ticket price list."""

    id: str = ""
    name: str
    rate: float = 0.0


class Yacht(Document):
    """Yacht document with its package price list."""

    yacht_id: Indexed(str, unique=True)
    name: str
    packages: list[YachtPackage] = Field(default_factory=list)

    class Settings:
        name = "yachts"
        indexes = [
            "yacht_id",
            "name",
        ]

    def __repr__(self) -> str:
        return f"<Yacht(yacht_id={self.yacht_id}, name={self.name}, packages={len(self.packages)})>"
