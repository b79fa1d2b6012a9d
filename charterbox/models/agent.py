"""Booking agent reference document model."""

from typing import Optional

from beanie import Document, Indexed


class Agent(Document):
    """Sales agent or tour operator that books trips on commission."""

    agent_id: Indexed(str, unique=True)
    name: str
    discount_rate: float = 0.0  # percentage
    email: Optional[str] = None

    class Settings:
        name = "agents"
        indexes = [
            "agent_id",
            "name",
        ]

    def __repr__(self) -> str:
        return f"<Agent(agent_id={self.agent_id}, name={self.name})>"
