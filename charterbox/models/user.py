"""Back-office user reference document model."""

from typing import Optional

from beanie import Document, Indexed


class User(Document):
    """Back-office user. Only read here to resolve owner and modifier names."""

    user_id: Indexed(str, unique=True)
    name: str
    email: Optional[str] = None
    is_active: bool = True

    class Settings:
        name = "users"

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id}, name={self.name})>"
