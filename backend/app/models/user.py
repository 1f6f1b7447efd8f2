"""User ORM model, provisioned by the external auth provider."""
import enum
import uuid
from sqlalchemy import Column, String, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from app.database import Base


class UserRole(str, enum.Enum):
    member = "member"
    board = "board"


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone_number = Column(String(40), nullable=True)
    role = Column(SAEnum(UserRole), nullable=False, default=UserRole.member)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_board(self) -> bool:
        return self.role == UserRole.board
