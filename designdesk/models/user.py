"""User model"""

from sqlalchemy import Column, String, Text
from designdesk.models.base import BaseModel


class User(BaseModel):
    """
    User model for studio staff.
    Roles: admin, designer, sales
    """

    __tablename__ = "users"

    username = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(Text, nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)
    name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    role = Column(String(50), default="sales", nullable=False, index=True)
    active_plan = Column(String(50), default="free", nullable=True)
    company = Column(String(255), nullable=True)
    avatar = Column(Text, nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"
