"""User model."""

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship

from sprintsync.database import Base
from sprintsync.models.mixins import CreatedAtMixin


class User(Base, CreatedAtMixin):
    """User model for authentication and task ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column("password", String(255), nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    skills = Column(String(500), nullable=True)  # free text, e.g. "python, react"

    # Relationships
    tasks = relationship("Task", back_populates="user", passive_deletes=True)
