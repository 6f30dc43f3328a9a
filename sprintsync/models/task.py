"""Task model."""

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from sprintsync.database import Base
from sprintsync.models.enums import TaskStatus
from sprintsync.models.mixins import TimestampMixin


class Task(Base, TimestampMixin):
    """Task model tracked by its owning user."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        Enum(
            TaskStatus,
            name="task_status",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=TaskStatus.TODO,
        nullable=False,
    )
    total_minutes = Column(Integer, default=0, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    # Relationships
    user = relationship("User", back_populates="tasks")
