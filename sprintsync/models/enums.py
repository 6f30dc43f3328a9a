"""Enums for model fields."""

from enum import Enum


class TaskStatus(str, Enum):
    """Workflow states of a task.

    Any state may follow any other; there is no enforced ordering.
    """

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def is_valid(cls, value: object) -> bool:
        """Check whether ``value`` is one of the accepted status strings."""
        return isinstance(value, str) and value in cls.values()
