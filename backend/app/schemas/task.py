"""
Pydantic schemas for task endpoints.
"""
from pydantic import BaseModel, ConfigDict, Field


class TaskIn(BaseModel):
    """
    Request body for creating or replacing a task.
    PUT replaces title, description and completed together.
    """
    title: str | None = Field(default=None, max_length=255)
    description: str | None = None
    completed: bool = False


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str | None = None
    description: str | None = None
    completed: bool
