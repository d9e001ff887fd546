"""Category model and the synthetic fallback category."""

from typing import Optional

from pydantic import BaseModel, Field

UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_COLOR = "#94a3b8"
UNCATEGORIZED_ICON = "Circle"


class Category(BaseModel):
    """Named, coloured grouping label assignable to tasks."""

    id: Optional[str] = Field(default=None, description="Category identifier")
    name: str = Field(..., description="Display name")
    color: str = Field(default=UNCATEGORIZED_COLOR, description="Colour token, passed through unchanged")
    icon: Optional[str] = Field(default=None, description="Icon token, passed through unchanged")

    class Config:
        """Pydantic configuration."""
        frozen = True
        extra = "ignore"
        coerce_numbers_to_str = True


# Returned by lookups that do not resolve. Never persisted.
UNCATEGORIZED = Category(
    id=None,
    name=UNCATEGORIZED_NAME,
    color=UNCATEGORIZED_COLOR,
    icon=UNCATEGORIZED_ICON,
)
