"""Filter criteria applied to the task list."""

from pydantic import BaseModel, Field

ALL = "all"


class FilterCriteria(BaseModel):
    """View parameters; they never touch task or category records."""

    selected_category: str = Field(default=ALL, description="Category id or 'all'")
    search_query: str = Field(default="", description="Case-insensitive text query")
    priority_filter: str = Field(default=ALL, description="Priority value or 'all'")

    class Config:
        """Pydantic configuration."""
        frozen = True
        coerce_numbers_to_str = True
