"""Shared schema base classes for API responses."""

from pydantic import BaseModel


class ORMModel(BaseModel):
    """Base model that validates from document model attributes."""

    model_config = {"from_attributes": True}
