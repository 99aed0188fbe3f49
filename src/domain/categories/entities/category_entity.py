from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class CategoryStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Category(BaseModel):
    id: str
    title: str
    status: CategoryStatus = CategoryStatus.ACTIVE
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Category":
        data = {key: value for key, value in document.items() if key != "_id"}
        return cls(id=str(document["_id"]), **data)


class CategoryListItem(BaseModel):
    """Dropdown entry, as cached."""

    id: str
    title: str
