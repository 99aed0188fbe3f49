from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class AdminRole(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"


class AdminProfile(BaseModel):
    """Admin as exposed by the API. Never carries the password hash."""

    id: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    country: str
    city: str
    role: AdminRole = AdminRole.ADMIN
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "AdminProfile":
        data = {key: value for key, value in document.items() if key not in ("_id", "password_hash")}
        return cls(id=str(document["_id"]), **data)


class AdminPayload(BaseModel):
    """Claims of an admin access token, attached to the request as the principal."""

    model_config = ConfigDict(extra="ignore")

    id: str
    role: AdminRole
    first_name: str
    last_name: str
    iat: Optional[int] = None
    exp: Optional[int] = None

    @classmethod
    def from_admin(cls, admin: Dict[str, Any]) -> "AdminPayload":
        return cls(
            id=str(admin["_id"]),
            role=admin.get("role") or AdminRole.ADMIN,
            first_name=admin["first_name"],
            last_name=admin["last_name"],
        )

    def token_claims(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role.value,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }
