from typing import Optional, Union
from pydantic import BaseModel
from app.models.enums import AdminLevel, IdentityKind


class LoginRequest(BaseModel):
    code: str
    type: IdentityKind


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AdminIdentity(BaseModel):
    """Authenticated system administrator"""
    admin_id: int
    level: AdminLevel
    member_id: Optional[int] = None

    class Config:
        frozen = True


class MemberIdentity(BaseModel):
    """Authenticated group member"""
    member_id: int

    class Config:
        frozen = True


Identity = Union[AdminIdentity, MemberIdentity]


class AdminRead(BaseModel):
    id: int
    name: str
    access_code: str
    permission_level: AdminLevel
    is_active: bool
    member_id: Optional[int] = None

    class Config:
        from_attributes = True


class IdentityRead(BaseModel):
    kind: IdentityKind
    admin_id: Optional[int] = None
    member_id: Optional[int] = None
    level: Optional[AdminLevel] = None
