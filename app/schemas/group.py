from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field
from app.models.enums import CategoryRoleType


class GroupLeaders(BaseModel):
    """The three leadership slots of a group"""
    president_id: Optional[int] = None
    vice_president_1_id: Optional[int] = None
    vice_president_2_id: Optional[int] = None

    class Config:
        from_attributes = True
        frozen = True

    def includes(self, member_id: int) -> bool:
        return member_id in (self.president_id, self.vice_president_1_id, self.vice_president_2_id)


class MemberRead(BaseModel):
    id: int
    name: str
    member_code: str
    group_id: int
    is_active: bool = True

    class Config:
        from_attributes = True


class CategoryRead(BaseModel):
    id: int
    group_id: int
    name: str
    description: Optional[str] = None
    total_balance: Decimal = Decimal("0")
    is_locked: bool = False

    class Config:
        from_attributes = True


class CategoryLockUpdate(BaseModel):
    is_locked: bool


class CategoryLeaderRead(BaseModel):
    id: int
    category_id: int
    member_id: int
    member_name: Optional[str] = None
    role: CategoryRoleType
    role_label: Optional[str] = None
    role_description: Optional[str] = None
    is_active: bool = True

    class Config:
        from_attributes = True


class CategoryLeaderCreate(BaseModel):
    member_id: int
    role: CategoryRoleType = Field(description="presidente, secretario or auxiliar")
