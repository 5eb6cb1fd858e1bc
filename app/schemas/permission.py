from typing import Optional
from pydantic import BaseModel, computed_field
from app.core.permissions import LEVEL_NO_ACCESS, get_permission_level_label
from app.models.enums import CategoryRoleType


class CategoryPermission(BaseModel):
    """
    Access decision for one identity on one financial category.

    Defaults describe the minimum privilege: view only.
    """
    can_view: bool = True
    can_view_balance: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_manage_leaders: bool = False
    can_lock_category: bool = False
    permission_level: int = LEVEL_NO_ACCESS
    role: Optional[CategoryRoleType] = None
    is_group_leader: bool = False

    @computed_field
    @property
    def permission_level_label(self) -> str:
        return get_permission_level_label(self.permission_level)

    class Config:
        frozen = True
