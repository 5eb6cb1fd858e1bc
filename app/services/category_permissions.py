"""
Financial category permission resolution.

Precedence:
1. Missing category or group -> view only.
2. Super admin / admin principal -> full access, no category checks.
3. No member to check (e.g. an admin without a member binding) -> view only.
4. Group leadership and active category role decide the rest.

Store failures never reach the caller: they are logged and the view-only
default is returned.
"""
import logging
from typing import Optional
from app.core.permissions import (
    PRIVILEGED_ADMIN_LEVELS,
    CATEGORY_ROLE_LEVELS,
    LEVEL_GROUP_LEADER,
    LEVEL_PRESIDENTE,
    LEVEL_NO_ACCESS,
)
from app.schemas.auth import AdminIdentity, MemberIdentity, Identity
from app.schemas.permission import CategoryPermission
from app.services.store import PermissionStore

logger = logging.getLogger(__name__)


DEFAULT_PERMISSION = CategoryPermission()

FULL_ACCESS = CategoryPermission(
    can_view=True,
    can_view_balance=True,
    can_edit=True,
    can_delete=True,
    can_manage_leaders=True,
    can_lock_category=True,
    permission_level=LEVEL_GROUP_LEADER,
    role=None,
    is_group_leader=False,
)


class CategoryPermissionResolver:
    def __init__(self, store: PermissionStore):
        self.store = store

    async def resolve(
        self,
        category_id: Optional[int],
        member_id: Optional[int],
        group_id: Optional[int],
        identity: Optional[Identity],
    ) -> CategoryPermission:
        if category_id is None or group_id is None:
            return DEFAULT_PERMISSION

        match identity:
            case AdminIdentity(level=level) if level in PRIVILEGED_ADMIN_LEVELS:
                return FULL_ACCESS
            case AdminIdentity(member_id=bound_member_id):
                if member_id is None:
                    member_id = bound_member_id
            case MemberIdentity(member_id=own_member_id):
                if member_id is None:
                    member_id = own_member_id

        if member_id is None:
            return DEFAULT_PERMISSION

        try:
            return await self._resolve_member(category_id, member_id, group_id)
        except Exception as e:
            logger.error(
                f"Permission check failed for category {category_id}, member {member_id}: {e}",
                exc_info=True,
            )
            return DEFAULT_PERMISSION

    async def _resolve_member(self, category_id: int, member_id: int, group_id: int) -> CategoryPermission:
        leaders = await self.store.get_group_leaders(group_id)
        is_group_leader = leaders.includes(member_id) if leaders else False

        role = await self.store.get_active_category_role(category_id, member_id)

        # A missing category counts as unlocked
        is_locked = bool(await self.store.is_category_locked(category_id))

        has_role = role is not None

        if is_group_leader:
            level = LEVEL_GROUP_LEADER
        elif has_role:
            level = CATEGORY_ROLE_LEVELS[role]
        else:
            level = LEVEL_NO_ACCESS

        return CategoryPermission(
            can_view=True,
            can_view_balance=is_group_leader or has_role,
            # A lock only blocks members with neither a role nor leadership
            can_edit=not is_locked or has_role or is_group_leader,
            can_delete=level <= LEVEL_PRESIDENTE,
            can_manage_leaders=level <= LEVEL_PRESIDENTE,
            can_lock_category=level in (LEVEL_GROUP_LEADER, LEVEL_PRESIDENTE),
            permission_level=level,
            role=role,
            is_group_leader=is_group_leader,
        )
