import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from app.core.permissions import SINGLE_HOLDER_ROLES, get_category_role_label
from app.deps import CurrentIdentity, PermissionResolver, Store, get_current_identity
from app.schemas.auth import AdminIdentity, MemberIdentity, Identity
from app.schemas.common import DataResponse, MessageResponse
from app.schemas.group import CategoryRead, CategoryLeaderRead, CategoryLeaderCreate, CategoryLockUpdate
from app.schemas.permission import CategoryPermission
from app.services.category_permissions import CategoryPermissionResolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["Financial categories"])


async def _get_category_or_404(store, category_id: int) -> CategoryRead:
    category = await store.get_category(category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


async def _permissions_for(
    resolver: CategoryPermissionResolver, category: CategoryRead, identity: Identity
) -> CategoryPermission:
    return await resolver.resolve(category.id, None, category.group_id, identity)


def _actor_id(identity: Identity) -> int | None:
    match identity:
        case AdminIdentity(admin_id=admin_id):
            return admin_id
        case MemberIdentity(member_id=member_id):
            return member_id
    return None


@router.get("/{category_id}/permissions", response_model=DataResponse[CategoryPermission])
async def get_category_permissions(
    category_id: int,
    identity: CurrentIdentity,
    resolver: PermissionResolver,
    group_id: int | None = Query(None),
    member_id: int | None = Query(None, description="Member to check, admins only"),
):
    """
    Resolve what the caller (or, for administrators, the given member) may do on a category.

    Never fails on store errors: the view-only default is returned instead.
    """
    # Members can only ask about themselves
    if isinstance(identity, MemberIdentity):
        member_id = None

    permission = await resolver.resolve(category_id, member_id, group_id, identity)
    return DataResponse(data=permission)


@router.get(
    "/{category_id}/leaders",
    response_model=DataResponse[list[CategoryLeaderRead]],
    dependencies=[Depends(get_current_identity)],
)
async def get_category_leaders(category_id: int, store: Store):
    await _get_category_or_404(store, category_id)
    leaders = await store.list_category_leaders(category_id)
    return DataResponse(data=leaders)


@router.post("/{category_id}/leaders", response_model=DataResponse[CategoryLeaderRead])
async def add_category_leader(
    category_id: int,
    data: CategoryLeaderCreate,
    identity: CurrentIdentity,
    resolver: PermissionResolver,
    store: Store,
):
    """
    Assign a category role to a member of the category's group.

    A category has at most one presidente and one secretario,
    and a member holds at most one role per category.
    """
    category = await _get_category_or_404(store, category_id)

    permission = await _permissions_for(resolver, category, identity)
    if not permission.can_manage_leaders:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to manage category leaders")

    member = await store.get_member(data.member_id)
    if not member or member.group_id != category.group_id:
        raise HTTPException(status_code=400, detail="Member does not belong to this category's group")

    leaders = await store.list_category_leaders(category_id)

    if data.role in SINGLE_HOLDER_ROLES and any(leader.role == data.role for leader in leaders):
        raise HTTPException(
            status_code=400,
            detail=f"This category already has a {get_category_role_label(data.role)}",
        )

    if any(leader.member_id == data.member_id for leader in leaders):
        raise HTTPException(status_code=400, detail="This member already has a role in this category")

    try:
        leader = await store.add_category_role(
            category_id=category.id,
            member_id=member.id,
            group_id=category.group_id,
            role=data.role,
            assigned_by=_actor_id(identity),
        )
    except IntegrityError:
        logger.warning(f"Concurrent role assignment for member {member.id} in category {category.id}")
        raise HTTPException(status_code=400, detail="This member already has a role in this category")
    logger.info(f"Member {member.id} assigned as {data.role.value} of category {category.id}")

    return DataResponse(data=leader)


@router.delete("/{category_id}/leaders/{leader_id}", response_model=DataResponse[MessageResponse])
async def remove_category_leader(
    category_id: int,
    leader_id: int,
    identity: CurrentIdentity,
    resolver: PermissionResolver,
    store: Store,
):
    category = await _get_category_or_404(store, category_id)

    permission = await _permissions_for(resolver, category, identity)
    if not permission.can_manage_leaders:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to manage category leaders")

    if not await store.delete_category_role(category_id, leader_id):
        raise HTTPException(status_code=404, detail="Category leader not found")

    logger.info(f"Category role {leader_id} removed from category {category_id}")
    return DataResponse(data=MessageResponse(message="Category leader removed successfully"))


@router.patch("/{category_id}/lock", response_model=DataResponse[CategoryRead])
async def set_category_lock(
    category_id: int,
    data: CategoryLockUpdate,
    identity: CurrentIdentity,
    resolver: PermissionResolver,
    store: Store,
):
    """Lock or unlock a category. While locked only leaders and role holders can edit it."""
    category = await _get_category_or_404(store, category_id)

    permission = await _permissions_for(resolver, category, identity)
    if not permission.can_lock_category:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to lock this category")

    updated = await store.set_category_locked(category_id, data.is_locked)
    logger.info(f"Category {category_id} {'locked' if data.is_locked else 'unlocked'}")

    return DataResponse(data=updated)
