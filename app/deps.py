from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.db import get_db
from app.core.security import decode_access_token
from app.models.enums import IdentityKind
from app.schemas.auth import AdminIdentity, MemberIdentity, Identity
from app.services.category_permissions import CategoryPermissionResolver
from app.services.store import SQLAlchemyStore

security = HTTPBearer()


async def get_store(db: Annotated[AsyncSession, Depends(get_db)]) -> SQLAlchemyStore:
    return SQLAlchemyStore(db)


Store = Annotated[SQLAlchemyStore, Depends(get_store)]


async def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    store: Store,
) -> Identity:
    token = credentials.credentials
    payload = decode_access_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token or token expired",
        )

    subject = payload.get("sub")
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing subject",
        )

    try:
        subject_id = int(subject)
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid subject in token",
        )

    kind = payload.get("kind")

    if kind == IdentityKind.ADMIN.value:
        admin = await store.get_admin(subject_id)
        if admin is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Administrator not found",
            )
        if not admin.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Administrator account is not active",
            )
        # Level and member binding come from the store, not the token
        return AdminIdentity(admin_id=admin.id, level=admin.permission_level, member_id=admin.member_id)

    if kind == IdentityKind.MEMBER.value:
        member = await store.get_member(subject_id)
        if member is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Member not found",
            )
        if not member.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Member account is not active",
            )
        return MemberIdentity(member_id=member.id)

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unknown identity kind in token",
    )


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


async def require_admin(identity: CurrentIdentity) -> AdminIdentity:
    # Member codes double as login credentials, so only administrators may look them up
    if not isinstance(identity, AdminIdentity):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required",
        )
    return identity


async def get_permission_resolver(store: Store) -> CategoryPermissionResolver:
    return CategoryPermissionResolver(store)


PermissionResolver = Annotated[CategoryPermissionResolver, Depends(get_permission_resolver)]
