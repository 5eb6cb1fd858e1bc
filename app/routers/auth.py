import logging
from fastapi import APIRouter, HTTPException, status
from app.core.security import create_identity_token
from app.deps import CurrentIdentity, Store
from app.models.enums import IdentityKind
from app.schemas.auth import LoginRequest, TokenResponse, IdentityRead, AdminIdentity, MemberIdentity
from app.services.access_codes import normalize_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
async def login(credentials: LoginRequest, store: Store):
    """
    Log in with an access code.

    Administrators use their personal access code, members their member code.
    Only active accounts (and, for members, active groups) can log in.
    """
    code = normalize_code(credentials.code)

    if credentials.type == IdentityKind.ADMIN:
        admin = await store.get_admin_by_code(code)
        if not admin:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or inactive administrator code",
            )
        identity = AdminIdentity(admin_id=admin.id, level=admin.permission_level, member_id=admin.member_id)
    else:
        member = await store.get_member_by_code(code)
        if not member:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or inactive member code",
            )
        identity = MemberIdentity(member_id=member.id)

    logger.info(f"{credentials.type.value} login: {identity!r}")
    return TokenResponse(access_token=create_identity_token(identity))


@router.get("/me", response_model=IdentityRead)
async def get_current_identity_info(identity: CurrentIdentity):
    match identity:
        case AdminIdentity(admin_id=admin_id, level=level, member_id=member_id):
            return IdentityRead(kind=IdentityKind.ADMIN, admin_id=admin_id, level=level, member_id=member_id)
        case MemberIdentity(member_id=member_id):
            return IdentityRead(kind=IdentityKind.MEMBER, member_id=member_id)
