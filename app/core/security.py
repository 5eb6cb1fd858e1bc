from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from app.core.config import settings
from app.models.enums import IdentityKind
from app.schemas.auth import AdminIdentity, MemberIdentity, Identity


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return payload
    except jwt.ExpiredSignatureError:
        return None
    except jwt.JWTClaimsError:
        return None
    except JWTError:
        return None


def identity_to_claims(identity: Identity) -> dict:
    """
    Build token claims for an authenticated identity.

    Admin tokens carry the admin id as subject and the level at login time;
    member tokens carry the member id.
    """
    match identity:
        case AdminIdentity(admin_id=admin_id, level=level, member_id=member_id):
            return {
                "sub": str(admin_id),
                "kind": IdentityKind.ADMIN.value,
                "level": level.value,
                "member_id": member_id,
            }
        case MemberIdentity(member_id=member_id):
            return {
                "sub": str(member_id),
                "kind": IdentityKind.MEMBER.value,
                "member_id": member_id,
            }
    raise ValueError(f"Unsupported identity: {identity!r}")


def create_identity_token(identity: Identity) -> str:
    return create_access_token(identity_to_claims(identity))
