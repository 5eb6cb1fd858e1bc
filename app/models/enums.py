from enum import Enum


class AdminLevel(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN_PRINCIPAL = "admin_principal"
    ADMIN_ADJUNTO = "admin_adjunto"
    ADMIN_SUPERVISOR = "admin_supervisor"


class CategoryRoleType(str, Enum):
    """Category-scoped leadership role"""
    PRESIDENTE = "presidente"
    SECRETARIO = "secretario"
    AUXILIAR = "auxiliar"


class IdentityKind(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


class CodeNamespace(str, Enum):
    """Registries that hold human-readable access codes"""
    MEMBER = "member"
    GROUP = "group"
