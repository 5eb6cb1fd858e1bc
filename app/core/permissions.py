from typing import Optional
from app.models.enums import AdminLevel, CategoryRoleType

# Administrators at these levels bypass every category-level check
PRIVILEGED_ADMIN_LEVELS = frozenset({AdminLevel.SUPER_ADMIN, AdminLevel.ADMIN_PRINCIPAL})

# Category permission levels, lower is stronger
LEVEL_GROUP_LEADER = 0
LEVEL_PRESIDENTE = 1
LEVEL_SECRETARIO = 2
LEVEL_AUXILIAR = 3
LEVEL_NO_ACCESS = 999

CATEGORY_ROLE_LEVELS = {
    CategoryRoleType.PRESIDENTE: LEVEL_PRESIDENTE,
    CategoryRoleType.SECRETARIO: LEVEL_SECRETARIO,
    CategoryRoleType.AUXILIAR: LEVEL_AUXILIAR,
}

# Roles that a category can only have one active holder of
SINGLE_HOLDER_ROLES = frozenset({CategoryRoleType.PRESIDENTE, CategoryRoleType.SECRETARIO})

CATEGORY_ROLES = {
    CategoryRoleType.PRESIDENTE: {
        "label": "Presidente",
        "description": "Full control: create, edit and delete transactions and manage leaders",
    },
    CategoryRoleType.SECRETARIO: {
        "label": "Secretário",
        "description": "Can create and edit transactions",
    },
    CategoryRoleType.AUXILIAR: {
        "label": "Auxiliar",
        "description": "Can view balances and transactions",
    },
}

PERMISSION_LEVEL_LABELS = {
    LEVEL_GROUP_LEADER: "Group leader",
    LEVEL_PRESIDENTE: "Presidente",
    LEVEL_SECRETARIO: "Secretário",
    LEVEL_AUXILIAR: "Auxiliar",
    LEVEL_NO_ACCESS: "No access",
}


def get_category_role_label(role: CategoryRoleType | str) -> str:
    try:
        return CATEGORY_ROLES[CategoryRoleType(role)]["label"]
    except ValueError:
        return str(role)


def get_permission_level_label(level: int) -> str:
    return PERMISSION_LEVEL_LABELS.get(level, "Unknown")


def get_category_role_description(role: CategoryRoleType | str) -> Optional[str]:
    try:
        return CATEGORY_ROLES[CategoryRoleType(role)]["description"]
    except ValueError:
        return None
