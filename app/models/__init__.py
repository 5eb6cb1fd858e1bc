from app.models.auth import SystemAdmin
from app.models.domain import Group, Member, FinancialCategory, CategoryRole

__all__ = [
    "SystemAdmin",
    "Group",
    "Member",
    "FinancialCategory",
    "CategoryRole",
]
