"""
Data store handle.

All reads and writes the permission resolver, the code generator and the
category routers need go through this object, so they can run against an
in-memory store in tests. SQLAlchemyStore is the production implementation
over an AsyncSession.
"""
from typing import Optional, Protocol
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.permissions import get_category_role_description, get_category_role_label
from app.models.auth import SystemAdmin
from app.models.domain import Group, Member, FinancialCategory, CategoryRole
from app.models.enums import CategoryRoleType, CodeNamespace
from app.schemas.auth import AdminRead
from app.schemas.group import GroupLeaders, MemberRead, CategoryRead, CategoryLeaderRead


class PermissionStore(Protocol):
    async def get_group_leaders(self, group_id: int) -> Optional[GroupLeaders]: ...

    async def get_active_category_role(self, category_id: int, member_id: int) -> Optional[CategoryRoleType]: ...

    async def is_category_locked(self, category_id: int) -> Optional[bool]: ...


class CodeStore(Protocol):
    async def code_exists(self, namespace: CodeNamespace, code: str, exclude_id: Optional[int] = None) -> bool: ...


# Registry table and column holding the codes of each namespace
CODE_COLUMNS = {
    CodeNamespace.MEMBER: (Member, Member.member_code),
    CodeNamespace.GROUP: (Group, Group.access_code),
}


class SQLAlchemyStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    # --- permission facts ---

    async def get_group_leaders(self, group_id: int) -> Optional[GroupLeaders]:
        result = await self.db.execute(
            select(Group.president_id, Group.vice_president_1_id, Group.vice_president_2_id).where(
                Group.id == group_id
            )
        )
        row = result.one_or_none()
        if row is None:
            return None
        return GroupLeaders(
            president_id=row.president_id,
            vice_president_1_id=row.vice_president_1_id,
            vice_president_2_id=row.vice_president_2_id,
        )

    async def get_active_category_role(self, category_id: int, member_id: int) -> Optional[CategoryRoleType]:
        result = await self.db.execute(
            select(CategoryRole.role)
            .where(
                CategoryRole.category_id == category_id,
                CategoryRole.member_id == member_id,
                CategoryRole.is_active.is_(True),
            )
            .limit(1)
        )
        return result.scalars().first()

    async def is_category_locked(self, category_id: int) -> Optional[bool]:
        result = await self.db.execute(
            select(FinancialCategory.is_locked).where(FinancialCategory.id == category_id)
        )
        return result.scalar_one_or_none()

    # --- codes ---

    async def code_exists(self, namespace: CodeNamespace, code: str, exclude_id: Optional[int] = None) -> bool:
        model, column = CODE_COLUMNS[namespace]
        query = select(model.id).where(column == code)
        if exclude_id is not None:
            query = query.where(model.id != exclude_id)

        result = await self.db.execute(query.limit(1))
        return result.scalars().first() is not None

    # --- identities ---

    async def get_admin(self, admin_id: int) -> Optional[AdminRead]:
        result = await self.db.execute(select(SystemAdmin).where(SystemAdmin.id == admin_id))
        admin = result.scalar_one_or_none()
        return AdminRead.model_validate(admin) if admin else None

    async def get_admin_by_code(self, access_code: str) -> Optional[AdminRead]:
        result = await self.db.execute(
            select(SystemAdmin).where(SystemAdmin.access_code == access_code, SystemAdmin.is_active.is_(True))
        )
        admin = result.scalars().first()
        return AdminRead.model_validate(admin) if admin else None

    async def get_member(self, member_id: int) -> Optional[MemberRead]:
        result = await self.db.execute(select(Member).where(Member.id == member_id))
        member = result.scalar_one_or_none()
        return MemberRead.model_validate(member) if member else None

    async def get_member_by_code(self, member_code: str) -> Optional[MemberRead]:
        result = await self.db.execute(
            select(Member)
            .join(Group, Member.group_id == Group.id)
            .where(Member.member_code == member_code, Member.is_active.is_(True), Group.is_active.is_(True))
        )
        member = result.scalars().first()
        return MemberRead.model_validate(member) if member else None

    # --- categories ---

    async def get_category(self, category_id: int) -> Optional[CategoryRead]:
        result = await self.db.execute(select(FinancialCategory).where(FinancialCategory.id == category_id))
        category = result.scalar_one_or_none()
        return CategoryRead.model_validate(category) if category else None

    async def set_category_locked(self, category_id: int, is_locked: bool) -> Optional[CategoryRead]:
        await self.db.execute(
            update(FinancialCategory).where(FinancialCategory.id == category_id).values(is_locked=is_locked)
        )
        await self.db.commit()
        return await self.get_category(category_id)

    async def list_category_leaders(self, category_id: int) -> list[CategoryLeaderRead]:
        result = await self.db.execute(
            select(CategoryRole, Member.name)
            .join(Member, CategoryRole.member_id == Member.id)
            .where(CategoryRole.category_id == category_id, CategoryRole.is_active.is_(True))
            .order_by(CategoryRole.id)
        )
        return [self._leader_read(role, member_name) for role, member_name in result.all()]

    async def add_category_role(
        self,
        category_id: int,
        member_id: int,
        group_id: int,
        role: CategoryRoleType,
        assigned_by: Optional[int] = None,
    ) -> CategoryLeaderRead:
        category_role = CategoryRole(
            category_id=category_id,
            member_id=member_id,
            group_id=group_id,
            role=role,
            is_active=True,
            assigned_by=assigned_by,
        )
        self.db.add(category_role)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race on uq_category_roles_active_member
            await self.db.rollback()
            raise
        await self.db.refresh(category_role)

        member = await self.get_member(member_id)
        return self._leader_read(category_role, member.name if member else None)

    async def delete_category_role(self, category_id: int, leader_id: int) -> bool:
        result = await self.db.execute(
            delete(CategoryRole).where(CategoryRole.id == leader_id, CategoryRole.category_id == category_id)
        )
        await self.db.commit()
        return result.rowcount > 0

    @staticmethod
    def _leader_read(category_role: CategoryRole, member_name: Optional[str]) -> CategoryLeaderRead:
        return CategoryLeaderRead(
            id=category_role.id,
            category_id=category_role.category_id,
            member_id=category_role.member_id,
            member_name=member_name,
            role=category_role.role,
            role_label=get_category_role_label(category_role.role),
            role_description=get_category_role_description(category_role.role),
            is_active=category_role.is_active,
        )
