from decimal import Decimal
from sqlalchemy import String, Boolean, Integer, Numeric, Text, Enum as SAEnum, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.core.db import Base
from app.models.base import TimestampMixin
from app.models.enums import CategoryRoleType


class Group(Base, TimestampMixin):
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    access_code: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Leadership slots - each one holds at most one member of this group.
    # use_alter breaks the groups <-> members cycle at table creation.
    president_id: Mapped[int | None] = mapped_column(
        ForeignKey("members.id", ondelete="SET NULL", use_alter=True), nullable=True
    )
    vice_president_1_id: Mapped[int | None] = mapped_column(
        ForeignKey("members.id", ondelete="SET NULL", use_alter=True), nullable=True
    )
    vice_president_2_id: Mapped[int | None] = mapped_column(
        ForeignKey("members.id", ondelete="SET NULL", use_alter=True), nullable=True
    )

    members: Mapped[list["Member"]] = relationship(
        "Member", back_populates="group", foreign_keys="Member.group_id"
    )
    categories: Mapped[list["FinancialCategory"]] = relationship("FinancialCategory", back_populates="group")


class Member(Base, TimestampMixin):
    __tablename__ = "members"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    member_code: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)

    group: Mapped["Group"] = relationship("Group", back_populates="members", foreign_keys=[group_id])


class FinancialCategory(Base, TimestampMixin):
    __tablename__ = "financial_categories"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_balance: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=0, nullable=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)

    group: Mapped["Group"] = relationship("Group", back_populates="categories")
    roles: Mapped[list["CategoryRole"]] = relationship(
        "CategoryRole", back_populates="category", cascade="all, delete-orphan"
    )


class CategoryRole(Base, TimestampMixin):
    """
    Category-scoped leadership assignment.
    Only active rows count; at most one active row per (category, member).
    """
    __tablename__ = "category_roles"
    __table_args__ = (
        Index(
            "uq_category_roles_active_member",
            "category_id",
            "member_id",
            unique=True,
            postgresql_where=text("is_active"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    role: Mapped[CategoryRoleType] = mapped_column(
        SAEnum(CategoryRoleType, native_enum=False, length=20), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    category_id: Mapped[int] = mapped_column(
        ForeignKey("financial_categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    member_id: Mapped[int] = mapped_column(ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)
    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    assigned_by: Mapped[int | None] = mapped_column(Integer, nullable=True)

    category: Mapped["FinancialCategory"] = relationship("FinancialCategory", back_populates="roles")
    member: Mapped["Member"] = relationship("Member")
