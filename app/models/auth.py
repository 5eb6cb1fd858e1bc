from sqlalchemy import String, Boolean, Enum as SAEnum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.core.db import Base
from app.models.base import TimestampMixin
from app.models.enums import AdminLevel


class SystemAdmin(Base, TimestampMixin):
    __tablename__ = "system_admins"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, index=True, nullable=True)
    access_code: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)
    permission_level: Mapped[AdminLevel] = mapped_column(
        SAEnum(AdminLevel, native_enum=False, length=30), default=AdminLevel.ADMIN_SUPERVISOR, nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Lower-level admins may also sit in a group as a regular member
    member_id: Mapped[int | None] = mapped_column(ForeignKey("members.id", ondelete="SET NULL"), nullable=True)

    member: Mapped["Member"] = relationship("Member")
