from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.guests.dtos import AccountStatus
from src.models.base import Base, TimeStamp


class User(Base, TimeStamp):
    """A person on the guest list. Becomes a login account on registration."""

    __tablename__ = TableNames.USERS.value
    __table_args__ = (Index("idx_users_name", "last_name", "first_name"),)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Partner links are kept symmetric by the write models, not the schema
    partner_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.USERS.value}.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    plus_one_allowed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # NULL until registered
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True, index=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)

    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    account_status: Mapped[str] = mapped_column(
        Enum(
            AccountStatus,
            name="account_status_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=AccountStatus.GUEST,
        nullable=False,
        index=True,
    )
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None, index=True
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<User {self.full_name} - {self.account_status}>"
