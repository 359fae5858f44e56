from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.guests.dtos import ResponseStatus
from src.models.base import Base, TimeStamp, utcnow
from src.models.user import User

__all__ = ["RSVP", "User"]


class RSVP(Base, TimeStamp):
    __tablename__ = TableNames.RSVPS.value

    # Who this response is for. One row per person.
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.USERS.value}.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    # Set when a partner (or inviting guest) responded on this person's behalf
    partner_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.USERS.value}.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    response_status: Mapped[str] = mapped_column(
        Enum(
            ResponseStatus,
            name="response_status_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=ResponseStatus.PENDING,
        nullable=False,
        index=True,
    )
    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    responded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<RSVP {self.user_id} - {self.response_status}>"
