"""SQLAlchemy model for access log entries."""

from enum import Enum
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid

from visitor_access.storage.base import Base
from visitor_access.utils.datetime import utc_now


class AccessDirection(str, Enum):
    ENTRY = 'entry'
    EXIT = 'exit'


class AccessMethod(str, Enum):
    """How the guard authorized the access."""

    QR_SCAN = 'qr_scan'
    SHORT_CODE = 'short_code'
    MANUAL = 'manual'


class AccessLog(Base):  # type: ignore
    """Immutable record of a visitor entering or leaving.

    Manual entries have no invitation. The visitor name is copied at log
    time so the entry stays readable if the invitation changes later.
    """

    __tablename__ = 'access_logs'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    organization_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    invitation_id = Column(
        Uuid(as_uuid=True),
        ForeignKey('invitations.id', ondelete='SET NULL'),
        nullable=True,
        index=True,
    )
    authorized_by = Column(Uuid(as_uuid=True), nullable=False)
    visitor_name = Column(String(255), nullable=False)
    visitor_phone = Column(String(50), nullable=True)
    direction = Column(String(10), nullable=False, default=AccessDirection.ENTRY.value)
    method = Column(String(20), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now, index=True)
