"""
SQLAlchemy model for visitor invitations.
"""

from enum import Enum
from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Text, Uuid

from visitor_access.storage.base import Base
from visitor_access.utils.datetime import utc_now


class InvitationStatus(str, Enum):
    """Lifecycle states of an invitation."""

    ACTIVE = 'active'
    USED = 'used'
    EXPIRED = 'expired'
    CANCELLED = 'cancelled'


class InvitationType(str, Enum):
    """Consumption semantics of an invitation."""

    SINGLE = 'single'
    RECURRING = 'recurring'
    TEMPORARY = 'temporary'


class Invitation(Base):  # type: ignore
    """Visitor invitation model.

    Represents a resident's invitation for a visitor to enter the community.
    Each invitation carries two visitor-facing identifiers: a long QR token
    and a six character short code a guard can type by hand. Only `status`
    and `used_at` change after creation.
    """

    __tablename__ = 'invitations'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    organization_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    created_by = Column(Uuid(as_uuid=True), nullable=False, index=True)
    visitor_name = Column(String(255), nullable=False)
    visitor_phone = Column(String(50), nullable=True)
    visitor_email = Column(String(255), nullable=True)
    type = Column(String(20), nullable=False, default=InvitationType.SINGLE.value)
    valid_from = Column(DateTime, nullable=False)
    # NULL means the invitation never expires on its own
    valid_until = Column(DateTime, nullable=True, index=True)
    qr_token = Column(String(64), nullable=False, unique=True, index=True)
    short_code = Column(String(6), nullable=False, unique=True, index=True)
    notes = Column(Text, nullable=True)
    used_at = Column(DateTime, nullable=True)
    status = Column(
        String(20),
        nullable=False,
        default=InvitationStatus.ACTIVE.value,
        index=True,
    )
    created_at = Column(DateTime, nullable=False, default=utc_now)
