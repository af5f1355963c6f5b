"""
Pydantic models and custom exceptions for invitations and access logging.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from visitor_access.server.services.identifier_codec import qr_payload
from visitor_access.storage.access_log import AccessDirection, AccessMethod
from visitor_access.storage.invitation import InvitationType


class InvitationError(Exception):
    """Base exception for invitation errors."""

    pass


class UnauthenticatedError(InvitationError):
    """Raised when no caller identity is available."""

    def __init__(self, message: str = 'User not authenticated'):
        super().__init__(message)


class InvitationNotFoundError(InvitationError):
    """Raised when no invitation matches the given identifier."""

    def __init__(self, message: str = 'Invitation not found'):
        super().__init__(message)


class PersistenceError(InvitationError):
    """Raised when the invitation or access log store fails a read or write."""

    def __init__(self, message: str = 'Could not save changes'):
        super().__init__(message)

    @classmethod
    def from_exception(
        cls, error: Exception, message: str = 'Could not save changes'
    ) -> 'PersistenceError':
        """Wrap a store exception, keeping it as the cause."""
        wrapped = cls(message)
        wrapped.__cause__ = error
        return wrapped


class InvalidAccessRequestError(InvitationError):
    """Raised when an access registration request is malformed."""

    def __init__(self, message: str = 'Invalid access request'):
        super().__init__(message)


class InvitationValidationError(InvitationError):
    """Raised when validation fails for reasons unrelated to the invitation itself."""

    def __init__(self, message: str = 'Could not validate the invitation'):
        super().__init__(message)


class InvitationCreate(BaseModel):
    """Request model for creating an invitation."""

    model_config = ConfigDict(str_strip_whitespace=True)

    visitor_name: str = Field(min_length=1, max_length=255)
    visitor_phone: str | None = None
    visitor_email: EmailStr | None = None
    type: InvitationType = InvitationType.SINGLE
    valid_from: datetime
    valid_until: datetime | None = None
    notes: str | None = None


class CreateInvitationParams(InvitationCreate):
    """Parameters for creating an invitation in an organization."""

    organization_id: UUID


class InvitationResponse(BaseModel):
    """Response model for invitation details."""

    id: UUID
    organization_id: UUID
    created_by: UUID
    visitor_name: str
    visitor_phone: str | None = None
    visitor_email: str | None = None
    type: str
    status: str
    valid_from: str
    valid_until: str | None = None
    short_code: str
    qr_payload: str
    notes: str | None = None
    used_at: str | None = None
    created_at: str

    @classmethod
    def from_invitation(cls, invitation) -> 'InvitationResponse':
        """Create an InvitationResponse from an Invitation entity."""
        return cls(
            id=invitation.id,
            organization_id=invitation.organization_id,
            created_by=invitation.created_by,
            visitor_name=invitation.visitor_name,
            visitor_phone=invitation.visitor_phone,
            visitor_email=invitation.visitor_email,
            type=invitation.type,
            status=invitation.status,
            valid_from=invitation.valid_from.isoformat(),
            valid_until=(
                invitation.valid_until.isoformat() if invitation.valid_until else None
            ),
            short_code=invitation.short_code,
            qr_payload=qr_payload(invitation.qr_token),
            notes=invitation.notes,
            used_at=invitation.used_at.isoformat() if invitation.used_at else None,
            created_at=invitation.created_at.isoformat(),
        )


class CancelResponse(BaseModel):
    success: bool


class ValidateRequest(BaseModel):
    """Request model for validating a scanned or typed code."""

    code: str = Field(min_length=1)


class ValidateResponse(BaseModel):
    valid: bool
    reason: str
    message: str
    method: AccessMethod | None = None
    invitation: InvitationResponse | None = None


class RegisterAccessRequest(BaseModel):
    invitation_id: UUID
    direction: AccessDirection = AccessDirection.ENTRY
    method: AccessMethod = AccessMethod.QR_SCAN


class ManualEntryRequest(BaseModel):
    """Request model for logging a visitor without an invitation."""

    model_config = ConfigDict(str_strip_whitespace=True)

    visitor_name: str = Field(min_length=1, max_length=255)
    visitor_phone: str | None = None
    direction: AccessDirection = AccessDirection.ENTRY
    notes: str | None = None


class AccessResponse(BaseModel):
    success: bool
    warning: str | None = None


class AccessLogResponse(BaseModel):
    """Response model for an access log entry."""

    id: UUID
    invitation_id: UUID | None = None
    authorized_by: UUID
    visitor_name: str
    direction: str
    method: str
    notes: str | None = None
    created_at: str

    @classmethod
    def from_access_log(cls, entry) -> 'AccessLogResponse':
        return cls(
            id=entry.id,
            invitation_id=entry.invitation_id,
            authorized_by=entry.authorized_by,
            visitor_name=entry.visitor_name,
            direction=entry.direction,
            method=entry.method,
            notes=entry.notes,
            created_at=entry.created_at.isoformat(),
        )

