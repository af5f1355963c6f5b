"""Result pairs returned by the invitation and access services.

Services report failures as values rather than raising, so callers can
branch on `error` (or `valid`) without exception handling.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from visitor_access.storage.access_log import AccessLog, AccessMethod
from visitor_access.storage.invitation import Invitation


class ValidationReason(str, Enum):
    VALID = 'valid'
    NOT_FOUND = 'not_found'
    CANCELLED = 'cancelled'
    EXPIRED = 'expired'
    ALREADY_USED = 'already_used'
    NOT_YET_VALID = 'not_yet_valid'
    VALIDATION_ERROR = 'validation_error'


REASON_MESSAGES: dict[ValidationReason, str] = {
    ValidationReason.VALID: 'Invitation is valid',
    ValidationReason.NOT_FOUND: 'Invitation not found',
    ValidationReason.CANCELLED: 'This invitation has been cancelled',
    ValidationReason.EXPIRED: 'This invitation has expired',
    ValidationReason.ALREADY_USED: 'This invitation has already been used',
    ValidationReason.NOT_YET_VALID: 'This invitation is not valid yet',
    ValidationReason.VALIDATION_ERROR: 'Could not validate the invitation',
}


@dataclass
class ValidationResult:
    """Outcome of validating a scanned or typed code.

    `invitation` is set whenever a record was found, including rejections.
    `valid_from` is only set for NOT_YET_VALID and `error` only for
    VALIDATION_ERROR. `method` records which identifier resolved the
    invitation, to be passed on to access registration.
    """

    valid: bool
    reason: ValidationReason
    invitation: Optional[Invitation] = None
    method: Optional[AccessMethod] = None
    valid_from: Optional[datetime] = None
    error: Optional[Exception] = None

    @property
    def message(self) -> str:
        if self.reason == ValidationReason.NOT_YET_VALID and self.valid_from:
            return f'This invitation is valid from {self.valid_from.isoformat()}'
        return REASON_MESSAGES[self.reason]


@dataclass
class InvitationResult:
    invitation: Optional[Invitation]
    error: Optional[Exception] = None


@dataclass
class InvitationListResult:
    invitations: list[Invitation] = field(default_factory=list)
    error: Optional[Exception] = None


@dataclass
class OperationResult:
    """Outcome of a write with no payload.

    `warning` describes a side effect that failed without changing the
    reported outcome.
    """

    success: bool
    error: Optional[Exception] = None
    warning: Optional[str] = None


@dataclass
class AccessLogListResult:
    logs: list[AccessLog] = field(default_factory=list)
    error: Optional[Exception] = None
