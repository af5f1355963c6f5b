"""Service for the visitor invitation lifecycle."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from visitor_access.core.logger import visitor_access_logger as logger
from visitor_access.server.routes.invitation_models import (
    CreateInvitationParams,
    InvitationNotFoundError,
    InvitationValidationError,
    PersistenceError,
    UnauthenticatedError,
)
from visitor_access.server.services.identifier_codec import (
    LookupKind,
    generate_qr_token,
    generate_short_code,
    is_short_code,
    normalize_lookup_key,
)
from visitor_access.server.services.invitation_results import (
    InvitationListResult,
    InvitationResult,
    OperationResult,
    ValidationReason,
    ValidationResult,
)
from visitor_access.storage.access_log import AccessMethod
from visitor_access.storage.invitation import (
    Invitation,
    InvitationStatus,
    InvitationType,
)
from visitor_access.storage.invitation_store import InvitationStore
from visitor_access.utils.datetime import ensure_naive_utc, utc_now


def invitation_in_scope(
    invitation: Invitation,
    organization_id: Optional[UUID] = None,
    owner_id: Optional[UUID] = None,
) -> bool:
    """Whether an invitation belongs to the given organization and creator.

    A scope left as None is not checked.
    """
    if organization_id is not None and invitation.organization_id != organization_id:
        return False
    if owner_id is not None and invitation.created_by != owner_id:
        return False
    return True


@dataclass
class InvitationService:
    """Service for invitation operations.

    This is the only place invitation status transitions are decided.
    """

    invitation_store: InvitationStore

    async def create_invitation(
        self,
        params: CreateInvitationParams,
        caller_id: Optional[UUID],
    ) -> InvitationResult:
        """Create a new visitor invitation.

        This method:
        1. Checks a caller identity is available
        2. Generates the QR token and short code
        3. Persists the invitation as active and unused

        Args:
            params: Visitor details, type and validity window
            caller_id: The authenticated resident creating the invitation

        Returns:
            InvitationResult: The created invitation, or UnauthenticatedError /
            PersistenceError
        """
        if not caller_id:
            logger.warning(
                'Invitation creation without caller identity',
                extra={'organization_id': str(params.organization_id)},
            )
            return InvitationResult(invitation=None, error=UnauthenticatedError())

        invitation = Invitation(
            organization_id=params.organization_id,
            created_by=caller_id,
            visitor_name=params.visitor_name,
            visitor_phone=params.visitor_phone or None,
            visitor_email=params.visitor_email or None,
            type=InvitationType(params.type).value,
            valid_from=ensure_naive_utc(params.valid_from),
            valid_until=ensure_naive_utc(params.valid_until),
            qr_token=generate_qr_token(),
            short_code=generate_short_code(),
            notes=params.notes or None,
            used_at=None,
            status=InvitationStatus.ACTIVE.value,
        )

        try:
            invitation = await self.invitation_store.insert(invitation)
        except Exception as e:
            logger.exception(
                'Failed to create invitation',
                extra={
                    'organization_id': str(params.organization_id),
                    'created_by': str(caller_id),
                    'error': str(e),
                },
            )
            return InvitationResult(
                invitation=None,
                error=PersistenceError.from_exception(e, 'Could not create invitation'),
            )

        return InvitationResult(invitation=invitation)

    async def validate_invitation(
        self,
        raw_code: str,
        now: Optional[datetime] = None,
        organization_id: Optional[UUID] = None,
    ) -> ValidationResult:
        """Validate a scanned QR payload or typed short code.

        Rules are checked in order and the first failing rule decides the
        result: not found, cancelled, expired status, single-use already
        used, not yet valid, past valid_until. A recurring invitation with
        status 'used' is still valid. An active invitation found past its
        valid_until is marked expired in the store on the way out.

        An invitation of another organization is reported as not found.
        Never raises; store failures are reported as VALIDATION_ERROR.

        Args:
            raw_code: Scanner output or the code typed by the guard
            now: Evaluation time, defaults to the current UTC time
            organization_id: The guard's organization, if the lookup is scoped

        Returns:
            ValidationResult
        """
        now = ensure_naive_utc(now) or utc_now()

        try:
            lookup = normalize_lookup_key(raw_code)
            if lookup.kind == LookupKind.QR:
                method = AccessMethod.QR_SCAN
                invitation = await self.invitation_store.find_by_qr_token(lookup.key)
            elif is_short_code(lookup.key):
                method = AccessMethod.SHORT_CODE
                invitation = await self.invitation_store.find_by_short_code(lookup.key)
            else:
                logger.warning(
                    'Invitation rejected: malformed short code',
                    extra={'code_length': len(lookup.key)},
                )
                return ValidationResult(valid=False, reason=ValidationReason.NOT_FOUND)

            if invitation and not invitation_in_scope(invitation, organization_id):
                logger.warning(
                    'Invitation rejected: other organization',
                    extra={
                        'invitation_id': str(invitation.id),
                        'organization_id': str(organization_id),
                    },
                )
                invitation = None

            if not invitation:
                logger.warning(
                    'Invitation rejected: not found',
                    extra={'lookup_kind': lookup.kind.value},
                )
                return ValidationResult(valid=False, reason=ValidationReason.NOT_FOUND)

            result = await self._evaluate(invitation, now)
            result.method = method
            return result
        except Exception as e:
            logger.exception(
                'Error validating invitation',
                extra={'error': str(e)},
            )
            error = InvitationValidationError()
            error.__cause__ = e
            return ValidationResult(
                valid=False, reason=ValidationReason.VALIDATION_ERROR, error=error
            )

    async def _evaluate(self, invitation: Invitation, now: datetime) -> ValidationResult:
        status = invitation.status

        if status == InvitationStatus.CANCELLED.value:
            return self._reject(invitation, ValidationReason.CANCELLED)

        if status == InvitationStatus.EXPIRED.value:
            return self._reject(invitation, ValidationReason.EXPIRED)

        # 'used' only exhausts single-use invitations
        if (
            status == InvitationStatus.USED.value
            and invitation.type == InvitationType.SINGLE.value
        ):
            return self._reject(invitation, ValidationReason.ALREADY_USED)

        valid_from = ensure_naive_utc(invitation.valid_from)
        if now < valid_from:
            result = self._reject(invitation, ValidationReason.NOT_YET_VALID)
            result.valid_from = valid_from
            return result

        valid_until = ensure_naive_utc(invitation.valid_until)
        if valid_until is not None and now > valid_until:
            invitation = await self._mark_expired(invitation)
            return self._reject(invitation, ValidationReason.EXPIRED)

        return ValidationResult(
            valid=True, reason=ValidationReason.VALID, invitation=invitation
        )

    async def _mark_expired(self, invitation: Invitation) -> Invitation:
        """Persist the expired status; a failed write leaves the decision unchanged."""
        try:
            updated = await self.invitation_store.update_status(
                invitation.id, InvitationStatus.EXPIRED.value
            )
        except Exception as e:
            logger.warning(
                'Failed to mark invitation as expired',
                extra={'invitation_id': str(invitation.id), 'error': str(e)},
            )
            return invitation
        return updated or invitation

    @staticmethod
    def _reject(invitation: Invitation, reason: ValidationReason) -> ValidationResult:
        logger.warning(
            'Invitation rejected',
            extra={
                'invitation_id': str(invitation.id),
                'reason': reason.value,
                'status': invitation.status,
            },
        )
        return ValidationResult(valid=False, reason=reason, invitation=invitation)

    async def get_invitations(
        self,
        owner_id: UUID,
        statuses: Optional[Sequence[InvitationStatus | str]] = None,
        organization_id: Optional[UUID] = None,
    ) -> InvitationListResult:
        """List the invitations a user created, newest first.

        Args:
            owner_id: The creating user
            statuses: Optional statuses to filter by
            organization_id: Optional organization to filter by

        Returns:
            InvitationListResult: Empty with a PersistenceError when the store fails
        """
        try:
            invitations = await self.invitation_store.list_by_owner(
                owner_id, statuses, organization_id=organization_id
            )
        except Exception as e:
            logger.exception(
                'Error fetching invitations',
                extra={'owner_id': str(owner_id), 'error': str(e)},
            )
            return InvitationListResult(
                invitations=[],
                error=PersistenceError.from_exception(e, 'Could not load invitations'),
            )
        return InvitationListResult(invitations=invitations)

    async def get_invitation_by_id(
        self,
        invitation_id: UUID,
        organization_id: Optional[UUID] = None,
        owner_id: Optional[UUID] = None,
    ) -> InvitationResult:
        """Fetch one invitation.

        A missing invitation, or one outside the given organization or
        creator, is returned as None without an error.
        """
        try:
            invitation = await self.invitation_store.find_by_id(invitation_id)
        except Exception as e:
            logger.exception(
                'Error fetching invitation',
                extra={'invitation_id': str(invitation_id), 'error': str(e)},
            )
            return InvitationResult(
                invitation=None,
                error=PersistenceError.from_exception(e, 'Could not load invitation'),
            )

        if invitation and not invitation_in_scope(invitation, organization_id, owner_id):
            logger.warning(
                'Invitation requested outside its scope',
                extra={
                    'invitation_id': str(invitation_id),
                    'organization_id': str(organization_id),
                    'owner_id': str(owner_id),
                },
            )
            return InvitationResult(invitation=None)

        return InvitationResult(invitation=invitation)

    async def cancel_invitation(
        self,
        invitation_id: UUID,
        organization_id: Optional[UUID] = None,
        owner_id: Optional[UUID] = None,
    ) -> OperationResult:
        """Cancel an invitation whatever its current status.

        This method:
        1. Checks the invitation belongs to the given organization and creator
           (only when either is given)
        2. Writes the cancelled status

        Args:
            invitation_id: The invitation to cancel
            organization_id: Optional organization the invitation must belong to
            owner_id: Optional creator the invitation must belong to

        Returns:
            OperationResult: InvitationNotFoundError if it does not exist or is
            out of scope, PersistenceError if a read or write fails
        """
        if organization_id is not None or owner_id is not None:
            found = await self.get_invitation_by_id(
                invitation_id, organization_id, owner_id
            )
            if found.error:
                return OperationResult(success=False, error=found.error)
            if not found.invitation:
                return OperationResult(success=False, error=InvitationNotFoundError())

        try:
            invitation = await self.invitation_store.update_status(
                invitation_id, InvitationStatus.CANCELLED.value
            )
        except Exception as e:
            logger.exception(
                'Error cancelling invitation',
                extra={'invitation_id': str(invitation_id), 'error': str(e)},
            )
            return OperationResult(
                success=False,
                error=PersistenceError.from_exception(e, 'Could not cancel invitation'),
            )

        if not invitation:
            return OperationResult(success=False, error=InvitationNotFoundError())

        return OperationResult(success=True)
