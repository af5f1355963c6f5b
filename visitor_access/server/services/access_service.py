"""Service for registering physical access events at the gate."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from visitor_access.core.config import get_recent_access_log_limit
from visitor_access.core.logger import visitor_access_logger as logger
from visitor_access.server.routes.invitation_models import (
    InvalidAccessRequestError,
    InvitationNotFoundError,
    PersistenceError,
)
from visitor_access.server.services.invitation_results import (
    AccessLogListResult,
    OperationResult,
)
from visitor_access.server.services.invitation_service import invitation_in_scope
from visitor_access.storage.access_log import AccessDirection, AccessLog, AccessMethod
from visitor_access.storage.access_log_store import AccessLogStore
from visitor_access.storage.invitation import (
    Invitation,
    InvitationStatus,
    InvitationType,
)
from visitor_access.storage.invitation_store import InvitationStore
from visitor_access.utils.datetime import ensure_naive_utc, utc_now

CONSUMPTION_WARNING = 'Access was logged but the invitation could not be marked as used'


@dataclass
class AccessService:
    """Service for access logging operations.

    Registration does not validate the invitation. Callers validate on scan,
    let the guard confirm, then register.
    """

    invitation_store: InvitationStore
    access_log_store: AccessLogStore

    async def register_access(
        self,
        invitation_id: UUID,
        guard_id: UUID,
        direction: AccessDirection | str = AccessDirection.ENTRY,
        method: AccessMethod | str = AccessMethod.QR_SCAN,
        now: Optional[datetime] = None,
        organization_id: Optional[UUID] = None,
    ) -> OperationResult:
        """Log a visitor's access through an invitation and consume it if single-use.

        This method:
        1. Fetches the invitation
        2. Appends the access log entry (nothing else happens if this fails)
        3. Marks active single-use invitations as used

        A failed consumption write does not fail the registration; it is
        reported in `warning` instead.

        Args:
            invitation_id: The invitation the visitor presented
            guard_id: The guard authorizing the access
            direction: entry or exit
            method: How the invitation was presented (qr_scan, short_code)
            now: Registration time, defaults to the current UTC time
            organization_id: The guard's organization, if registration is scoped

        Returns:
            OperationResult: InvalidAccessRequestError, InvitationNotFoundError
            or PersistenceError on failure
        """
        now = ensure_naive_utc(now) or utc_now()
        try:
            direction = AccessDirection(direction)
            method = AccessMethod(method)
        except ValueError as e:
            return OperationResult(
                success=False, error=InvalidAccessRequestError(str(e))
            )

        logger.info(
            'Registering access',
            extra={
                'invitation_id': str(invitation_id),
                'guard_id': str(guard_id),
                'direction': direction.value,
                'method': method.value,
            },
        )

        # Step 1: Get the invitation
        try:
            invitation = await self.invitation_store.find_by_id(invitation_id)
        except Exception as e:
            logger.exception(
                'Error fetching invitation for access registration',
                extra={'invitation_id': str(invitation_id), 'error': str(e)},
            )
            invitation = None

        if invitation and not invitation_in_scope(invitation, organization_id):
            logger.warning(
                'Access registration for another organization',
                extra={
                    'invitation_id': str(invitation_id),
                    'organization_id': str(organization_id),
                },
            )
            invitation = None

        if not invitation:
            return OperationResult(success=False, error=InvitationNotFoundError())

        # Step 2: Append the access log entry
        entry = AccessLog(
            organization_id=invitation.organization_id,
            invitation_id=invitation.id,
            authorized_by=guard_id,
            visitor_name=invitation.visitor_name,
            visitor_phone=invitation.visitor_phone,
            direction=direction.value,
            method=method.value,
            created_at=now,
        )
        try:
            await self.access_log_store.append(entry)
        except Exception as e:
            logger.exception(
                'Failed to write access log',
                extra={'invitation_id': str(invitation_id), 'error': str(e)},
            )
            return OperationResult(
                success=False,
                error=PersistenceError.from_exception(e, 'Could not register access'),
            )

        # Step 3: Consume single-use invitations
        warning = await self._consume(invitation, now)

        return OperationResult(success=True, warning=warning)

    async def _consume(self, invitation: Invitation, now: datetime) -> Optional[str]:
        if invitation.type != InvitationType.SINGLE.value:
            return None

        # Only active -> used; a used invitation keeps its first used_at and
        # cancelled or expired ones keep their status
        if invitation.status != InvitationStatus.ACTIVE.value:
            return None

        try:
            updated = await self.invitation_store.update_status(
                invitation.id, InvitationStatus.USED.value, used_at=now
            )
        except Exception as e:
            logger.warning(
                'Failed to mark invitation as used',
                extra={'invitation_id': str(invitation.id), 'error': str(e)},
            )
            return CONSUMPTION_WARNING

        if not updated:
            logger.warning(
                'Invitation disappeared before it could be marked as used',
                extra={'invitation_id': str(invitation.id)},
            )
            return CONSUMPTION_WARNING

        return None

    async def register_manual_entry(
        self,
        organization_id: UUID,
        guard_id: UUID,
        visitor_name: str,
        direction: AccessDirection | str = AccessDirection.ENTRY,
        visitor_phone: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> OperationResult:
        """Log a visitor admitted by the guard without an invitation.

        Returns:
            OperationResult: InvalidAccessRequestError for an empty visitor
            name or unknown direction, PersistenceError if the write fails
        """
        if not visitor_name or not visitor_name.strip():
            return OperationResult(
                success=False,
                error=InvalidAccessRequestError('Visitor name is required'),
            )
        try:
            direction = AccessDirection(direction)
        except ValueError as e:
            return OperationResult(
                success=False, error=InvalidAccessRequestError(str(e))
            )

        entry = AccessLog(
            organization_id=organization_id,
            invitation_id=None,
            authorized_by=guard_id,
            visitor_name=visitor_name.strip(),
            visitor_phone=(visitor_phone or '').strip() or None,
            direction=direction.value,
            method=AccessMethod.MANUAL.value,
            notes=(notes or '').strip() or None,
            created_at=ensure_naive_utc(now) or utc_now(),
        )
        try:
            await self.access_log_store.append(entry)
        except Exception as e:
            logger.exception(
                'Failed to write manual access log',
                extra={'organization_id': str(organization_id), 'error': str(e)},
            )
            return OperationResult(
                success=False,
                error=PersistenceError.from_exception(e, 'Could not register entry'),
            )

        return OperationResult(success=True)

    async def get_recent_access_logs(
        self, organization_id: UUID, limit: Optional[int] = None
    ) -> AccessLogListResult:
        if limit is None:
            limit = get_recent_access_log_limit()
        try:
            logs = await self.access_log_store.list_recent(organization_id, limit)
        except Exception as e:
            logger.exception(
                'Error fetching recent access logs',
                extra={'organization_id': str(organization_id), 'error': str(e)},
            )
            return AccessLogListResult(
                logs=[],
                error=PersistenceError.from_exception(e, 'Could not load access logs'),
            )
        return AccessLogListResult(logs=logs)

    async def get_access_history(self, invitation_id: UUID) -> AccessLogListResult:
        """All access events recorded against an invitation, newest first."""
        try:
            logs = await self.access_log_store.list_for_invitation(invitation_id)
        except Exception as e:
            logger.exception(
                'Error fetching invitation access history',
                extra={'invitation_id': str(invitation_id), 'error': str(e)},
            )
            return AccessLogListResult(
                logs=[],
                error=PersistenceError.from_exception(e, 'Could not load access logs'),
            )
        return AccessLogListResult(logs=logs)
