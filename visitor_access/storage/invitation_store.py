"""
Store class for persisting and querying visitor invitations.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from visitor_access.core.logger import visitor_access_logger as logger
from visitor_access.storage.invitation import Invitation, InvitationStatus


@dataclass
class InvitationStore:
    """Store for invitation records.

    Every call opens its own session; nothing is cached between calls.
    Transport and constraint errors propagate to the caller.
    """

    session_maker: Callable[[], AsyncSession]

    async def insert(self, invitation: Invitation) -> Invitation:
        """Persist a new invitation.

        Args:
            invitation: The unsaved invitation

        Returns:
            Invitation: The stored invitation with defaults populated
        """
        async with self.session_maker() as session:
            session.add(invitation)
            await session.commit()
            await session.refresh(invitation)

            logger.info(
                'Created invitation',
                extra={
                    'invitation_id': str(invitation.id),
                    'organization_id': str(invitation.organization_id),
                    'created_by': str(invitation.created_by),
                    'type': invitation.type,
                },
            )

            return invitation

    async def find_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        async with self.session_maker() as session:
            result = await session.execute(
                select(Invitation).filter(Invitation.id == invitation_id)
            )
            return result.scalars().first()

    async def find_by_qr_token(self, token: str) -> Optional[Invitation]:
        """Get an invitation by its QR token (without the namespace prefix).

        Args:
            token: The opaque QR token

        Returns:
            Invitation or None if not found
        """
        async with self.session_maker() as session:
            result = await session.execute(
                select(Invitation).filter(Invitation.qr_token == token)
            )
            return result.scalars().first()

    async def find_by_short_code(self, code: str) -> Optional[Invitation]:
        """Get an invitation by its short code.

        Short codes are stored uppercase, so the lookup is case-insensitive.

        Args:
            code: The short code as typed

        Returns:
            Invitation or None if not found
        """
        async with self.session_maker() as session:
            result = await session.execute(
                select(Invitation).filter(Invitation.short_code == code.strip().upper())
            )
            return result.scalars().first()

    async def list_by_owner(
        self,
        owner_id: UUID,
        statuses: Optional[Sequence[str]] = None,
        organization_id: Optional[UUID] = None,
    ) -> list[Invitation]:
        """List invitations created by a user, newest first.

        Args:
            owner_id: The creating user's ID
            statuses: Optional statuses to restrict the result to
            organization_id: Optional organization to restrict the result to

        Returns:
            list of Invitation
        """
        async with self.session_maker() as session:
            query = (
                select(Invitation)
                .filter(Invitation.created_by == owner_id)
                .order_by(Invitation.created_at.desc())
            )
            if organization_id is not None:
                query = query.filter(Invitation.organization_id == organization_id)
            if statuses:
                query = query.filter(
                    Invitation.status.in_([_value(s) for s in statuses])
                )
            result = await session.execute(query)
            return list(result.scalars().all())

    async def update_status(
        self,
        invitation_id: UUID,
        status: str,
        used_at: Optional[datetime] = None,
    ) -> Optional[Invitation]:
        """Update an invitation's status.

        Args:
            invitation_id: The invitation ID
            status: New status (active, used, expired, cancelled)
            used_at: Consumption time (only applied for 'used' status)

        Returns:
            Updated Invitation or None if not found
        """
        status = _value(status)
        async with self.session_maker() as session:
            result = await session.execute(
                select(Invitation).filter(Invitation.id == invitation_id)
            )
            invitation = result.scalars().first()

            if not invitation:
                return None

            old_status = invitation.status
            invitation.status = status

            if status == InvitationStatus.USED.value and used_at is not None:
                invitation.used_at = used_at

            await session.commit()
            await session.refresh(invitation)

            logger.info(
                'Updated invitation status',
                extra={
                    'invitation_id': str(invitation_id),
                    'old_status': old_status,
                    'new_status': status,
                },
            )

            return invitation


def _value(status) -> str:
    return status.value if isinstance(status, InvitationStatus) else status
