"""Store class for the append-only access log."""

from dataclasses import dataclass
from typing import Callable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from visitor_access.core.logger import visitor_access_logger as logger
from visitor_access.storage.access_log import AccessLog


@dataclass
class AccessLogStore:
    """Store for access log entries. Entries are never updated or deleted."""

    session_maker: Callable[[], AsyncSession]

    async def append(self, entry: AccessLog) -> AccessLog:
        """Append an access event.

        Args:
            entry: The unsaved access log entry

        Returns:
            The stored AccessLog record
        """
        async with self.session_maker() as session:
            session.add(entry)
            await session.commit()
            await session.refresh(entry)

            logger.info(
                'Appended access log entry',
                extra={
                    'access_log_id': str(entry.id),
                    'invitation_id': str(entry.invitation_id) if entry.invitation_id else None,
                    'direction': entry.direction,
                    'method': entry.method,
                    'authorized_by': str(entry.authorized_by),
                },
            )

            return entry

    async def list_recent(self, organization_id: UUID, limit: int) -> list[AccessLog]:
        """Get the most recent access events for an organization, newest first."""
        async with self.session_maker() as session:
            result = await session.execute(
                select(AccessLog)
                .filter(AccessLog.organization_id == organization_id)
                .order_by(AccessLog.created_at.desc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def list_for_invitation(self, invitation_id: UUID) -> list[AccessLog]:
        async with self.session_maker() as session:
            result = await session.execute(
                select(AccessLog)
                .filter(AccessLog.invitation_id == invitation_id)
                .order_by(AccessLog.created_at.desc())
            )
            return list(result.scalars().all())
