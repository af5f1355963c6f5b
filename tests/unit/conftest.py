"""Shared fixtures: an in-memory database, the stores and the services on top."""

from datetime import datetime, timedelta
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from visitor_access.server.services.access_service import AccessService
from visitor_access.server.services.identifier_codec import (
    generate_qr_token,
    generate_short_code,
)
from visitor_access.server.services.invitation_service import InvitationService
from visitor_access.storage.access_log import AccessLog  # noqa: F401
from visitor_access.storage.access_log_store import AccessLogStore
from visitor_access.storage.base import Base
from visitor_access.storage.invitation import (
    Invitation,
    InvitationStatus,
    InvitationType,
)
from visitor_access.storage.invitation_store import InvitationStore
from visitor_access.utils.datetime import utc_now

# Test UUIDs
ORG_ID = UUID('c1111111-1111-1111-1111-111111111111')
RESIDENT_ID = UUID('a1111111-1111-1111-1111-111111111111')
OTHER_RESIDENT_ID = UUID('a2222222-2222-2222-2222-222222222222')
GUARD_ID = UUID('b1111111-1111-1111-1111-111111111111')


def build_invitation(**overrides) -> Invitation:
    """Build an unsaved invitation valid from a day ago until a day from now."""
    now = utc_now()
    fields = {
        'id': uuid4(),
        'organization_id': ORG_ID,
        'created_by': RESIDENT_ID,
        'visitor_name': 'Maria Lopez',
        'visitor_phone': '+52 55 1234 5678',
        'visitor_email': None,
        'type': InvitationType.SINGLE.value,
        'valid_from': now - timedelta(days=1),
        'valid_until': now + timedelta(days=1),
        'qr_token': generate_qr_token(),
        'short_code': generate_short_code(),
        'notes': None,
        'used_at': None,
        'status': InvitationStatus.ACTIVE.value,
        'created_at': now,
    }
    fields.update(overrides)
    return Invitation(**fields)


@pytest.fixture
async def async_engine():
    """Create an async SQLite engine for testing."""
    engine = create_async_engine(
        'sqlite+aiosqlite:///:memory:',
        poolclass=StaticPool,
        connect_args={'check_same_thread': False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def invitation_store(session_maker) -> InvitationStore:
    return InvitationStore(session_maker=session_maker)


@pytest.fixture
def access_log_store(session_maker) -> AccessLogStore:
    return AccessLogStore(session_maker=session_maker)


@pytest.fixture
def invitation_service(invitation_store) -> InvitationService:
    return InvitationService(invitation_store=invitation_store)


@pytest.fixture
def access_service(invitation_store, access_log_store) -> AccessService:
    return AccessService(
        invitation_store=invitation_store, access_log_store=access_log_store
    )


@pytest.fixture
def add_invitation(invitation_store):
    """Insert an invitation directly through the store."""

    async def _add(**overrides) -> Invitation:
        return await invitation_store.insert(build_invitation(**overrides))

    return _add


def days_from_now(days: float) -> datetime:
    return utc_now() + timedelta(days=days)
