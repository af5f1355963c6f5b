"""Tests for the access log store."""

from datetime import timedelta
from uuid import uuid4

import pytest
from conftest import GUARD_ID, ORG_ID

from visitor_access.storage.access_log import AccessDirection, AccessLog, AccessMethod
from visitor_access.utils.datetime import utc_now


def _entry(**overrides) -> AccessLog:
    fields = {
        'organization_id': ORG_ID,
        'invitation_id': None,
        'authorized_by': GUARD_ID,
        'visitor_name': 'Maria Lopez',
        'direction': AccessDirection.ENTRY.value,
        'method': AccessMethod.MANUAL.value,
    }
    fields.update(overrides)
    return AccessLog(**fields)


class TestAppend:
    @pytest.mark.asyncio
    async def test_append_assigns_id_and_timestamp(self, access_log_store):
        entry = await access_log_store.append(_entry())

        assert entry.id is not None
        assert entry.created_at is not None

    @pytest.mark.asyncio
    async def test_append_links_invitation(self, add_invitation, access_log_store):
        invitation = await add_invitation()

        await access_log_store.append(
            _entry(invitation_id=invitation.id, method=AccessMethod.QR_SCAN.value)
        )

        history = await access_log_store.list_for_invitation(invitation.id)
        assert len(history) == 1
        assert history[0].method == 'qr_scan'


class TestListRecent:
    @pytest.mark.asyncio
    async def test_list_recent_is_newest_first_and_limited(self, access_log_store):
        now = utc_now()
        for hours in (3, 1, 2):
            await access_log_store.append(
                _entry(
                    visitor_name=f'visitor-{hours}',
                    created_at=now - timedelta(hours=hours),
                )
            )

        result = await access_log_store.list_recent(ORG_ID, limit=2)

        assert [entry.visitor_name for entry in result] == ['visitor-1', 'visitor-2']

    @pytest.mark.asyncio
    async def test_list_recent_is_scoped_to_organization(self, access_log_store):
        await access_log_store.append(_entry())
        await access_log_store.append(_entry(organization_id=uuid4()))

        result = await access_log_store.list_recent(ORG_ID, limit=10)

        assert len(result) == 1
