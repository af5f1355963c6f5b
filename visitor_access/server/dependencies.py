"""FastAPI dependencies that build services on the configured database."""

from visitor_access.server.services.access_service import AccessService
from visitor_access.server.services.invitation_service import InvitationService
from visitor_access.storage.access_log_store import AccessLogStore
from visitor_access.storage.database import a_session_maker
from visitor_access.storage.invitation_store import InvitationStore


def get_invitation_service() -> InvitationService:
    return InvitationService(invitation_store=InvitationStore(a_session_maker))


def get_access_service() -> AccessService:
    return AccessService(
        invitation_store=InvitationStore(a_session_maker),
        access_log_store=AccessLogStore(a_session_maker),
    )
