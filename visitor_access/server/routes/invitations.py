"""API routes for resident-facing invitation management."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from visitor_access.core.logger import visitor_access_logger as logger
from visitor_access.server.auth.authorization import (
    Permission,
    get_user_role,
    invitation_owner_scope,
    parse_user_id,
    require_permission,
)
from visitor_access.server.dependencies import (
    get_access_service,
    get_invitation_service,
)
from visitor_access.server.routes.invitation_models import (
    AccessLogResponse,
    CancelResponse,
    CreateInvitationParams,
    InvitationCreate,
    InvitationNotFoundError,
    InvitationResponse,
    UnauthenticatedError,
)
from visitor_access.server.services.access_service import AccessService
from visitor_access.server.services.invitation_service import InvitationService
from visitor_access.storage.invitation import InvitationStatus

invitation_router = APIRouter(prefix='/api/organizations/{org_id}/invitations')


@invitation_router.post(
    '',
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invitation(
    org_id: UUID,
    invitation_data: InvitationCreate,
    user_id: str = Depends(require_permission(Permission.CREATE_INVITATIONS)),
    service: InvitationService = Depends(get_invitation_service),
):
    """Create a visitor invitation.

    Returns the invitation with its QR payload and short code.

    Raises:
        HTTPException 401: No caller identity
        HTTPException 500: The invitation could not be stored
    """
    params = CreateInvitationParams(
        organization_id=org_id, **invitation_data.model_dump()
    )
    result = await service.create_invitation(params, parse_user_id(user_id))

    if isinstance(result.error, UnauthenticatedError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(result.error),
        )
    if result.error or not result.invitation:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(result.error) if result.error else 'An unexpected error occurred',
        )

    return InvitationResponse.from_invitation(result.invitation)


@invitation_router.get('', response_model=list[InvitationResponse])
async def list_invitations(
    org_id: UUID,
    status_filter: Optional[list[InvitationStatus]] = Query(default=None, alias='status'),
    user_id: str = Depends(require_permission(Permission.VIEW_OWN_INVITATIONS)),
    service: InvitationService = Depends(get_invitation_service),
):
    """List the caller's invitations, newest first, optionally filtered by status."""
    result = await service.get_invitations(
        parse_user_id(user_id), status_filter, organization_id=org_id
    )

    if result.error:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(result.error),
        )

    return [InvitationResponse.from_invitation(inv) for inv in result.invitations]


@invitation_router.get('/{invitation_id}', response_model=InvitationResponse)
async def get_invitation(
    org_id: UUID,
    invitation_id: UUID,
    user_id: str = Depends(require_permission(Permission.VIEW_OWN_INVITATIONS)),
    role_name: Optional[str] = Depends(get_user_role),
    service: InvitationService = Depends(get_invitation_service),
):
    """Fetch one invitation of the organization.

    Residents only see invitations they created.
    """
    result = await service.get_invitation_by_id(
        invitation_id,
        organization_id=org_id,
        owner_id=invitation_owner_scope(user_id, role_name),
    )

    if result.error:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(result.error),
        )
    if not result.invitation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Invitation not found',
        )

    return InvitationResponse.from_invitation(result.invitation)


@invitation_router.post('/{invitation_id}/cancel', response_model=CancelResponse)
async def cancel_invitation(
    org_id: UUID,
    invitation_id: UUID,
    user_id: str = Depends(require_permission(Permission.CANCEL_INVITATIONS)),
    role_name: Optional[str] = Depends(get_user_role),
    service: InvitationService = Depends(get_invitation_service),
):
    """Cancel an invitation so it no longer validates."""
    result = await service.cancel_invitation(
        invitation_id,
        organization_id=org_id,
        owner_id=invitation_owner_scope(user_id, role_name),
    )

    if isinstance(result.error, InvitationNotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(result.error),
        )
    if result.error:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(result.error),
        )

    logger.info(
        'Invitation cancelled',
        extra={'invitation_id': str(invitation_id), 'user_id': user_id},
    )

    return CancelResponse(success=True)


@invitation_router.get(
    '/{invitation_id}/access-history', response_model=list[AccessLogResponse]
)
async def get_invitation_access_history(
    org_id: UUID,
    invitation_id: UUID,
    user_id: str = Depends(require_permission(Permission.VIEW_OWN_INVITATIONS)),
    role_name: Optional[str] = Depends(get_user_role),
    invitation_service: InvitationService = Depends(get_invitation_service),
    service: AccessService = Depends(get_access_service),
):
    """Entries and exits recorded against an invitation, newest first."""
    found = await invitation_service.get_invitation_by_id(
        invitation_id,
        organization_id=org_id,
        owner_id=invitation_owner_scope(user_id, role_name),
    )
    if found.error:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(found.error),
        )
    if not found.invitation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Invitation not found',
        )

    result = await service.get_access_history(invitation_id)

    if result.error:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(result.error),
        )

    return [AccessLogResponse.from_access_log(entry) for entry in result.logs]
