"""API routes for guard-facing access validation and logging."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from visitor_access.core.logger import visitor_access_logger as logger
from visitor_access.server.auth.authorization import (
    Permission,
    parse_user_id,
    require_permission,
)
from visitor_access.server.dependencies import (
    get_access_service,
    get_invitation_service,
)
from visitor_access.server.routes.invitation_models import (
    AccessLogResponse,
    AccessResponse,
    InvalidAccessRequestError,
    InvitationNotFoundError,
    InvitationResponse,
    ManualEntryRequest,
    RegisterAccessRequest,
    ValidateRequest,
    ValidateResponse,
)
from visitor_access.server.services.access_service import AccessService
from visitor_access.server.services.invitation_service import InvitationService

access_router = APIRouter(prefix='/api/organizations/{org_id}/access')


@access_router.post('/validate', response_model=ValidateResponse)
async def validate_code(
    org_id: UUID,
    request_data: ValidateRequest,
    user_id: str = Depends(require_permission(Permission.SCAN_ACCESS)),
    service: InvitationService = Depends(get_invitation_service),
):
    """Validate a scanned QR payload or a typed short code.

    Always answers 200; rejections carry a reason and a readable message.
    """
    result = await service.validate_invitation(
        request_data.code, organization_id=org_id
    )

    return ValidateResponse(
        valid=result.valid,
        reason=result.reason.value,
        message=result.message,
        method=result.method,
        invitation=(
            InvitationResponse.from_invitation(result.invitation)
            if result.invitation
            else None
        ),
    )


@access_router.post(
    '/register',
    response_model=AccessResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_access(
    org_id: UUID,
    request_data: RegisterAccessRequest,
    user_id: str = Depends(require_permission(Permission.SCAN_ACCESS)),
    service: AccessService = Depends(get_access_service),
):
    """Log a guard-approved access through an invitation.

    Raises:
        HTTPException 404: Invitation not found in this organization
        HTTPException 422: Invalid direction or method
        HTTPException 500: The access log could not be written
    """
    result = await service.register_access(
        invitation_id=request_data.invitation_id,
        guard_id=parse_user_id(user_id),
        direction=request_data.direction,
        method=request_data.method,
        organization_id=org_id,
    )

    if isinstance(result.error, InvitationNotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(result.error),
        )
    if isinstance(result.error, InvalidAccessRequestError):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(result.error),
        )
    if result.error:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(result.error),
        )

    if result.warning:
        logger.warning(
            'Access registered with warning',
            extra={
                'invitation_id': str(request_data.invitation_id),
                'warning': result.warning,
            },
        )

    return AccessResponse(success=True, warning=result.warning)


@access_router.post(
    '/manual-entry',
    response_model=AccessResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_manual_entry(
    org_id: UUID,
    request_data: ManualEntryRequest,
    user_id: str = Depends(require_permission(Permission.MANUAL_ACCESS)),
    service: AccessService = Depends(get_access_service),
):
    result = await service.register_manual_entry(
        organization_id=org_id,
        guard_id=parse_user_id(user_id),
        visitor_name=request_data.visitor_name,
        direction=request_data.direction,
        visitor_phone=request_data.visitor_phone,
        notes=request_data.notes,
    )

    if isinstance(result.error, InvalidAccessRequestError):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(result.error),
        )
    if result.error:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(result.error),
        )

    return AccessResponse(success=True)


@access_router.get('/logs', response_model=list[AccessLogResponse])
async def list_recent_access_logs(
    org_id: UUID,
    limit: Optional[int] = Query(default=None, ge=1, le=200),
    user_id: str = Depends(require_permission(Permission.VIEW_ACCESS_LOGS)),
    service: AccessService = Depends(get_access_service),
):
    """Most recent access events in the organization, newest first."""
    result = await service.get_recent_access_logs(org_id, limit)

    if result.error:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(result.error),
        )

    return [AccessLogResponse.from_access_log(entry) for entry in result.logs]
