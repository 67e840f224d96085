from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from social_transport.api.deps import get_admin_account, get_current_account, get_services
from social_transport.api.schemas import (
    AccessRequestResponse,
    AccountResponse,
    ApproveResponse,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    UpdateRoleRequest,
    UpdateRoleResponse,
)
from social_transport.container import Services
from social_transport.models.account import Account

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, services: Services = Depends(get_services)):
    """Submit an access request; an admin has to approve it before login works."""
    request = services.access_requests.submit_registration(
        username=payload.username,
        email=payload.email,
        full_name=payload.full_name,
        password=payload.password,
    )
    return RegisterResponse(
        message="Registration request submitted. Wait for admin approval.",
        request_id=request.id,
    )


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, services: Services = Depends(get_services)):
    token, account = services.auth.login(username=payload.username, password=payload.password)
    return LoginResponse(token=token, user=AccountResponse.model_validate(account))


@router.get("/verify", response_model=AccountResponse)
def verify(current_account: Account = Depends(get_current_account)):
    return AccountResponse.model_validate(current_account)


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    current_account: Account = Depends(get_current_account),
    services: Services = Depends(get_services),
):
    services.auth.change_password(
        current_account.id,
        current_password=payload.current_password,
        new_password=payload.new_password,
    )
    return MessageResponse(message="Password changed successfully")


# ========== Access requests (admin) ==========


@router.get("/access-requests", response_model=List[AccessRequestResponse])
def list_access_requests(
    status_filter: Optional[str] = Query(None, alias="status", description="pending, approved or rejected"),
    current_account: Account = Depends(get_admin_account),
    services: Services = Depends(get_services),
):
    """All access requests, newest first."""
    requests = services.access_requests.list_requests(status=status_filter)
    return [AccessRequestResponse.model_validate(r) for r in requests]


@router.post("/access-requests/{request_id}/approve", response_model=ApproveResponse)
def approve_access_request(
    request_id: str,
    current_account: Account = Depends(get_admin_account),
    services: Services = Depends(get_services),
):
    account = services.access_requests.approve(request_id)
    return ApproveResponse(
        message="Request approved successfully",
        user=AccountResponse.model_validate(account),
    )


@router.post("/access-requests/{request_id}/reject", response_model=MessageResponse)
def reject_access_request(
    request_id: str,
    current_account: Account = Depends(get_admin_account),
    services: Services = Depends(get_services),
):
    services.access_requests.reject(request_id)
    return MessageResponse(message="Request rejected successfully")


# ========== Account management (admin) ==========


@router.get("/users", response_model=List[AccountResponse])
def list_accounts(
    current_account: Account = Depends(get_admin_account),
    services: Services = Depends(get_services),
):
    """Approved accounts, newest first."""
    return [AccountResponse.model_validate(a) for a in services.auth.list_accounts()]


@router.put("/users/{account_id}/role", response_model=UpdateRoleResponse)
def update_account_role(
    account_id: str,
    payload: UpdateRoleRequest,
    current_account: Account = Depends(get_admin_account),
    services: Services = Depends(get_services),
):
    """Change another account's role. Admins cannot change their own role."""
    account = services.auth.update_role(account_id, payload.role, acting_account_id=current_account.id)
    return UpdateRoleResponse(
        message=f"User role updated to: {account.role}",
        user=AccountResponse.model_validate(account),
    )


@router.delete("/users/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    account_id: str,
    current_account: Account = Depends(get_admin_account),
    services: Services = Depends(get_services),
):
    """Delete another account. Admins cannot delete themselves."""
    services.auth.delete_account(account_id, acting_account_id=current_account.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
