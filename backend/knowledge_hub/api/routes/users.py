from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from ...core.security import get_current_user
from ...models import User
from ...schemas import (
    ProfileResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
    PasswordChange,
    AccountDelete,
    MessageResponse
)
from ...services import UserService
from ..dependencies import get_user_service

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/profile", response_model=ProfileResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    """Get the current user's profile"""
    return {"user": current_user}


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    profile: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """Update name and email"""
    user = user_service.update_profile(current_user, profile)
    return {"message": "Profile updated successfully", "user": user}


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    change: PasswordChange,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """Change the password after confirming the current one"""
    user_service.change_password(current_user, change)
    return {"message": "Password changed successfully"}


@router.delete("/delete-account", response_model=MessageResponse)
def delete_account(
    request: AccountDelete,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """Delete the account with all its documents and chat sessions"""
    user_service.delete_account(current_user, request.password)
    return {"message": "Account deleted successfully"}


@router.get("/download-data")
def download_data(
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """Export everything stored for the user as a JSON attachment"""
    data = user_service.export_data(current_user)
    return JSONResponse(
        content=jsonable_encoder(data),
        headers={"Content-Disposition": f'attachment; filename="user-data-{current_user.id}.json"'}
    )
