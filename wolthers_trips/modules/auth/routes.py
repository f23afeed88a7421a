from fastapi import APIRouter, Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from wolthers_trips.modules.auth.schemas import (
    LoginRequest, OtpRequest, OtpVerifyRequest, TokenResponse, CurrentUserResponse
)
from wolthers_trips.modules.auth.service import AuthService
from wolthers_trips.core.dependencies import get_auth_service, get_current_user
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])

# Security scheme for JWT Bearer token
security = HTTPBearer()


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login with email and password and get access token"""
    return service.login(login_data)


@router.post("/otp", status_code=202)
async def send_otp(
    otp_data: OtpRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Email a one-time sign-in code"""
    service.send_otp(otp_data)
    return {"message": "Sign-in code sent", "email": otp_data.email}


@router.post("/verify", response_model=TokenResponse)
async def verify_otp(
    verify_data: OtpVerifyRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Exchange the emailed code for an access token"""
    return service.verify_otp(verify_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse)
async def me(current_user: Dict = Depends(get_current_user)):
    """Get current authenticated user with role and company (for frontend UI)."""
    return current_user
