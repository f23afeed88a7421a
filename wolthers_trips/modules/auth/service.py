import hashlib
import logging
import time
from supabase import Client
from wolthers_trips.modules.auth.schemas import LoginRequest, OtpRequest, OtpVerifyRequest, TokenResponse
from wolthers_trips.config import settings
from wolthers_trips.config.roles_config import DEFAULT_ROLE
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user with email and password"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def send_otp(self, otp_data: OtpRequest) -> bool:
        """Email a one-time sign-in code. Only existing users may sign in this way."""
        try:
            credentials = {
                "email": otp_data.email,
                "options": {"should_create_user": False},
            }
            if settings.otp_redirect_url:
                credentials["options"]["email_redirect_to"] = settings.otp_redirect_url
            self.supabase.auth.sign_in_with_otp(credentials)
            logger.info("Sign-in code sent to %s", otp_data.email)
            return True
        except Exception as e:
            logger.error(f"Failed to send sign-in code: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to send sign-in code: {str(e)}")

    def verify_otp(self, verify_data: OtpVerifyRequest) -> TokenResponse:
        """Exchange an emailed one-time code for an access token"""
        try:
            auth_response = self.supabase.auth.verify_otp({
                "email": verify_data.email,
                "token": verify_data.token,
                "type": "email"
            })
            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid or expired code")
            return TokenResponse(
                access_token=auth_response.session.access_token,
                user_id=auth_response.user.id,
                email=auth_response.user.email or verify_data.email
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.warning(f"OTP verification failed: {e}")
            raise HTTPException(status_code=401, detail="Invalid or expired code")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
            }
            user_data.update(self.get_profile(user.id, user.email))
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + settings.auth_cache_ttl)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def get_profile(self, auth_user_id: str, email: Optional[str]) -> Dict[str, Any]:
        """Application profile (role, company) for an auth user; unknown users get the default role."""
        profile = None
        if email:
            result = self.supabase.table("users")\
                .select("id, full_name, role, company_id, auth_method")\
                .eq("email", email)\
                .limit(1)\
                .execute()
            if result.data:
                profile = result.data[0]
        if not profile:
            logger.info("No users profile for %s, defaulting to %s", email, DEFAULT_ROLE)
            return {
                "profile_id": auth_user_id,
                "full_name": None,
                "role": DEFAULT_ROLE,
                "company_id": None,
                "auth_method": None,
            }
        return {
            "profile_id": profile["id"],
            "full_name": profile.get("full_name"),
            "role": profile.get("role") or DEFAULT_ROLE,
            "company_id": profile.get("company_id"),
            "auth_method": profile.get("auth_method"),
        }

    def logout(self, token: str) -> bool:
        """Logout user and drop the cached token"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Supabase Auth tokens are stateless JWTs; they expire on their own
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False
