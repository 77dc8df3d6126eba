"""
Authentication module for Firebase ID tokens and API key validation.
Provides FastAPI dependencies for securing endpoints.
"""
import os
import jwt
from fastapi import Depends, HTTPException, Header
from typing import Any, Dict, Optional
import logging

from livora_api.config import settings

logger = logging.getLogger(__name__)

# Google publishes the keys that sign Firebase ID tokens here
FIREBASE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
)
FIREBASE_ISSUER_PREFIX = "https://securetoken.google.com/"
DEV_USER_ID = "dev-user-uid"
_jwks_client = None


def get_jwks_client():
    """Get or create the JWKS client for Firebase token validation."""
    global _jwks_client
    if _jwks_client is None and settings.FIREBASE_PROJECT_ID:
        _jwks_client = jwt.PyJWKClient(FIREBASE_JWKS_URL)
    return _jwks_client


async def get_current_claims(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key")
) -> Dict[str, Any]:
    """
    Authenticate via API key OR Firebase ID token.
    Returns the caller's claims: user_id, email, name, picture, email_verified.
    """
    # Option 1: API Key authentication
    if x_api_key:
        return {"user_id": validate_api_key(x_api_key)}

    # Option 2: Firebase ID token
    if authorization:
        return validate_firebase_token(authorization)

    raise HTTPException(
        status_code=401,
        detail="Missing authentication. Provide Authorization header or X-API-Key."
    )


async def get_current_user(claims: Dict[str, Any] = Depends(get_current_claims)) -> str:
    """
    Returns the authenticated user's Firebase uid.

    Usage:
        @router.get("/protected")
        async def protected_route(user_id: str = Depends(get_current_user)):
            return {"user_id": user_id}
    """
    return claims["user_id"]


def validate_api_key(api_key: str) -> str:
    """
    Validate API key and return user_id.

    API key format options:
    - Simple: "sk_test_abc123" -> returns "admin"
    - With user: "sk_test_abc123:user_12345" -> returns "user_12345"
    """
    valid_keys = [k.strip() for k in os.getenv("API_KEYS", "").split(",") if k.strip()]

    if not valid_keys:
        logger.warning("No API keys configured (API_KEYS env var empty)")
        raise HTTPException(status_code=401, detail="API key authentication not configured")

    key_part = api_key.split(":")[0]

    if key_part not in valid_keys:
        raise HTTPException(status_code=401, detail="Invalid API key")

    if ":" in api_key:
        return api_key.split(":", 1)[1]

    return "admin"


def _dev_claims() -> Dict[str, Any]:
    return {
        "user_id": DEV_USER_ID,
        "email": "dev@example.com",
        "name": "Dev User",
        "picture": None,
        "email_verified": True,
    }


def validate_firebase_token(authorization: str) -> Dict[str, Any]:
    """Validate a Firebase ID token and return its claims."""
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    token = authorization.split(" ", 1)[1]

    # Development-only bypass token
    if (
        settings.ENVIRONMENT == "development"
        and settings.DEV_AUTH_TOKEN
        and token == settings.DEV_AUTH_TOKEN
    ):
        logger.debug("Development token accepted")
        return _dev_claims()

    jwks_client = get_jwks_client()
    if not jwks_client:
        raise HTTPException(
            status_code=500,
            detail="Token validation not configured (missing FIREBASE_PROJECT_ID)"
        )

    project_id = settings.FIREBASE_PROJECT_ID
    try:
        signing_key = jwks_client.get_signing_key_from_jwt(token)
        payload = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=project_id,
            issuer=f"{FIREBASE_ISSUER_PREFIX}{project_id}",
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.PyJWKClientError as e:
        logger.warning(f"Could not resolve signing key: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}")

    user_id = payload.get("sub") or payload.get("user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token missing user ID")

    return {
        "user_id": user_id,
        "email": payload.get("email"),
        "name": payload.get("name"),
        "picture": payload.get("picture"),
        "email_verified": bool(payload.get("email_verified", False)),
    }
