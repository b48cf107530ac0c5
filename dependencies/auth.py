from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client

from core import store
from core.errors import NotFound
from core.supabase_client import get_supabase_client
from models.actor import Actor


bearer_scheme = HTTPBearer()


# ============================================================
# AUTH DECODING (Supabase: validates JWT + loads the profile)
# ============================================================
def get_current_actor(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> Actor:
    """
    Resolve the bearer token to an Actor on every request.
    Grants are never cached between requests.
    """
    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
        if not auth_resp or not auth_resp.user:
            raise unauthorized
        auth_user = auth_resp.user
    except HTTPException:
        raise
    except Exception:
        raise unauthorized

    # ---------------------------------------------------------
    # Role + active flag come from user_profiles, not the token
    # ---------------------------------------------------------
    try:
        return store.get_actor(auth_user.id)
    except NotFound:
        raise unauthorized

