# storefront/core/supabase_client.py
from supabase import Client, ClientOptions, create_client

from storefront.core.config import get_settings

settings = get_settings()


def new_auth_client() -> Client:
    """
    Build a Supabase client (anon key) for one Auth call.

    The client never keeps the user's session: no persistence and no
    background token refresh. Sessions belong to the caller, who gets the
    tokens back in the response.
    """
    return create_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        options=ClientOptions(persist_session=False, auto_refresh_token=False),
    )


def get_auth_client() -> Client:
    """
    FastAPI dependency: a fresh Auth client per request.

    Overridden in tests.
    """
    return new_auth_client()
