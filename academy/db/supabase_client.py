"""Service-role Supabase client shared by the db modules."""

from functools import lru_cache

from supabase import Client, create_client

from academy.core.config import get_settings


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Return the process-wide Supabase client.

    The service role key bypasses row level security, so callers must do
    their own authorization before touching participant data.

    Raises:
        RuntimeError: If the client cannot be created from settings
    """
    settings = get_settings()
    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    except Exception as e:
        raise RuntimeError(f"Failed to initialize Supabase client: {e}") from e
