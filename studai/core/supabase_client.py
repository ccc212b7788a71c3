# studai/core/supabase_client.py
from supabase import create_client, Client
from .config import settings

_supabase: Client | None = None

def get_supabase() -> Client:
    global _supabase
    if _supabase is None:
        if settings.SUPABASE_URL is None or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
        # create_client wants plain strings, not AnyUrl
        _supabase = create_client(str(settings.SUPABASE_URL), str(settings.SUPABASE_SERVICE_ROLE_KEY))
    return _supabase
