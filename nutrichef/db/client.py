"""
Supabase client configuration.
One privileged client (service role key, bypasses RLS) for webhook
handlers, checkout and token verification. The web app talks to
Supabase directly with the anon key; this service never needs it.
"""

from functools import lru_cache
from supabase import create_client, Client

from ..core.config import require_env, SUPABASE_URL, SUPABASE_SERVICE_KEY


@lru_cache()
def get_admin_client() -> Client:
    """
    Get Supabase client with service role key (bypasses RLS).
    Use this ONLY for:
    - Webhook handlers
    - Checkout session creation
    - Admin scripts
    """
    url = require_env(SUPABASE_URL)
    key = require_env(SUPABASE_SERVICE_KEY)

    return create_client(url, key)
