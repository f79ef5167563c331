# core/supabase_client.py

from typing import Optional

from supabase import create_client, Client
from core.config import settings
from core.logging_config import logger


# ============================================================
# Supabase Client Factory
# ============================================================

def get_supabase_client() -> Optional[Client]:
    """
    Creates a fresh Supabase client for one request.

    Uses the ANON key when configured so row-level policies apply once the
    client is scoped to a user token; falls back to the service role key.
    Returns None when Supabase is not configured.
    """
    supabase_url = settings.SUPABASE_URL
    supabase_key = settings.SUPABASE_ANON_KEY or settings.SUPABASE_SERVICE_ROLE_KEY

    if not supabase_url or not supabase_key:
        logger.error("Missing Supabase credentials")
        logger.error(f"   URL: {supabase_url}")
        logger.error(f"   KEY: {'SET' if supabase_key else 'MISSING'}")
        return None

    try:
        return create_client(supabase_url, supabase_key)
    except Exception as e:
        logger.error(f"Supabase Init Error: {e}", exc_info=True)
        return None


def get_admin_client() -> Optional[Client]:
    """
    Service role client. Only for system jobs (rent reminders) that act on
    behalf of no user.
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        logger.error("Missing Supabase service role credentials")
        return None

    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    except Exception as e:
        logger.error(f"Supabase Init Error: {e}", exc_info=True)
        return None


def scope_client_to_user(client: Client, access_token: str) -> Client:
    """Send table requests with the user's JWT so row-level policies apply."""
    client.postgrest.auth(access_token)
    return client


# ============================================================
# Ping Supabase for health checks
# ============================================================

HEALTH_TABLES = [
    "profiles",
    "rooms",
    "tenants",
    "maintenance_requests",
    "payments",
    "notifications",
    "meter_readings",
]


def ping_supabase() -> dict:
    """
    Simple connectivity check.
    Does NOT query auth tables.
    """
    client = get_supabase_client()
    if client is None:
        return {"service": "Supabase", "status": "not_configured"}

    results = {}
    for t in HEALTH_TABLES:
        try:
            res = client.table(t).select("id").limit(1).execute()
            results[t] = {
                "status": "ok",
                "rows_found": len(res.data or []),
            }
        except Exception as err:
            results[t] = {"status": "error", "detail": str(err)}

    status = "ok" if all(r["status"] == "ok" for r in results.values()) else "degraded"
    return {
        "service": "Supabase",
        "status": status,
        "tables": results,
    }
