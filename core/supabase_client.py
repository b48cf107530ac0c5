# core/supabase_client.py

from typing import Optional

from supabase import create_client, Client
from core.config import settings
from core.logging_config import logger

# Tables the API cannot work without; checked by /health/db
HEALTH_TABLES = (
    "work_orders",
    "work_order_files",
    "project_managers",
    "work_order_client_chat",
    "task_checklists",
)


# ============================================================
# Supabase Client Factory (service role)
# ============================================================
def get_supabase_client() -> Optional[Client]:
    """
    Service-role client: row-level security is bypassed, so every
    access decision on work order data is made before a query runs.
    Returns None when credentials are missing.
    """
    url = settings.SUPABASE_URL
    key = settings.SUPABASE_SERVICE_ROLE_KEY

    if not url or not key:
        logger.error(
            f"Missing Supabase credentials (URL: {'SET' if url else 'MISSING'}, "
            f"SERVICE ROLE KEY: {'SET' if key else 'MISSING'})"
        )
        return None

    try:
        return create_client(url, key)
    except Exception as e:
        logger.error(f"Supabase Init Error: {e}", exc_info=True)
        return None


# ============================================================
# Health
# ============================================================
def _check_table(client: Client, table: str) -> dict:
    try:
        res = client.table(table).select("id").limit(1).execute()
        return {"status": "ok", "rows_found": len(res.data or [])}
    except Exception as err:
        logger.warning(f"Health check failed for {table}: {err}")
        return {"status": "error", "detail": str(err)}


def ping_supabase() -> dict:
    """
    Read one row from each required table.
    Overall status is "degraded" when any table fails.
    """
    client = get_supabase_client()
    if client is None:
        return {"service": "Supabase", "status": "not_configured"}

    tables = {table: _check_table(client, table) for table in HEALTH_TABLES}
    healthy = all(t["status"] == "ok" for t in tables.values())

    return {
        "service": "Supabase",
        "status": "ok" if healthy else "degraded",
        "tables": tables,
    }
