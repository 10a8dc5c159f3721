"""
Database access.

The API talks to the `ads`, `doctors` and `departments` tables through the
Supabase client. Runbooks that need DDL (constraints, ALTER TABLE) open a direct
Postgres connection with psycopg2 instead, since PostgREST cannot run it.
"""
import logging
from typing import Optional

import psycopg2
from supabase import create_client, Client

from core.config import settings

logger = logging.getLogger(__name__)

supabase: Optional[Client] = None


def init_db():
    global supabase
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        logger.error(
            "❌ SUPABASE_URL or SUPABASE_KEY is empty, ads API will serve defaults only. "
            f"Expected .env path: {settings.model_config.get('env_file', 'unknown')}"
        )
        return
    try:
        supabase = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        logger.info("✅ Supabase client initialized")
    except Exception as e:
        logger.error(f"❌ Could not initialize Supabase client: {e}")


def get_supabase() -> Optional[Client]:
    if not supabase:
        init_db()
    return supabase


def get_pg_connection():
    """Open a raw Postgres connection from DATABASE_URL (caller closes it)."""
    if not settings.DATABASE_URL:
        raise RuntimeError("DATABASE_URL is not configured")
    return psycopg2.connect(settings.DATABASE_URL)
