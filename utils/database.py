"""
Database Script

This script handles the Supabase database connection and the read operations
the analytics service needs.
"""

import os
from typing import Dict, List
from supabase import create_client, Client
from dotenv import load_dotenv
import logging

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

INTERACTIONS_TABLE = "interactions"


def get_supabase_config() -> Dict[str, str]:
    """
    Get Supabase configuration from environment variables.

    Returns:
        Dictionary with 'url' and 'service_role_key'

    Raises:
        ValueError: If required environment variables are missing
    """
    url = os.getenv("SUPABASE_URL")
    service_role_key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

    if not url:
        raise ValueError("SUPABASE_URL environment variable is required")
    if not service_role_key:
        raise ValueError("SUPABASE_SERVICE_ROLE_KEY environment variable is required")

    return {
        "url": url,
        "service_role_key": service_role_key
    }


def get_supabase_client(service: bool = True) -> Client:
    """
    Create and return a Supabase client instance.

    Args:
        service: If True, use service_role_key (for admin operations).
                If False, use anon_key (for user-scoped operations).

    Returns:
        Supabase Client instance
    """
    config = get_supabase_config()
    url = config["url"]
    key = config["service_role_key"] if service else os.getenv("SUPABASE_ANON_KEY", "")

    if not key:
        raise ValueError("Service role key or anon key is required")

    client = create_client(url, key)
    logger.info("Successfully connected to Supabase")
    return client


def fetch_recipient_interactions(recipient_id: str, limit: int = 50) -> List[Dict]:
    """
    Fetch the most recent interactions logged for a care recipient.

    Args:
        recipient_id: UUID of the care recipient
        limit: Maximum number of rows to return

    Returns:
        List of interaction rows, newest first

    Raises:
        Exception: If the query fails
    """
    try:
        client = get_supabase_client()
        response = client.table(INTERACTIONS_TABLE)\
            .select("*")\
            .eq("recipient_id", recipient_id)\
            .order("created_at", desc=True)\
            .limit(limit)\
            .execute()

        rows = response.data or []
        logger.info(f"Fetched {len(rows)} interactions for recipient {recipient_id}")
        return rows
    except Exception as e:
        logger.error(f"Failed to fetch interactions for recipient {recipient_id}: {e}")
        raise


def check_connection() -> bool:
    """Run a trivial query to check database connectivity."""
    try:
        client = get_supabase_client()
        client.table(INTERACTIONS_TABLE).select("id").limit(1).execute()
        return True
    except Exception as e:
        logger.error(f"Database connectivity check failed: {e}")
        return False
