"""
Provision Teachers Script
Makes sure every auth user (or a single one, with --user-id) has a row in
the teachers table. Uses the service role client for the auth admin API.

    python -m quizforge.scripts.provision_teachers [--user-id UUID]
"""

import argparse
import sys
from quizforge.database.supabase_client import get_service_supabase
from supabase import Client
from typing import Any, List, Optional
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def load_users(supabase: Client, user_id: Optional[str] = None) -> List[Any]:
    """Auth users to provision; raises if the admin API call fails"""
    if user_id:
        response = supabase.auth.admin.get_user_by_id(user_id)
        if not response or not response.user:
            raise LookupError(f"User {user_id} not found")
        return [response.user]
    return list(supabase.auth.admin.list_users())


def provision_teacher(supabase: Client, user: Any) -> bool:
    """Insert a teachers row for the user; False when one already exists"""
    existing = supabase.table("teachers")\
        .select("id")\
        .eq("auth_user_id", user.id)\
        .execute()
    if existing.data:
        logger.info(f"Teacher record already exists for {user.email}: {existing.data[0]['id']}")
        return False

    metadata = user.user_metadata or {}
    result = supabase.table("teachers").insert({
        "auth_user_id": user.id,
        "name": metadata.get("full_name") or user.email,
        "email": user.email
    }).execute()
    logger.info(f"Teacher record created for {user.email}: {result.data[0]['id'] if result.data else '?'}")
    return True


def main(argv: Optional[List[str]] = None, supabase: Optional[Client] = None) -> int:
    parser = argparse.ArgumentParser(description="Create teachers rows for auth users")
    parser.add_argument("--user-id", help="Provision a single auth user")
    args = parser.parse_args(argv)

    supabase = supabase or get_service_supabase()

    try:
        users = load_users(supabase, args.user_id)
    except Exception as e:
        logger.error(f"Error loading users: {e}")
        return 1

    created = 0
    for user in users:
        try:
            if provision_teacher(supabase, user):
                created += 1
        except Exception as e:
            logger.error(f"Error provisioning teacher for {getattr(user, 'email', user)}: {e}")

    logger.info(f"Provisioning completed: {created} created, {len(users)} users checked")
    return 0


if __name__ == "__main__":
    sys.exit(main())
