#!/usr/bin/env python3
"""
Issue an admin JWT for local testing of the moderation queue.

In production tokens come from the main PlaceHub backend (same secret).
Usage: python scripts/issue_admin_token.py [user_id]
"""
import sys
sys.path.insert(0, '.')

from placehub.core.auth import create_access_token


def main():
    user_id = sys.argv[1] if len(sys.argv) > 1 else "local-admin"
    token = create_access_token({"userId": user_id, "role": "admin"})
    print(token)
    print(f"\ncurl -H 'Authorization: Bearer {token}' http://localhost:8000/api/admin/reported")


if __name__ == "__main__":
    main()
