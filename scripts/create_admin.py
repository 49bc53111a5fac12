"""
Grant the ADMIN role to a user, creating the profile row if needed.

Usage: python scripts/create_admin.py admin@bingoo.com [--name NAME] [--token]
"""

import argparse
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bingoo.core.security import create_access_token
from bingoo.database.session import get_db_context
from bingoo.models.user import UserRole
from bingoo.repositories.user_repository import UserRepository
from bingoo.services.user_service import UserService


def create_admin(email: str, name: str = "Administrateur"):
    with get_db_context() as db:
        service = UserService(db)
        if UserRepository(db).get_by_email(email):
            user = service.set_role(email, UserRole.ADMIN)
            print(f"Existing user {user.email} promoted to ADMIN")
        else:
            user = service.create_user(email=email, name=name, role=UserRole.ADMIN)
            print(f"Admin account created: {user.email}")
    return user


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("--name", default="Administrateur")
    parser.add_argument(
        "--token", action="store_true", help="print a bearer token for the account"
    )
    args = parser.parse_args()

    user = create_admin(args.email, args.name)
    if args.token:
        token = create_access_token(
            {"sub": user.id, "email": user.email, "role": UserRole.ADMIN.value}
        )
        print(f"\nBearer token:\n{token}")


if __name__ == "__main__":
    main()
