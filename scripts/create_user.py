"""Utility script to create a user and print a bearer token for it."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from gymhub.domain.entities import ROLES, ROLE_ADMIN, User
from gymhub.infrastructure.database import SessionLocal, initialize_database
from gymhub.infrastructure.repositories import UserRepository
from gymhub.infrastructure.security import create_user_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create a user for the GymHub API and print an access token.",
    )
    parser.add_argument("--name", default="Administrator", help="Full name of the user")
    parser.add_argument("--email", default="admin@example.com", help="Email address")
    parser.add_argument(
        "--role",
        default=ROLE_ADMIN,
        choices=ROLES,
        help="Role assigned to the user (default: admin)",
    )
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        repository = UserRepository(session)
        user = repository.get_by_email(args.email)
        if user is None:
            user = repository.create(
                User(id=None, name=args.name, email=args.email, role=args.role)
            )
            session.commit()
            print(f"Created user {user.id} ({user.email}) with role {user.role}")
        else:
            print(f"User {user.id} ({user.email}) already exists")
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the user: {exc}") from exc
    finally:
        session.close()

    print(create_user_token(user.id))


if __name__ == "__main__":
    main()
