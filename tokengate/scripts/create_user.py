"""
Create a user out of band (e.g. the first admin). Run from project root:
  python -m tokengate.scripts.create_user USERNAME PASSWORD EMAIL [role]
Example:
  python -m tokengate.scripts.create_user admin your-secure-password admin@example.com admin
"""
import argparse
import sys

from tokengate.core.config import get_settings
from tokengate.core.database import build_engine, build_session_factory
from tokengate.core.security import PasswordHasher
from tokengate.services.credential_store import SqlCredentialStore
from tokengate.services.exceptions import DuplicateUserError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Tokengate user.")
    parser.add_argument("username", help="Username (1-255 chars, stored case-folded)")
    parser.add_argument("password", help="Password (1-128 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    if not args.username or len(args.username) > 255:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not args.password or len(args.password) > 128:
        print("Password must be 1-128 characters.", file=sys.stderr)
        return 1

    settings = get_settings()
    session_factory = build_session_factory(build_engine(settings))
    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

    db = session_factory()
    try:
        store = SqlCredentialStore(db)
        try:
            user = store.create(
                args.username,
                hasher.hash(args.password),
                args.email,
                role=args.role,
            )
        except DuplicateUserError:
            print(f"User '{args.username}' already exists.", file=sys.stderr)
            return 1
        print(f"Created user '{user.username}' (id {user.id}) with role '{user.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
