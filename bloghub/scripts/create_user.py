"""
Create a user (e.g. the first admin; public registration only creates role 'user').
Run from project root:
  python -m bloghub.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m bloghub.scripts.create_user admin admin@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from bloghub.core.database import SessionLocal
from bloghub.core.roles import Role
from bloghub.services.errors import BlogServiceError
from bloghub.services.users import create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Bloghub user.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.USER.value,
        choices=[r.value for r in Role],
    )
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = create_user(
            db,
            username=args.username,
            email=args.email,
            password=args.password,
            role=Role(args.role),
        )
    except BlogServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    logger.info("Created user id=%s with role '%s'", user.id, args.role)
    print(f"Created user '{args.username}' <{user.email}> with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
