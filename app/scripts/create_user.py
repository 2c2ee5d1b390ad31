"""
Create a user from the command line. Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [--first-name F] [--last-name L] [--role ROLE ...]
Example:
  python -m app.scripts.create_user alice 'p@ss1234' --first-name Alice --role ROLE_USER
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.security import PasswordHasher
from app.models import RoleKind
from app.schemas.users import CreateUserRequest
from app.services.errors import UserServiceError
from app.services.users import UserService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a user account.")
    parser.add_argument("username", help="Username (3-30 chars: letters, digits, '_' or '-')")
    parser.add_argument("password", help="Password (8-72 chars)")
    parser.add_argument("--first-name", default=None)
    parser.add_argument("--last-name", default=None)
    parser.add_argument(
        "--role",
        dest="roles",
        action="append",
        choices=[kind.value for kind in RoleKind],
        help="Role to assign; repeatable. Defaults to ROLE_USER.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        request = CreateUserRequest(
            username=args.username.strip(),
            password=args.password,
            first_name=args.first_name,
            last_name=args.last_name,
            roles=set(args.roles) if args.roles else None,
        )
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            print(f"Invalid {field}: {error['msg']}", file=sys.stderr)
        return 1

    settings = get_settings()
    db = SessionLocal()
    try:
        service = UserService(
            db,
            hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
            admin_username=settings.ADMIN_USERNAME,
        )
        user = service.create_user(request)
        print(f"Created user '{user.username}' with id {user.id} and roles {user.role_names}.")
        return 0
    except UserServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
