"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user LOGIN PASSWORD NOM PRENOM [role]
Example:
  python -m app.scripts.create_user admin your-secure-password Martin Claire admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.database import build_engine, build_session_factory
from app.schemas.auth import RegisterRequest
from app.services.accounts import DuplicateLoginError, create_account

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user account without going through the API.")
    parser.add_argument("login", help="Login (1-255 chars)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("nom", help="Family name")
    parser.add_argument("prenom", help="Given name")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    try:
        body = RegisterRequest(
            login=args.login,
            password=args.password,
            nom=args.nom,
            prenom=args.prenom,
            role=args.role,
        )
    except ValidationError as e:
        for err in e.errors():
            print(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}", file=sys.stderr)
        return 1

    settings = get_settings()
    engine = build_engine(settings)
    db = build_session_factory(engine)()
    try:
        user = create_account(db, body, settings)
    except DuplicateLoginError as e:
        print(str(e), file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()
    print(f"Created user '{user.login}' with role '{user.role}' (id {user.id}).")
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    sys.exit(main())
