import argparse
from pathlib import Path
import sys

from sqlalchemy import select

if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from hallpass.core.config import get_settings
from hallpass.core.roles import RolePolicy
from hallpass.core.security import hash_password
from hallpass.db.session import get_session_factory
from hallpass.models.staff import Staff


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Create or update a staff account.")
    parser.add_argument("--login", default=settings.bootstrap_admin_login)
    parser.add_argument("--password", default=settings.bootstrap_admin_password)
    parser.add_argument("--name", default=settings.bootstrap_admin_name)
    parser.add_argument("--email", default=None)
    parser.add_argument("--role", choices=("admin", "teacher"), default=None)
    return parser.parse_args()


def resolve_role(explicit: str | None, email: str | None, policy: RolePolicy) -> str:
    if explicit:
        return explicit
    if email and policy.infer(email) == "teacher":
        return "teacher"
    raise SystemExit(f"Cannot infer a staff role from {email!r}; pass --role explicitly.")


def main() -> None:
    args = parse_args()
    role = resolve_role(args.role, args.email, RolePolicy.from_settings())
    session_factory = get_session_factory()
    with session_factory() as db:
        existing = db.scalar(select(Staff).where(Staff.login == args.login))
        if existing:
            existing.password_hash = hash_password(args.password)
            existing.display_name = args.name
            existing.email = args.email
            existing.role = role
            db.add(existing)
            action = "updated"
        else:
            db.add(
                Staff(
                    login=args.login,
                    display_name=args.name,
                    email=args.email,
                    password_hash=hash_password(args.password),
                    role=role,
                )
            )
            action = "created"
        db.commit()
    print(f"Staff {args.login} ({role}) {action}.")


if __name__ == "__main__":
    main()
