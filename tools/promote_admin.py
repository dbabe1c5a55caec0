"""Command-line helper that grants or revokes the ADMIN role."""
from __future__ import annotations

import argparse
import sys

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from socialhub.constants import MEMBER_ROLES, ROLE_ADMIN, ROLE_TYPE_1
from socialhub.database import SessionLocal, init_db
from socialhub.models import User


def _find_user(db: Session, identifier: str) -> User:
    needle = identifier.strip().lower()
    record = db.scalar(
        select(User).where((func.lower(User.username) == needle) | (func.lower(User.email) == needle))
    )
    if record is None:
        raise SystemExit(f"No account matches '{identifier}'.")
    return record


def _run_promote(args: argparse.Namespace) -> int:
    with SessionLocal() as db:
        user = _find_user(db, args.identifier)
        if user.role == ROLE_ADMIN:
            print(f"{user.username} is already an administrator.")
            return 0
        user.role = ROLE_ADMIN
        db.commit()
        print(f"Promoted {user.username} ({user.email}) to {ROLE_ADMIN}.")
    return 0


def _run_demote(args: argparse.Namespace) -> int:
    with SessionLocal() as db:
        user = _find_user(db, args.identifier)
        if user.role != ROLE_ADMIN:
            print(f"{user.username} is not an administrator.")
            return 0
        others = db.scalar(select(func.count(User.id)).where(User.role == ROLE_ADMIN, User.id != user.id)) or 0
        if not others:
            print("Refusing to demote the final administrator.", file=sys.stderr)
            return 2
        user.role = args.role
        db.commit()
        print(f"Demoted {user.username} to {args.role}.")
    return 0


def _run_list(args: argparse.Namespace) -> int:
    with SessionLocal() as db:
        admins = list(db.scalars(select(User).where(User.role == ROLE_ADMIN).order_by(User.created_at)))
    if not admins:
        print("No administrators found.")
        return 0
    for admin in admins:
        print(f"{admin.id} | {admin.username} | {admin.email}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage SocialHub administrator accounts.")
    subcommands = parser.add_subparsers(dest="command", required=True)

    promote = subcommands.add_parser("promote", help="Grant the ADMIN role to an account.")
    promote.add_argument("identifier", help="Username or email of the account.")
    promote.set_defaults(func=_run_promote)

    demote = subcommands.add_parser("demote", help="Return an administrator to an ordinary role.")
    demote.add_argument("identifier", help="Username or email of the account.")
    demote.add_argument(
        "--role",
        default=ROLE_TYPE_1,
        choices=sorted(MEMBER_ROLES),
        help="Role to assign (default: %(default)s).",
    )
    demote.set_defaults(func=_run_demote)

    listing = subcommands.add_parser("list", help="List current administrators.")
    listing.set_defaults(func=_run_list)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    init_db()
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
