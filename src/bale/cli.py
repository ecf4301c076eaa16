"""Operator command line.

Direct invites issued here use twelve-character hex codes with a 48-hour
expiry and are not emailed; the operator hands out the printed link.

    python -m src.bale.cli invites create someone@example.com
    python -m src.bale.cli invites list --status pending
    python -m src.bale.cli invites revoke 3FA2C81B09DE
    python -m src.bale.cli invites check 3FA2C81B09DE someone@example.com
    python -m src.bale.cli db upgrade
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence

from src.bale.core.config import get_settings
from src.bale.core.db import dispose_engine, get_session, run_migrations_async
from src.bale.core.exceptions import BaleError
from src.bale.core.logging import get_logger, setup_logging
from src.bale.models import Invite, InviteStatus
from src.bale.models.base import utc_now
from src.bale.repositories import InviteRepository
from src.bale.services.invite_service import InviteService, build_magic_link

logger = get_logger(__name__)

OPERATOR = "cli"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="bale", description="Bale operator tools")
    groups = parser.add_subparsers(dest="group", required=True)

    invites = groups.add_parser("invites", help="Manage platform invites")
    commands = invites.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create", help="Issue a direct invite")
    create.add_argument("email")
    create.add_argument("--invited-by", default=OPERATOR)

    list_cmd = commands.add_parser("list", help="List recent invites")
    list_cmd.add_argument("--status", choices=[s.value for s in InviteStatus])
    list_cmd.add_argument("--limit", type=int, default=50)

    revoke = commands.add_parser("revoke", help="Revoke a pending invite")
    revoke.add_argument("code")
    revoke.add_argument("--revoked-by", default=OPERATOR)

    check = commands.add_parser("check", help="Check whether an invite is usable")
    check.add_argument("code")
    check.add_argument("email")

    db = groups.add_parser("db", help="Database maintenance")
    db_commands = db.add_subparsers(dest="command", required=True)
    upgrade = db_commands.add_parser("upgrade", help="Run migrations")
    upgrade.add_argument("revision", nargs="?", default="head")

    return parser.parse_args(argv)


def format_invite(invite: Invite) -> str:
    return (
        f"{invite.code:<12}  {invite.email:<32}  {invite.kind:<15}  "
        f"{invite.status:<8}  expires {invite.expires_at:%Y-%m-%d %H:%M}"
    )


async def run_invites_command(args: argparse.Namespace) -> int:
    async with get_session() as session:
        repo = InviteRepository(session)
        service = InviteService(repo, session)

        if args.command == "create":
            invite = await service.issue_direct_invite(args.email, invited_by=args.invited_by)
            print(format_invite(invite))
            print(build_magic_link(get_settings().site_url, invite.code, invite.email))
            return 0

        if args.command == "list":
            for invite in await repo.list_recent(limit=args.limit, status=args.status):
                print(format_invite(invite))
            return 0

        if args.command == "revoke":
            invite = await service.revoke_by_code(args.code.upper(), args.revoked_by)
            print(format_invite(invite))
            return 0

        # check
        invite = await repo.get_by_code(args.code.upper())
        if invite is None or invite.email != args.email.strip().lower():
            print("No invite for that code and email")
            return 1
        usable = invite.is_usable(utc_now())
        print(format_invite(invite))
        print("usable" if usable else "not usable")
        return 0 if usable else 1


async def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.debug)

    if args.group == "db":
        await run_migrations_async(args.revision)
        return 0

    try:
        return await run_invites_command(args)
    except BaleError as e:
        print(f"error: {getattr(e, 'detail', None) or e.message}", file=sys.stderr)
        return 1
    finally:
        await dispose_engine()


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
