"""Tests for the operator invite commands against the test database."""

from contextlib import asynccontextmanager

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlmodel import select

from src.bale import cli
from src.bale.core.security import is_direct_code
from src.bale.models import Invite, InviteStatus
from tests.factories import InviteFactory

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@pytest.fixture(autouse=True)
def cli_session(monkeypatch: pytest.MonkeyPatch, engine: AsyncEngine) -> None:
    @asynccontextmanager
    async def _session():
        async with AsyncSession(engine, expire_on_commit=False) as session:
            yield session

    monkeypatch.setattr(cli, "get_session", _session)


async def test_create_issues_direct_code(
    db_session: AsyncSession, capsys: pytest.CaptureFixture[str]
):
    exit_code = await cli.run_invites_command(
        cli.parse_args(["invites", "create", "Ops@Example.com"])
    )

    assert exit_code == 0
    invite = (await db_session.execute(select(Invite))).scalar_one()
    assert is_direct_code(invite.code)
    assert invite.email == "ops@example.com"
    assert invite.invited_by == cli.OPERATOR
    assert invite.audit == {"generation_method": "direct"}

    out = capsys.readouterr().out
    assert invite.code in out
    assert f"/signup?invite={invite.code}&email=ops%40example.com" in out


async def test_check_and_revoke(db_session: AsyncSession, capsys: pytest.CaptureFixture[str]):
    invite = InviteFactory.build(code="3FA2C81B09DE", email="ops@example.com")
    db_session.add(invite)
    await db_session.commit()

    assert await cli.run_invites_command(
        cli.parse_args(["invites", "check", "3fa2c81b09de", "ops@example.com"])
    ) == 0
    assert capsys.readouterr().out.strip().endswith("usable")

    assert await cli.run_invites_command(
        cli.parse_args(["invites", "revoke", "3fa2c81b09de"])
    ) == 0
    await db_session.refresh(invite)
    assert invite.status == InviteStatus.REVOKED.value
    assert invite.audit["revoked_by"] == cli.OPERATOR

    assert await cli.run_invites_command(
        cli.parse_args(["invites", "check", "3FA2C81B09DE", "ops@example.com"])
    ) == 1
    assert capsys.readouterr().out.strip().endswith("not usable")


async def test_check_wrong_email(db_session: AsyncSession, capsys: pytest.CaptureFixture[str]):
    db_session.add(InviteFactory.build(code="3FA2C81B09DE", email="ops@example.com"))
    await db_session.commit()

    exit_code = await cli.run_invites_command(
        cli.parse_args(["invites", "check", "3FA2C81B09DE", "other@example.com"])
    )

    assert exit_code == 1
    assert "No invite for that code and email" in capsys.readouterr().out


async def test_list_filters_by_status(
    db_session: AsyncSession, capsys: pytest.CaptureFixture[str]
):
    db_session.add_all(
        [
            InviteFactory.build(email="pending@example.com"),
            InviteFactory.build(email="gone@example.com", status=InviteStatus.REVOKED.value),
        ]
    )
    await db_session.commit()

    await cli.run_invites_command(cli.parse_args(["invites", "list", "--status", "pending"]))

    out = capsys.readouterr().out
    assert "pending@example.com" in out
    assert "gone@example.com" not in out
