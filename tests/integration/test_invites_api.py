"""Tests for invite creation, validation and access requests."""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select

from src.bale.core.config import get_settings
from src.bale.models import Invite, InviteKind, InviteStatus
from src.bale.models.base import utc_now
from tests.factories import InviteFactory
from tests.helpers import bearer, make_access_token

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


async def _invite_by_code(db_session: AsyncSession, code: str) -> Invite:
    result = await db_session.execute(
        select(Invite).where(Invite.code == code).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def _validate(client: AsyncClient, code: str, email: str):
    return await client.post("/api/validate-invite", json={"code": code, "email": email})


class TestCreateInvite:
    """POST /api/create-invite"""

    async def test_requires_identity(self, client: AsyncClient, db_session: AsyncSession):
        response = await client.post("/api/create-invite", json={"email": "a@x.com"})

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"
        count = await db_session.scalar(select(func.count()).select_from(Invite))
        assert count == 0

    async def test_missing_email(self, client: AsyncClient):
        response = await client.post(
            "/api/create-invite", json={}, headers=bearer(make_access_token())
        )

        assert response.status_code == 400
        assert response.json()["error"] == "email is required"

    async def test_creates_pending_four_digit_invite(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        token = make_access_token(sub="inviter-1")
        response = await client.post(
            "/api/create-invite",
            json={"email": "New.Person@Example.com"},
            headers={**bearer(token), "Origin": "http://localhost:3000"},
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["success"] is True
        invite = data["invite"]
        assert invite["email"] == "new.person@example.com"
        assert len(invite["code"]) == 4 and invite["code"].isdigit()
        assert invite["magicLink"] == (
            f"http://localhost:3000/signup?invite={invite['code']}"
            "&email=new.person%40example.com"
        )
        assert "expiresAt" in invite

        row = await _invite_by_code(db_session, invite["code"])
        assert row.status == InviteStatus.PENDING.value
        assert row.kind == InviteKind.PLATFORM_INVITE.value
        assert row.invited_by == "inviter-1"
        expected_expiry = utc_now() + timedelta(days=7)
        assert abs((row.expires_at - expected_expiry).total_seconds()) < 60

    async def test_unlisted_origin_falls_back_to_site_url(self, client: AsyncClient):
        response = await client.post(
            "/api/create-invite",
            json={"email": "a@x.com"},
            headers={**bearer(make_access_token()), "Origin": "https://phish.example.net"},
        )

        assert response.status_code == 200
        assert response.json()["invite"]["magicLink"].startswith(
            f"{get_settings().site_url}/signup?"
        )


class TestValidateInvite:
    """POST /api/validate-invite - always 200."""

    async def test_valid_after_creation_then_invalid_after_expiry(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        created = await client.post(
            "/api/create-invite", json={"email": "a@x.com"}, headers=bearer(make_access_token())
        )
        code = created.json()["invite"]["code"]

        response = await _validate(client, code, "a@x.com")
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["invite"]["code"] == code
        assert data["invite"]["email"] == "a@x.com"

        row = await _invite_by_code(db_session, code)
        row.expires_at = utc_now() - timedelta(seconds=1)
        await db_session.commit()

        response = await _validate(client, code, "a@x.com")
        assert response.status_code == 200
        assert response.json() == {"valid": False, "error": "Invalid or expired invite code"}

    async def test_email_must_match(self, client: AsyncClient, db_session: AsyncSession):
        invite = InviteFactory.build(code="4821", email="owner@x.com")
        db_session.add(invite)
        await db_session.commit()

        response = await client.post(
            "/api/validate-invite", json={"code": "4821", "email": "someone-else@x.com"}
        )
        assert response.status_code == 200
        assert response.json()["valid"] is False

    async def test_email_match_is_case_insensitive(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        db_session.add(InviteFactory.build(code="4822", email="owner@x.com"))
        await db_session.commit()

        response = await client.post(
            "/api/validate-invite", json={"code": "4822", "email": "Owner@X.com"}
        )
        assert response.json()["valid"] is True

    @pytest.mark.parametrize("status", [InviteStatus.REVOKED, InviteStatus.APPROVED])
    async def test_terminal_invites_invalid(
        self, client: AsyncClient, db_session: AsyncSession, status: InviteStatus
    ):
        db_session.add(InviteFactory.build(code="5555", email="a@x.com", status=status.value))
        await db_session.commit()

        response = await _validate(client, "5555", "a@x.com")
        assert response.json()["valid"] is False

    async def test_access_requests_are_not_signup_grants(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        db_session.add(InviteFactory.access_request(code="7777", email="a@x.com"))
        await db_session.commit()

        response = await _validate(client, "7777", "a@x.com")
        assert response.json()["valid"] is False

    @pytest.mark.parametrize(
        ("payload", "error"),
        [
            ({"code": "12345", "email": "a@x.com"}, "Invalid invite code format"),
            ({"code": "3FA2C81B09DE", "email": "a@x.com"}, "Invalid invite code format"),
            ({"code": 1234}, "Invite code and email are required"),
            ({"email": "a@x.com"}, "Invite code and email are required"),
            ({"code": {"$ne": ""}, "email": "a@x.com"}, "Invite code and email are required"),
            ([1, 2, 3], "Invite code and email are required"),
        ],
    )
    async def test_bad_input_is_valid_false(self, client: AsyncClient, payload, error: str):
        response = await client.post("/api/validate-invite", json=payload)

        assert response.status_code == 200
        assert response.json() == {"valid": False, "error": error}

    async def test_malformed_json_is_valid_false(self, client: AsyncClient):
        response = await client.post(
            "/api/validate-invite",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json()["valid"] is False


class TestRequestAccess:
    """POST /api/request-access"""

    async def test_creates_pending_access_request(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        response = await client.post(
            "/api/request-access",
            json={
                "email": "Prospect@Example.com",
                "name": "  Pat Doe ",
                "company": "Acme Textiles",
                "message": "We run three warehouses",
            },
        )

        assert response.status_code == 200, response.text
        assert response.json()["success"] is True

        result = await db_session.execute(
            select(Invite).where(Invite.email == "prospect@example.com")
        )
        row = result.scalar_one()
        assert row.kind == InviteKind.ACCESS_REQUEST.value
        assert row.status == InviteStatus.PENDING.value
        assert row.requester_name == "Pat Doe"
        assert row.requester_company == "Acme Textiles"
        assert row.audit == {"request_type": "access_request"}

    async def test_duplicate_pending_request_rejected(self, client: AsyncClient):
        body = {"email": "prospect@example.com", "name": "Pat"}
        first = await client.post("/api/request-access", json=body)
        second = await client.post("/api/request-access", json=body)

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json()["error"] == "An access request for this email is already pending"

    async def test_invalid_email(self, client: AsyncClient):
        response = await client.post(
            "/api/request-access", json={"email": "not-an-email", "name": "Pat"}
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("email:")
