"""Authorization gate.

Identity is resolved from the request on every call, never cached between
requests. The user record is then loaded fresh and the policy checks in
``src.bale.services.authorization`` decide what the caller may do.
"""

from typing import Annotated

from fastapi import Depends, Header, Request

from src.bale.api.dependencies.repositories import UserRepo
from src.bale.core.exceptions import AuthenticationRequired
from src.bale.core.logging import bind_identity_context
from src.bale.core.security import Identity, extract_session_token, identity_from_token
from src.bale.models import User
from src.bale.services.authorization import (
    CallerContext,
    require_admin,
    require_superadmin,
)


def get_identity(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> Identity | None:
    """Identity from the bearer header or session cookie, or None."""
    # Set by the session middleware when it refreshed an expired token
    token = getattr(request.state, "access_token", None)
    if token is None:
        token = extract_session_token(request.cookies, authorization)
    return identity_from_token(token)


CurrentIdentity = Annotated[Identity | None, Depends(get_identity)]


async def get_caller(identity: CurrentIdentity, user_repo: UserRepo) -> CallerContext | None:
    """Resolve the caller's user record. None when nobody is signed in."""
    if identity is None:
        return None

    user = await user_repo.get_by_auth_user_id(identity.id)
    bind_identity_context(
        identity.id,
        user_id=user.id if user else None,
        tenant_id=user.company_id if user else None,
        email=identity.email,
    )
    return CallerContext(identity=identity, user=user)


OptionalCaller = Annotated[CallerContext | None, Depends(get_caller)]


def get_authenticated_caller(caller: OptionalCaller) -> CallerContext:
    if caller is None:
        raise AuthenticationRequired()
    return caller


AuthenticatedCaller = Annotated[CallerContext, Depends(get_authenticated_caller)]


def get_admin_user(caller: AuthenticatedCaller) -> User:
    """Admin of a real (non-demo) company."""
    return require_admin(caller)


def get_superadmin_user(caller: AuthenticatedCaller) -> User:
    return require_superadmin(caller)


AdminUser = Annotated[User, Depends(get_admin_user)]
SuperAdmin = Annotated[User, Depends(get_superadmin_user)]
