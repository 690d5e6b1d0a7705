"""
Request guards.

A guard is a plain predicate over a ``RequestContext``: it returns ``None``
when the request may proceed, or the ``ProjectBoardError`` that should end
it. ``check_guards`` runs an ordered chain and raises the first failure.
``guard_chain`` turns a chain into a FastAPI dependency that resolves the
caller (and the path's project, when there is one) before checking.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..db.mongodb import get_database
from ..models.users import UserInDB
from ..services import users as user_service
from .exceptions import Forbidden, ProjectBoardError, Unauthenticated

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


@dataclass
class RequestContext:
    user: Optional[UserInDB] = None
    project: Optional[dict] = None


Guard = Callable[[RequestContext], Optional[ProjectBoardError]]


def requires_login(ctx: RequestContext) -> Optional[ProjectBoardError]:
    if ctx.user is None:
        return Unauthenticated("User is not logged in")
    return None


def has_authorization(ctx: RequestContext) -> Optional[ProjectBoardError]:
    """The caller must own the resolved project."""
    if ctx.user is None or ctx.project is None or ctx.project.get("user") != ctx.user.id:
        return Forbidden("User is not authorized")
    return None


def check_guards(ctx: RequestContext, guards: Sequence[Guard]) -> None:
    for guard in guards:
        failure = guard(ctx)
        if failure is not None:
            raise failure


async def current_user(
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> Optional[UserInDB]:
    """The signed-in user from the session cookie, or None."""
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        return None
    user = await user_service.get_user_by_id(user_id, db)
    if user is None:
        # Stale session pointing at a removed user
        request.session.pop(SESSION_USER_KEY, None)
    return user


def guard_chain(guards: Sequence[Guard], resolver: Optional[Callable] = None):
    """
    Builds the dependency enforcing ``guards`` for one route.

    ``resolver`` is the path parameter resolution step. It runs before the
    guards so an unknown id fails with not-found regardless of the session.
    """
    guards = tuple(guards)

    if resolver is None:
        async def dependency(user: Optional[UserInDB] = Depends(current_user)) -> RequestContext:
            ctx = RequestContext(user=user)
            check_guards(ctx, guards)
            return ctx
    else:
        async def dependency(
            project: dict = Depends(resolver),
            user: Optional[UserInDB] = Depends(current_user),
        ) -> RequestContext:
            ctx = RequestContext(user=user, project=project)
            check_guards(ctx, guards)
            return ctx

    return dependency
