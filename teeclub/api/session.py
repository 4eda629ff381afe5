from __future__ import annotations

from fastapi import Header

from teeclub.application.exceptions import AuthFailure
from teeclub.domain.entities.member import MemberSession


def get_member_session(
    authorization: str | None = Header(None),
    x_member_id: str | None = Header(None),
) -> MemberSession:
    """Builds the per-request member session from the bearer token."""
    if not authorization:
        raise AuthFailure("Please log in to continue")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthFailure("Please log in to continue")
    return MemberSession(token=token.strip(), member_id=x_member_id)
