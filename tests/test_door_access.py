"""Tests for listing doors and opening them through a check-in."""

from __future__ import annotations

import pytest
import respx

from teeclub.application.exceptions import AuthFailure, RemoteRequestError, RemoteUnavailable
from teeclub.infrastructure.gatekeeper.door_access import GatekeeperDoorAccess
from teeclub.infrastructure.gymmaster.gymmaster_client import GymMasterClient

GM = "https://gm.example.com/portal/api"
GK = "https://gatekeeper.example.com"


def _doors() -> GatekeeperDoorAccess:
    return GatekeeperDoorAccess(
        gymmaster=GymMasterClient(api_key="key_123", base_url=GM),
        username="club",
        api_key="gk_key",
        base_url=GK,
    )


@respx.mock
def test_list_doors_uses_basic_auth():
    route = respx.get(f"{GK}/doors").respond(
        200, json={"doors": [{"id": 3, "name": "Front Door", "companyid": 1, "siteid": 2, "status": 1}]}
    )

    doors = _doors().list_doors()

    assert doors[0].name == "Front Door"
    assert route.calls.last.request.headers["Authorization"].startswith("Basic ")


@respx.mock
def test_check_in_granted():
    route = respx.post(f"{GM}/v2/member/kiosk/checkin").respond(
        200, json={"result": {"response": {"access_state": 1, "message": "Welcome"}}}
    )

    result = _doors().check_in("t", 3)

    assert result.access_granted is True
    assert result.message == "Welcome"
    assert b'"doorid":3' in route.calls.last.request.content.replace(b" ", b"")


@respx.mock
def test_check_in_denied_reason_is_reported():
    respx.post(f"{GM}/v2/member/kiosk/checkin").respond(
        200, json={"result": {"response": {"access_state": 0, "denied_reason": "Membership on hold"}}}
    )

    result = _doors().check_in("t", 3)

    assert result.access_granted is False
    assert result.denied_reason == "Membership on hold"


@respx.mock
def test_check_in_with_expired_token_is_auth_failure():
    respx.post(f"{GM}/v2/member/kiosk/checkin").respond(
        200, json={"result": {"response": {"denied_reason": "Invalid token"}}}
    )

    with pytest.raises(AuthFailure):
        _doors().check_in("t", 3)


@respx.mock
def test_list_doors_unreadable_body_is_unavailable():
    respx.get(f"{GK}/doors").respond(200, text="<html>maintenance</html>")

    with pytest.raises(RemoteUnavailable):
        _doors().list_doors()


@respx.mock
def test_list_doors_html_rejection_is_request_error():
    respx.get(f"{GK}/doors").respond(401, text="<html>Unauthorized</html>")

    with pytest.raises(RemoteRequestError):
        _doors().list_doors()
