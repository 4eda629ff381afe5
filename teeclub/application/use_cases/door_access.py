from __future__ import annotations

import logging

from teeclub.application.ports.door_access import DoorAccessPort
from teeclub.application.use_cases.accounts import AccountUseCase
from teeclub.domain.entities.member import CheckinResult, Door, MemberSession


class DoorAccessUseCase:
    def __init__(self, doors: DoorAccessPort, accounts: AccountUseCase) -> None:
        self._doors = doors
        self._accounts = accounts
        self._logger = logging.getLogger(__name__)

    def list_doors(self) -> list[Door]:
        return self._doors.list_doors()

    def open_door(self, session: MemberSession, door_id: int) -> CheckinResult:
        self._accounts.active_membership(session)
        result = self._doors.check_in(session.token, door_id)
        self._logger.info(
            "Door check-in",
            extra={"member": session.member_id, "status": result.access_granted, "reason": result.denied_reason},
        )
        return result
