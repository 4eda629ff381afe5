from __future__ import annotations

from abc import ABC, abstractmethod

from teeclub.domain.entities.member import CheckinResult, Door


class DoorAccessPort(ABC):
    @abstractmethod
    def list_doors(self) -> list[Door]:
        raise NotImplementedError

    @abstractmethod
    def check_in(self, token: str, door_id: int) -> CheckinResult:
        raise NotImplementedError
