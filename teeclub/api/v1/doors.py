from fastapi import APIRouter, Depends

from teeclub.api.session import get_member_session
from teeclub.api.v1.schemas import CheckinResponseSchema, DoorSchema
from teeclub.application.use_cases.door_access import DoorAccessUseCase
from teeclub.domain.entities.member import MemberSession
from teeclub.wiring.dependencies import get_door_access_use_case

router = APIRouter()


@router.get("/doors", response_model=list[DoorSchema])
def doors(
    session: MemberSession = Depends(get_member_session),
    uc: DoorAccessUseCase = Depends(get_door_access_use_case),
):
    return [DoorSchema(id=d.id, name=d.name, company_id=d.company_id, status=d.status) for d in uc.list_doors()]


@router.post("/doors/{door_id}/open", response_model=CheckinResponseSchema)
def open_door(
    door_id: int,
    session: MemberSession = Depends(get_member_session),
    uc: DoorAccessUseCase = Depends(get_door_access_use_case),
):
    result = uc.open_door(session, door_id)
    return CheckinResponseSchema(
        access_granted=result.access_granted,
        message=result.message,
        denied_reason=result.denied_reason,
    )
