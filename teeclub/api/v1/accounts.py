from datetime import date

from fastapi import APIRouter, Depends

from teeclub.api.session import get_member_session
from teeclub.api.v1.schemas import (
    BalanceSchema,
    ClubSchema,
    LoginRequestSchema,
    MembershipSchema,
    MembershipTypeSchema,
    ProfileUpdateSchema,
    SessionSchema,
    SignupRequestSchema,
    SignupResponseSchema,
    WaiverSchema,
    WaiverSignatureSchema,
)
from teeclub.application.use_cases.accounts import AccountUseCase
from teeclub.domain.entities.member import MemberSession
from teeclub.wiring.dependencies import get_account_use_case

router = APIRouter()


@router.post("/login", response_model=SessionSchema)
def login(req: LoginRequestSchema, uc: AccountUseCase = Depends(get_account_use_case)):
    session = uc.login(req.email, req.password)
    return SessionSchema(token=session.token, member_id=session.member_id, expires=session.expires)


@router.post("/signup", response_model=SignupResponseSchema, status_code=201)
def signup(req: SignupRequestSchema, uc: AccountUseCase = Depends(get_account_use_case)):
    details = req.model_dump(exclude={"referral_code", "waiver_signature"}, exclude_none=True)
    result = uc.signup(details, referral_code=req.referral_code, waiver_signature=req.waiver_signature)
    session = result.session
    return SignupResponseSchema(
        token=session.token,
        member_id=session.member_id,
        expires=session.expires,
        membership_id=result.membership_id,
        waiver_saved=result.waiver_saved,
    )


@router.get("/clubs", response_model=list[ClubSchema])
def clubs(uc: AccountUseCase = Depends(get_account_use_case)):
    return [ClubSchema(id=c.id, name=c.name) for c in uc.list_clubs()]


@router.get("/membership-types", response_model=list[MembershipTypeSchema])
def membership_types(uc: AccountUseCase = Depends(get_account_use_case)):
    return [
        MembershipTypeSchema(id=m.id, name=m.name, description=m.description, price=m.price)
        for m in uc.list_membership_types()
    ]


@router.get("/membership-types/{membership_type_id}/waiver", response_model=WaiverSchema)
def waiver(membership_type_id: int, uc: AccountUseCase = Depends(get_account_use_case)):
    return WaiverSchema(membership_type_id=membership_type_id, body=uc.waiver(membership_type_id))


@router.get("/me")
def profile(
    session: MemberSession = Depends(get_member_session),
    uc: AccountUseCase = Depends(get_account_use_case),
):
    return uc.get_profile(session)


@router.patch("/me", status_code=204)
def update_profile(
    req: ProfileUpdateSchema,
    session: MemberSession = Depends(get_member_session),
    uc: AccountUseCase = Depends(get_account_use_case),
):
    uc.update_profile(session, req.model_dump(exclude_none=True))


@router.post("/me/waiver", status_code=204)
def sign_waiver(
    req: WaiverSignatureSchema,
    session: MemberSession = Depends(get_member_session),
    uc: AccountUseCase = Depends(get_account_use_case),
):
    uc.sign_waiver(session, req.signature, membership_id=req.membership_id)


@router.get("/me/memberships", response_model=list[MembershipSchema])
def memberships(
    session: MemberSession = Depends(get_member_session),
    uc: AccountUseCase = Depends(get_account_use_case),
):
    today = date.today()
    return [
        MembershipSchema(id=m.id, name=m.name, start_date=m.start_date, end_date=m.end_date, active=m.is_active(today))
        for m in uc.memberships(session)
    ]


@router.get("/me/balance", response_model=BalanceSchema)
def balance(
    session: MemberSession = Depends(get_member_session),
    uc: AccountUseCase = Depends(get_account_use_case),
):
    return BalanceSchema(**uc.outstanding_balance(session))
