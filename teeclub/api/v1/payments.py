from fastapi import APIRouter, Depends

from teeclub.api.session import get_member_session
from teeclub.api.v1.schemas import PaymentRequestSchema, PaymentResponseSchema
from teeclub.application.use_cases.payments import GuestPassPaymentUseCase
from teeclub.domain.entities.member import MemberSession
from teeclub.wiring.dependencies import get_payment_use_case

router = APIRouter()


@router.post("/payments", response_model=PaymentResponseSchema)
def pay_guest_passes(
    req: PaymentRequestSchema,
    session: MemberSession = Depends(get_member_session),
    uc: GuestPassPaymentUseCase = Depends(get_payment_use_case),
):
    payment_id, amount = uc.pay(req.nonce, req.charged_passes)
    return PaymentResponseSchema(success=True, payment_id=payment_id, amount_cents=amount)
