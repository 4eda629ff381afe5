from fastapi import APIRouter, Depends

from teeclub.api.v1.schemas import ReferralValidateRequestSchema, ReferralValidateResponseSchema
from teeclub.application.use_cases.referrals import ReferralService
from teeclub.wiring.dependencies import get_referral_service

router = APIRouter()


@router.post("/referrals/validate", response_model=ReferralValidateResponseSchema)
def validate_referral(
    req: ReferralValidateRequestSchema,
    referrals: ReferralService = Depends(get_referral_service),
):
    return ReferralValidateResponseSchema(valid=referrals.validate(req.referral_code))
