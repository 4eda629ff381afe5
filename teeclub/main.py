import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from teeclub.api.v1.accounts import router as accounts_router
from teeclub.api.v1.bookings import router as bookings_router
from teeclub.api.v1.doors import router as doors_router
from teeclub.api.v1.payments import router as payments_router
from teeclub.api.v1.referrals import router as referrals_router
from teeclub.application.exceptions import (
    AuthFailure,
    InvalidReferralCode,
    NoActiveMembership,
    RemoteRequestError,
    RemoteUnavailable,
    SlotConflict,
)
from teeclub.core.config import settings


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("member", "booking_id", "slot", "field", "reason", "error", "status"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

logger = logging.getLogger(__name__)

app = FastAPI(title=f"{settings.CLUB_NAME} Member API", version="0.1.0")

app.include_router(accounts_router, prefix="/api/v1", tags=["accounts"])
app.include_router(bookings_router, prefix="/api/v1", tags=["bookings"])
app.include_router(referrals_router, prefix="/api/v1", tags=["referrals"])
app.include_router(doors_router, prefix="/api/v1", tags=["doors"])
app.include_router(payments_router, prefix="/api/v1", tags=["payments"])


def _error(status_code: int):
    def handle(request: Request, exc: Exception) -> JSONResponse:
        if status_code >= 500:
            logger.warning("Upstream failure", extra={"reason": request.url.path, "error": str(exc)})
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handle


app.add_exception_handler(AuthFailure, _error(401))
app.add_exception_handler(NoActiveMembership, _error(403))
app.add_exception_handler(SlotConflict, _error(409))
app.add_exception_handler(InvalidReferralCode, _error(400))
app.add_exception_handler(RemoteRequestError, _error(400))
app.add_exception_handler(RemoteUnavailable, _error(502))
app.add_exception_handler(ValueError, _error(400))


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
