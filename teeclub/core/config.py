from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    CLUB_NAME: str = "Simcoquitos 24/7 Golf Club"
    CLUB_TIMEZONE: str = "America/Toronto"
    APP_URL: str = "http://localhost:3000"

    GYMMASTER_BASE_URL: str = "https://www.gymmaster.com/portal/api"
    GYMMASTER_API_KEY: str | None = None
    GYMMASTER_STAFF_API_KEY: str | None = None

    GATEKEEPER_BASE_URL: str = "https://api.gatekeeper.example.com"
    GATEKEEPER_USERNAME: str | None = None
    GATEKEEPER_API_KEY: str | None = None

    SQUARE_ACCESS_TOKEN: str | None = None
    SQUARE_BASE_URL: str = "https://connect.squareupsandbox.com"
    SQUARE_LOCATION_ID: str | None = None

    RESEND_API_KEY: str | None = None
    EMAIL_FROM: str = "Simcoquitos 24/7 Golf Club <no-reply@simcoquitos.example.com>"

    TWILIO_ACCOUNT_SID: str | None = None
    TWILIO_AUTH_TOKEN: str | None = None
    TWILIO_PHONE_NUMBER: str | None = None

    FREE_GUEST_PASSES_PER_PERIOD: int = 2
    GUEST_PASS_CHARGE_CENTS: int = 1000

    HTTP_TIMEOUT_SECONDS: float = 10.0

    SLOT_GRID_START_HOUR: int = 9
    SLOT_GRID_END_HOUR: int = 17
    SLOT_GRID_STEP_MINUTES: int = 30


settings = Settings()
