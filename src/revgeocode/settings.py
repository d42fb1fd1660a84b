from pydantic_settings import BaseSettings

from .models import QuotaResetPolicy

class Settings(BaseSettings):
    google_base_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    nominatim_base_url: str = "https://nominatim.openstreetmap.org/reverse"

    # Google's free tier allows 2500 requests a day, business users 100000
    daily_query_limit: int = 2500
    business_daily_query_limit: int = 100_000
    quota_seed: int = 0
    quota_reset_policy: QuotaResetPolicy = QuotaResetPolicy.PROCESS

    requests_per_second: float | None = 10.0
    request_timeout: float | None = None # None blocks until the server answers
    user_agent: str = "revgeocode/0.1"
    log_level: str = "WARNING"

    class Config: 
        env_prefix = "REVGEOCODE_"
        env_file   = ".env"

settings = Settings()
