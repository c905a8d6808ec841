import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

class RuleSettings(BaseModel):
    # Percent change against the current salary on track assignment
    salary_increase_warning_pct: float = float(os.getenv("SALARY_INCREASE_WARNING_PCT", "50"))
    salary_decrease_error_pct: float = float(os.getenv("SALARY_DECREASE_ERROR_PCT", "20"))
    level_change_cooldown_months: int = int(os.getenv("LEVEL_CHANGE_COOLDOWN_MONTHS", "12"))
    structure_min_gap_pct: float = 10.0
    labour_charges_factor: float = 1.45

class Config(BaseModel):
    app_name: str = "HR Talent Platform"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./database.db")

    # Auth
    secret_key: str = os.getenv("SECRET_KEY", "dev-only-insecure-key-DO-NOT-USE-IN-PROD")
    algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    access_token_expire_minutes: int = 60 * 24  # 24 hours

    # Rules engine
    rules: RuleSettings = RuleSettings()

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # CORS: comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://localhost:5173,"
                "http://127.0.0.1:3000,http://127.0.0.1:5173",
            ).split(",")
            if o.strip()
        ]
    )

settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment == "production":
    if "dev-only" in settings.secret_key or "change-it" in settings.secret_key:
        raise RuntimeError(
            "FATAL: SECRET_KEY must be set for production. Set it as an environment variable."
        )
elif "dev-only" in settings.secret_key:
    _logger.warning("⚠ Using insecure default SECRET_KEY (development only).")
