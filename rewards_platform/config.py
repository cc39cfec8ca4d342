import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv(encoding="utf-8")


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./rewards.db"
    cors_origins: list[str] = field(default_factory=list)

    # expiry windows, fixed on the redemption at creation time
    redemption_ttl_hours: int = 48
    affiliate_redemption_ttl_days: int = 30

    # off: spending more than the balance is allowed (legacy behaviour)
    enforce_points_balance: bool = False

    default_business_name: str = "Business"
    default_verifier: str = "unknown operator"
    default_user_name: str = "Family Member"

    code_generation_attempts: int = 5


def load_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL") or "sqlite:///./rewards.db",
        cors_origins=_env_list(
            "CORS_ORIGINS",
            [
                "http://localhost:3000",
                "https://localhost:3000",
                "http://127.0.0.1:3000",
                "https://127.0.0.1:3000",
            ],
        ),
        redemption_ttl_hours=int(os.getenv("REDEMPTION_TTL_HOURS") or "48"),
        affiliate_redemption_ttl_days=int(os.getenv("AFFILIATE_REDEMPTION_TTL_DAYS") or "30"),
        enforce_points_balance=_env_bool("ENFORCE_POINTS_BALANCE"),
        default_business_name=os.getenv("DEFAULT_BUSINESS_NAME") or "Business",
        default_verifier=os.getenv("DEFAULT_VERIFIER") or "unknown operator",
        default_user_name=os.getenv("DEFAULT_USER_NAME") or "Family Member",
        code_generation_attempts=int(os.getenv("CODE_GENERATION_ATTEMPTS") or "5"),
    )


@lru_cache
def get_settings() -> Settings:
    """Settings are resolved once per process and shared by every request."""
    return load_settings()
