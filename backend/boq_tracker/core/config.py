import datetime as dt

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: str = Field(default="dev")  # dev|prod
    TZ: str = Field(default="Asia/Dubai")
    LOG_LEVEL: str = Field(default="INFO")

    # CORS
    CORS_ORIGINS: str = Field(default="http://localhost:3000,http://localhost")

    # Business thresholds
    STATUS_TOLERANCE_PCT: float = Field(default=5.0)
    CUTOFF_DAYS_BEFORE_TODAY: int = Field(default=1)
    DEFAULT_REMAINING_DAYS: int = Field(default=30)
    INCLUDE_UNDATED_KPIS: bool = Field(default=True)

    # Calendar
    WEEKEND_DAYS: str = Field(default="4,5")  # python weekday(): Fri, Sat
    HOLIDAYS: str = Field(default="")

    def weekend_days(self) -> tuple[int, ...]:
        return tuple(int(x) for x in self.WEEKEND_DAYS.split(",") if x.strip())

    def holidays(self) -> frozenset[dt.date]:
        return frozenset(dt.date.fromisoformat(x.strip()) for x in self.HOLIDAYS.split(",") if x.strip())


settings = Settings()
