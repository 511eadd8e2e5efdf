from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://footprint:footprint@db:5432/footprint"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # When true, a unit with no conversion factor is treated as already
    # canonical (logged as a warning) instead of rejecting the event.
    UNKNOWN_UNIT_FALLBACK: bool = False

    # Category default carbon intensities (kg CO2e per canonical unit).
    DEFAULT_CI_ELECTRICITY: Decimal = Decimal("0.0004")    # per kWh
    DEFAULT_CI_NATURAL_GAS: Decimal = Decimal("5.291")     # per therm
    DEFAULT_CI_GASOLINE: Decimal = Decimal("9.46")         # per gallon
    DEFAULT_CI_AIR_TRAVEL: Decimal = Decimal("0.0002")     # per traveler-mile

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
