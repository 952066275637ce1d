from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://aviary:aviary@db:5432/aviary"
    APP_ENV: str = "development"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # Shape of the 422 `errors` payload, fixed per deployment:
    #   "messages"      → {"name": ["can't be blank"]}
    #   "full_messages" → ["Name can't be blank"]
    ERROR_FORMAT: Literal["messages", "full_messages"] = "messages"

    LOG_LEVEL: str = "INFO"
    # Unset: JSON logs in production/staging, console output elsewhere.
    LOG_JSON: Optional[bool] = None

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
