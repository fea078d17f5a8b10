from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "CardLedger"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "postgresql+asyncpg://localhost:5432/cardledger"

    # Bootstrap admins, one per registry. Each registry holds its own copy
    # and hands it off independently.
    card_registry_admin: str = "SP1ADMIN000000000000000000000000000"
    grading_registry_admin: str = "SP1ADMIN000000000000000000000000000"


settings = Settings()
