from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Fixed Ratio Trading program (mainnet deployment)
    fixed_ratio_program_id: str = "quXSYkeZ8ByTCtYY1J1uxQmE36UZ3LmNGgE3CYMFixD"

    # Labels used when token metadata has no symbol
    default_ticker_a: str = "TokenA"
    default_ticker_b: str = "TokenB"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: str = ""  # e.g. "logs/fixed_ratio_{time:YYYY-MM-DD}.log"; empty = console only


settings = Settings()
