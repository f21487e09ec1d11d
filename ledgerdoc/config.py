from pathlib import Path
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

# Load .env from repo root for local development and scripts.
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)
    default_portfolio_name: str = Field(default="默认账本", alias="LEDGER_DEFAULT_PORTFOLIO_NAME")
    new_portfolio_name: str = Field(default="新账本", alias="LEDGER_NEW_PORTFOLIO_NAME")
    unnamed_portfolio_name: str = Field(default="未命名账本", alias="LEDGER_UNNAMED_PORTFOLIO_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_error_file: str | None = Field(default=None, alias="LOG_ERROR_FILE")

settings = Settings()
