import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Catalog")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()

    # Loan settings
    loan_period_days: int = int(os.getenv("LOAN_PERIOD_DAYS", "14"))

    # Catalog is pre-populated with the demo books and customers on startup
    seed_data: bool = _env_bool("LIBRARY_SEED_DATA", "True")

    # CLI output: plain | json | rich
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain").lower()


settings = Settings()
