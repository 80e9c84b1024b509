import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent

class Config:
    """Configuration settings for the wallet service"""

    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # HTTP settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8080"))

    # Bot settings (bot is disabled when empty)
    TELEGRAM_TOKEN: str = os.getenv("TELEGRAM_TOKEN", "")

    # Ledger settings
    CURRENCY: str = os.getenv("CURRENCY", "TRY")
    QR_MAX_AGE_HOURS: int = int(os.getenv("QR_MAX_AGE_HOURS", "24"))
    SESSION_TTL_HOURS: int = int(os.getenv("SESSION_TTL_HOURS", "24"))

    # Other settings
    TIMEZONE: str = os.getenv("TZ", "Europe/Istanbul")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Paths
    LOG_DIR = BASE_DIR / "logs"

    @classmethod
    def validate(cls):
        """Fail fast on settings the server cannot run without"""
        if not cls.DATABASE_URL:
            raise ValueError("No DATABASE_URL set in environment")

def setup_logging():
    """Configure logging settings"""
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    Config.LOG_DIR.mkdir(exist_ok=True)
    log_file = Config.LOG_DIR / "wallet.log"

    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL),
        format=log_format,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )
