# config.py
import os
import logging
from dotenv import load_dotenv

# Load local .env file if running locally
load_dotenv()

logger = logging.getLogger("config")

# --- Database ---
DATABASE_URL = os.getenv("DATABASE_URL")

# If not set (local dev fallback), use a SQLite file next to the app
if not DATABASE_URL:
    DB_PATH = os.getenv("DB_PATH", "./restaurant.db")
    DATABASE_URL = f"sqlite:///{DB_PATH}"
    logger.info("⚠️ Using local SQLite database at %s", DB_PATH)

# Create manager/staff/cashier accounts on first start when the user table is empty
SEED_DEFAULT_USERS = os.getenv("SEED_DEFAULT_USERS", "true").lower() in ("1", "true", "yes")

# --- Inventory ---
DEFAULT_LOW_STOCK_THRESHOLD = int(os.getenv("DEFAULT_LOW_STOCK_THRESHOLD", "10"))

# --- Notifications ---
NOTIFICATION_DELAY_SECONDS = float(os.getenv("NOTIFICATION_DELAY_SECONDS", "1"))

# --- Telegram (optional low-stock alert delivery) ---
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
TELEGRAM_ALERT_CHAT_ID = os.getenv("TELEGRAM_ALERT_CHAT_ID")

# --- App ---
APP_VERSION = "1.0.0"
PORT = int(os.getenv("PORT", "8080"))

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
