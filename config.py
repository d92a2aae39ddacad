"""Global configuration for Chronicle reminders."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Twilio SMS
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_PHONE = os.getenv("TWILIO_PHONE")

# Notes database
CHRONICLE_DB = os.getenv("CHRONICLE_DB", "data/chronicle.db")

# Alarm sound played by the audio channel
ALARM_PATH = Path(os.getenv("ALARM_PATH", Path(__file__).parent / "assets" / "alarm.mp3"))

# Opened when the user clicks a desktop notification
APP_URL = os.getenv("APP_URL", "http://localhost:3000")

# Logging
LOG_DIR = Path(os.getenv("CHRONICLE_LOG_DIR", Path(os.getenv("LOCALAPPDATA", ".")) / "chronicle" / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_LEVEL = os.getenv("CHRONICLE_LOG_LEVEL", "INFO")
