# utils.py
import os
import logging
from dotenv import load_dotenv
load_dotenv()

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
CHAT_BACKEND = os.getenv("CHAT_BACKEND", "gemini").lower()
RASA_URL = os.getenv("RASA_URL", "http://localhost:5005/webhooks/rest/webhook")

REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", 30))
MAX_RETRIES = int(os.getenv("MAX_RETRIES", 2))
RETRY_BACKOFF = float(os.getenv("RETRY_BACKOFF", 1.0))
MAX_OUTPUT_TOKENS = int(os.getenv("MAX_OUTPUT_TOKENS", 100))

APP_PORT = int(os.getenv("APP_PORT", 8000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def setup_logging(level=LOG_LEVEL):
    logging.basicConfig(level=level, format="[%(asctime)s] %(levelname)s %(name)s - %(message)s")
