import os
from datetime import timedelta
from dotenv import load_dotenv

from policy import Policy

load_dotenv()

SOURCE_TAG = os.getenv("SOURCE_TAG", "YouTube")
WATCHED_PREFIX = os.getenv("WATCHED_PREFIX", "Watched ")
SHORTS_MARKER = os.getenv("SHORTS_MARKER", "/shorts/")

VIDEO_AVG_MINUTES = float(os.getenv("VIDEO_AVG_MINUTES", "10"))
SHORT_AVG_MINUTES = float(os.getenv("SHORT_AVG_MINUTES", "0.5"))
MEANINGFUL_RANGE_HOURS = float(os.getenv("MEANINGFUL_RANGE_HOURS", "24"))

FLASK_HOST = os.getenv("FLASK_HOST", "127.0.0.1")
FLASK_PORT = int(os.getenv("FLASK_PORT", "4000"))
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "False").lower() == "true"
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "200"))


def validate_config():
    if VIDEO_AVG_MINUTES <= 0:
        raise ValueError("VIDEO_AVG_MINUTES must be positive")
    if SHORT_AVG_MINUTES <= 0:
        raise ValueError("SHORT_AVG_MINUTES must be positive")
    if MEANINGFUL_RANGE_HOURS < 0:
        raise ValueError("MEANINGFUL_RANGE_HOURS must not be negative")
    if not WATCHED_PREFIX:
        raise ValueError("WATCHED_PREFIX must not be empty")


def build_policy() -> Policy:
    return Policy(
        source_tag=SOURCE_TAG,
        watched_prefix=WATCHED_PREFIX,
        shorts_marker=SHORTS_MARKER,
        meaningful_range=timedelta(hours=MEANINGFUL_RANGE_HOURS),
    ).with_averages(VIDEO_AVG_MINUTES, SHORT_AVG_MINUTES)
