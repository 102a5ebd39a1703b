"""Configuration loading and validation"""
import json
import os
import string
from typing import Any, Dict, Optional, Union
from dotenv import load_dotenv

from .utils.logger import setup_logger

# Load environment variables from .env file before any logger reads LOG_LEVEL
load_dotenv()

logger = setup_logger(__name__)

DEFAULT_LIVE_TITLE = "⚽ Match started!"
DEFAULT_LIVE_BODY = "{opponent1} VS {opponent2} - Live now"

TEMPLATE_FIELDS = {"opponent1", "opponent2"}

FIREBASE_FIELD_VARS = {
    "project_id": "FIREBASE_PROJECT_ID",
    "private_key_id": "FIREBASE_PRIVATE_KEY_ID",
    "private_key": "FIREBASE_PRIVATE_KEY",
    "client_email": "FIREBASE_CLIENT_EMAIL",
    "client_id": "FIREBASE_CLIENT_ID",
    "client_x509_cert_url": "FIREBASE_CERT_URL",
}


class Config:
    """Application configuration"""

    def __init__(self):
        """Load and validate configuration"""
        # Supabase configuration
        self.supabase_url = self._get_required("SUPABASE_URL")
        self.supabase_service_key = self._get_required("SUPABASE_SERVICE_KEY")

        # Firebase credentials: inline JSON, file path, or individual fields
        self.firebase_credentials = self._load_firebase_credentials()

        # Scheduling
        self.check_interval = int(os.getenv("CHECK_INTERVAL_SECONDS", "60"))
        self.live_window_minutes = int(os.getenv("LIVE_WINDOW_MINUTES", "5"))
        self.end_after_hours = int(os.getenv("END_AFTER_HOURS", "2"))

        # Status labels written to the matches table
        self.live_status_label = os.getenv("LIVE_STATUS_LABEL", "live")
        self.ended_status_label = os.getenv("ENDED_STATUS_LABEL", "ended")

        # Notification templates
        self.live_title_template = os.getenv("LIVE_NOTIFICATION_TITLE", DEFAULT_LIVE_TITLE)
        self.live_body_template = os.getenv("LIVE_NOTIFICATION_BODY", DEFAULT_LIVE_BODY)

        self._validate()
        logger.info("Configuration loaded successfully")

    def _get_required(self, key: str) -> str:
        """Get required environment variable"""
        value = os.getenv(key)
        if not value:
            raise ValueError(f"Required environment variable {key} is not set")
        return value

    def _load_firebase_credentials(self) -> Union[str, Dict[str, Any]]:
        """
        Resolve Firebase service account credentials

        Returns:
            Either a path to a service account file or the parsed
            service account mapping
        """
        raw = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON")
        if raw:
            try:
                return json.loads(raw)
            except json.JSONDecodeError as e:
                raise ValueError("FIREBASE_SERVICE_ACCOUNT_JSON is not valid JSON") from e

        path = os.getenv("FIREBASE_CREDENTIALS_FILE")
        if path:
            if not os.path.isfile(path):
                raise ValueError(f"FIREBASE_CREDENTIALS_FILE not found: {path}")
            return path

        fields = self._firebase_fields_from_env()
        if fields:
            return fields

        raise ValueError(
            "Firebase credentials are not set. Provide FIREBASE_SERVICE_ACCOUNT_JSON, "
            "FIREBASE_CREDENTIALS_FILE, or the individual FIREBASE_* fields"
        )

    def _firebase_fields_from_env(self) -> Optional[Dict[str, Any]]:
        """Build a service account mapping from individual FIREBASE_* variables"""
        if not os.getenv("FIREBASE_PROJECT_ID"):
            return None

        for key in ("FIREBASE_PRIVATE_KEY", "FIREBASE_CLIENT_EMAIL"):
            self._get_required(key)

        info: Dict[str, Any] = {
            "type": "service_account",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "auth_provider_x509_cert_url": "https://www.googleapis.com/oauth2/v1/certs",
        }
        for field, env_key in FIREBASE_FIELD_VARS.items():
            info[field] = os.getenv(env_key)

        # Keys pasted into a single-line env var carry literal \n sequences
        info["private_key"] = info["private_key"].replace("\\n", "\n")
        return info

    def _validate(self):
        """Validate configuration values"""
        if self.check_interval < 1:
            raise ValueError("CHECK_INTERVAL_SECONDS must be at least 1 second")

        if self.live_window_minutes < 1:
            raise ValueError("LIVE_WINDOW_MINUTES must be at least 1 minute")

        if self.end_after_hours < 1:
            raise ValueError("END_AFTER_HOURS must be at least 1 hour")

        # A match must leave the live window before it can be marked ended
        if self.live_window_minutes >= self.end_after_hours * 60:
            raise ValueError("LIVE_WINDOW_MINUTES must be shorter than END_AFTER_HOURS")

        if self.live_status_label == self.ended_status_label:
            raise ValueError("LIVE_STATUS_LABEL and ENDED_STATUS_LABEL must differ")

        for key, template in (
            ("LIVE_NOTIFICATION_TITLE", self.live_title_template),
            ("LIVE_NOTIFICATION_BODY", self.live_body_template),
        ):
            # Positional fields like {} or {0} parse to "" or a digit
            unknown = {
                name for _, name, _, _ in string.Formatter().parse(template)
                if name is not None and name not in TEMPLATE_FIELDS
            }
            if unknown:
                placeholders = ", ".join("{" + name + "}" for name in sorted(unknown))
                raise ValueError(f"{key} uses unknown placeholder(s): {placeholders}")

        logger.info(f"Check interval: {self.check_interval} seconds")
        logger.info(f"Live window: {self.live_window_minutes} minutes")
        logger.info(f"Matches end after: {self.end_after_hours} hours")
