# app/config.py
"""
Environment configuration.
Credentials for the Google backend are read lazily so the app can start
(and serve the form) before they are set.
"""
import os
from typing import Optional

from pydantic import BaseModel

SHEETS_BACKEND = os.getenv("SHEETS_BACKEND", "google")  # 'google' or 'local'
GOOGLE_SHEET_RANGE = os.getenv("GOOGLE_SHEET_RANGE", "Sheet1!A:E")
LOCAL_SHEET_PATH = os.getenv("LOCAL_SHEET_PATH", "data/survey_responses.csv")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

REQUIRED_VARS = ("GOOGLE_SHEET_ID", "GOOGLE_CLIENT_EMAIL", "GOOGLE_PRIVATE_KEY")


class MissingCredentialsError(RuntimeError):
    """Raised when one of the GOOGLE_* variables is not set."""


class SheetCredentials(BaseModel):
    sheet_id: str
    client_email: str
    private_key: str
    sheet_range: str = GOOGLE_SHEET_RANGE

    def service_account_info(self) -> dict:
        """Minimal service account info accepted by google-auth."""
        return {
            "type": "service_account",
            "client_email": self.client_email,
            "private_key": self.private_key,
            "token_uri": "https://oauth2.googleapis.com/token",
        }


def unescape_private_key(raw: str) -> str:
    # Keys stored in .env files or dashboards usually carry literal "\n"
    return raw.replace("\\n", "\n")


def cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    return [o.strip() for o in raw.split(",") if o.strip()]


def load_credentials(env: Optional[dict] = None) -> SheetCredentials:
    """Read the spreadsheet id and service account from the environment.

    Only existence is checked; a malformed key fails on the first API call.
    """
    env = os.environ if env is None else env
    missing = [name for name in REQUIRED_VARS if not env.get(name)]
    if missing:
        raise MissingCredentialsError(
            f"Missing environment variables: {', '.join(missing)}"
        )
    return SheetCredentials(
        sheet_id=env["GOOGLE_SHEET_ID"],
        client_email=env["GOOGLE_CLIENT_EMAIL"],
        private_key=unescape_private_key(env["GOOGLE_PRIVATE_KEY"]),
        sheet_range=env.get("GOOGLE_SHEET_RANGE") or GOOGLE_SHEET_RANGE,
    )
