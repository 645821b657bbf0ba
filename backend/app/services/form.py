# app/services/form.py
"""
Python model of the survey form.

Mirrors the browser page in app/templates/survey.html: four field values,
an in-flight flag and a status message. Used by the smoke client.
"""
import logging
import os
from typing import Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000"

FIELDS = ("name", "email", "rating", "feedback")
REQUIRED = ("name", "email", "rating")

MSG_REQUIRED = "Please fill in your name, email, and rating."
MSG_THANKS = "Thank you for your feedback!"
MSG_NETWORK = "Could not reach the server. Please check your connection and try again."
MSG_FAILED = "Submission failed. Please try again."


class SurveyForm:
    def __init__(self, base_url: Optional[str] = None, timeout: float = 30):
        self.base_url = (base_url or os.getenv("SURVEY_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.timeout = timeout
        self.values: Dict[str, str] = {f: "" for f in FIELDS}
        self.submitting = False
        self.status = ""
        self.ok: Optional[bool] = None

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/api/survey"

    def set_field(self, name: str, value) -> None:
        if name not in self.values:
            raise KeyError(f"Unknown field: {name}")
        self.values[name] = "" if value is None else str(value)

    def validate(self) -> bool:
        """Same presence check the server performs, without a round trip."""
        return all(self.values[f].strip() for f in REQUIRED)

    def reset(self) -> None:
        self.values = {f: "" for f in FIELDS}

    def submit(self) -> bool:
        """Send the current values. Returns True when the row was recorded."""
        if self.submitting:
            return False
        if not self.validate():
            self.ok = False
            self.status = MSG_REQUIRED
            return False

        self.submitting = True
        self.status = ""
        try:
            resp = requests.post(self.endpoint, json=dict(self.values), timeout=self.timeout)
            try:
                body = resp.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            if resp.status_code == 200:
                self.ok = True
                self.status = MSG_THANKS
                self.reset()
            else:
                self.ok = False
                self.status = body.get("error") or MSG_FAILED
                logger.warning("[Form] Server answered %s: %s", resp.status_code, self.status)
        except requests.RequestException as e:
            logger.warning("[Form] Request to %s failed: %s", self.endpoint, e)
            self.ok = False
            self.status = MSG_NETWORK
        finally:
            self.submitting = False
        return bool(self.ok)
