# app/services/sheets.py
"""
Spreadsheet append layer with Google Sheets and local CSV backends.
Set SHEETS_BACKEND env var to 'google' or 'local' to switch.
"""
import csv
import logging
from pathlib import Path
from typing import Any, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app import config

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
ROW_WIDTH = 5


class SheetAppendError(Exception):
    """Any failure while authenticating or appending a row."""


class SheetBackend:
    """Abstract append-only sheet interface"""

    def append_row(self, row: list[Any]) -> dict:
        """Append one row, return the backend's response payload"""
        raise NotImplementedError


def _check_row(row: list[Any]) -> None:
    if len(row) != ROW_WIDTH:
        raise ValueError(f"Expected {ROW_WIDTH} columns, got {len(row)}")


class GoogleSheet(SheetBackend):
    """Google Sheets API v4 backend authenticated with a service account"""

    def __init__(self, credentials: Optional[config.SheetCredentials] = None):
        self._credentials = credentials
        self._service = None

    @property
    def credentials(self) -> config.SheetCredentials:
        if self._credentials is None:
            self._credentials = config.load_credentials()
        return self._credentials

    @property
    def service(self):
        """Lazy build of the sheets service"""
        if self._service is None:
            creds = service_account.Credentials.from_service_account_info(
                self.credentials.service_account_info(), scopes=SCOPES
            )
            self._service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        return self._service

    def append_row(self, row: list[Any]) -> dict:
        _check_row(row)
        try:
            result = self.service.spreadsheets().values().append(
                spreadsheetId=self.credentials.sheet_id,
                range=self.credentials.sheet_range,
                valueInputOption="USER_ENTERED",
                insertDataOption="INSERT_ROWS",
                body={"values": [row]},
            ).execute()
        except config.MissingCredentialsError as e:
            raise SheetAppendError(str(e)) from e
        except HttpError as e:
            status = getattr(e.resp, "status", "unknown")
            logger.error("[Sheets] Append rejected (HTTP %s): %s", status, e.reason)
            raise SheetAppendError(
                f"Google Sheets rejected the request (HTTP {status}): {e.reason}"
            ) from e
        except (GoogleAuthError, ValueError) as e:
            # Messages from google-auth never echo the key itself
            logger.error("[Sheets] Authentication failed: %s", e)
            raise SheetAppendError(f"Google authentication failed: {e}") from e
        except (httplib2.HttpLib2Error, OSError) as e:
            logger.error("[Sheets] Network error: %s", e)
            raise SheetAppendError(f"Could not reach Google Sheets: {e}") from e

        updated = (result or {}).get("updates", {}).get("updatedRange")
        logger.info("[Sheets] Appended row to %s", updated or self.credentials.sheet_range)
        return result


class LocalSheet(SheetBackend):
    """CSV file backend for development without Google credentials"""

    def __init__(self, path: str = "data/survey_responses.csv"):
        self.path = Path(path)

    def append_row(self, row: list[Any]) -> dict:
        _check_row(row)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", newline="", encoding="utf-8") as f:
                csv.writer(f).writerow(row)
        except OSError as e:
            raise SheetAppendError(f"Could not write {self.path}: {e}") from e
        logger.info("[Sheets] Appended row to %s", self.path)
        return {"updates": {"updatedRange": str(self.path), "updatedRows": 1}}


# Global sheet instance
_sheet: Optional[SheetBackend] = None


def get_sheet() -> SheetBackend:
    """Get sheet backend singleton"""
    global _sheet
    if _sheet is None:
        if config.SHEETS_BACKEND == "local":
            _sheet = LocalSheet(path=config.LOCAL_SHEET_PATH)
            logger.info("[Sheets] Backend: local CSV %s", config.LOCAL_SHEET_PATH)
        else:
            _sheet = GoogleSheet()
            logger.info("[Sheets] Backend: Google Sheets range=%s", config.GOOGLE_SHEET_RANGE)
    return _sheet


def reset_sheet() -> None:
    global _sheet
    _sheet = None
