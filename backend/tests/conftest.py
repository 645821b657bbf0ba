import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services import sheets
from app.services.sheets import SheetBackend


class FakeSheet(SheetBackend):
    """Records appended rows; raises `error` when set."""

    def __init__(self):
        self.rows = []
        self.error = None

    def append_row(self, row):
        if self.error is not None:
            raise self.error
        self.rows.append(list(row))
        return {"updates": {"updatedRows": 1}}


@pytest.fixture
def fake_sheet():
    return FakeSheet()


@pytest.fixture
def client(fake_sheet):
    app.dependency_overrides[sheets.get_sheet] = lambda: fake_sheet
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _fresh_sheet_singleton():
    sheets.reset_sheet()
    yield
    sheets.reset_sheet()
