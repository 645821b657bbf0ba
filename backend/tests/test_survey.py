import asyncio
import time
from datetime import datetime, timezone

import httpx

from app.main import app
from app.services import sheets
from app.services.sheets import SheetAppendError
from conftest import FakeSheet

BUDI = {
    "name": "Budi",
    "email": "budi@example.com",
    "rating": "5",
    "feedback": "Layanan sangat memuaskan",
}


def _parse_ts(ts):
    return datetime.fromisoformat(ts.replace("Z", "+00:00"))


def test_valid_submission_appends_one_row(client, fake_sheet):
    before = datetime.now(timezone.utc)
    resp = client.post("/api/survey", json=BUDI)
    after = datetime.now(timezone.utc)

    assert resp.status_code == 200
    assert resp.json()["message"]
    assert len(fake_sheet.rows) == 1
    row = fake_sheet.rows[0]
    assert len(row) == 5
    assert before <= _parse_ts(row[0]) <= after
    assert row[1:] == ["Budi", "budi@example.com", "5", "Layanan sangat memuaskan"]


def test_missing_name_is_rejected(client, fake_sheet):
    resp = client.post("/api/survey", json={"email": "x@example.com", "rating": "3"})

    assert resp.status_code == 400
    assert "name" in resp.json()["error"]
    assert fake_sheet.rows == []


def test_each_required_field_is_checked(client, fake_sheet):
    for field in ("name", "email", "rating"):
        body = dict(BUDI)
        del body[field]
        resp = client.post("/api/survey", json=body)
        assert resp.status_code == 400
        assert field in resp.json()["error"]
    assert fake_sheet.rows == []


def test_blank_and_null_values_count_as_missing(client, fake_sheet):
    resp = client.post("/api/survey", json={"name": "   ", "email": None, "rating": ""})

    assert resp.status_code == 400
    assert "name, email, rating" in resp.json()["error"]
    assert fake_sheet.rows == []


def test_feedback_defaults_to_empty_string(client, fake_sheet):
    body = {k: v for k, v in BUDI.items() if k != "feedback"}
    resp = client.post("/api/survey", json=body)

    assert resp.status_code == 200
    assert fake_sheet.rows[0][-1] == ""


def test_numeric_rating_is_passed_through(client, fake_sheet):
    resp = client.post("/api/survey", json={**BUDI, "rating": 4})

    assert resp.status_code == 200
    assert fake_sheet.rows[0][3] == 4


def test_remote_failure_returns_500_with_message(client, fake_sheet):
    fake_sheet.error = SheetAppendError("Google Sheets rejected the request (HTTP 404): Not Found")
    resp = client.post("/api/survey", json=BUDI)

    assert resp.status_code == 500
    assert "HTTP 404" in resp.json()["error"]


def test_unexpected_failure_returns_generic_message(client, fake_sheet):
    fake_sheet.error = RuntimeError("secret internals")
    resp = client.post("/api/survey", json=BUDI)

    assert resp.status_code == 500
    assert resp.json()["error"]
    assert "secret" not in resp.json()["error"]


def test_same_payload_twice_gives_two_rows(client, fake_sheet):
    client.post("/api/survey", json=BUDI)
    client.post("/api/survey", json=BUDI)

    assert len(fake_sheet.rows) == 2
    assert fake_sheet.rows[0][1:] == fake_sheet.rows[1][1:]


def test_invalid_json_is_rejected(client, fake_sheet):
    resp = client.post(
        "/api/survey", content=b"not json", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert "error" in resp.json()

    resp = client.post("/api/survey", json=["Budi"])
    assert resp.status_code == 400
    assert fake_sheet.rows == []


def test_wrong_field_type_is_rejected(client, fake_sheet):
    resp = client.post("/api/survey", json={**BUDI, "name": {"first": "Budi"}})

    assert resp.status_code == 400
    assert "name" in resp.json()["error"]
    assert fake_sheet.rows == []


def test_form_page_and_health(client):
    page = client.get("/")
    assert page.status_code == 200
    assert 'id="survey-form"' in page.text
    assert "/api/survey" in page.text

    assert client.get("/health").json() == {"status": "ok"}


def test_boolean_rating_is_rejected(client, fake_sheet):
    for value in (False, True):
        resp = client.post("/api/survey", json={**BUDI, "rating": value})
        assert resp.status_code == 400
        assert "rating" in resp.json()["error"]
    assert fake_sheet.rows == []


class SlowSheet(FakeSheet):
    def append_row(self, row):
        time.sleep(0.5)
        return super().append_row(row)


def test_concurrent_submissions_do_not_block_each_other():
    slow = SlowSheet()
    app.dependency_overrides[sheets.get_sheet] = lambda: slow

    async def run():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://survey.test") as ac:
            posts = [ac.post("/api/survey", json=BUDI) for _ in range(4)]
            return await asyncio.gather(*posts, ac.get("/health"))

    try:
        start = time.monotonic()
        responses = asyncio.run(run())
        elapsed = time.monotonic() - start
    finally:
        app.dependency_overrides.clear()

    assert [r.status_code for r in responses] == [200] * 5
    assert len(slow.rows) == 4
    # Four 0.5s appends run side by side, not one after another
    assert elapsed < 1.5
