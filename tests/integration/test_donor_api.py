"""Integration tests for the donor API routes."""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from service.api.donor_api import app, get_db


@pytest.fixture
def api(db):
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def approved_donor(db):
    donor_id = db.add_donor("Asha", blood_group="O+")
    db.upsert_profile(donor_id, "approved")
    return donor_id


def test_root_liveness(api):
    response = api.get("/")

    assert response.status_code == 200
    assert response.text == "Backend is running"


def test_health(api):
    response = api.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "OK"}


def test_details_for_recent_donor(api, db, approved_donor):
    last = date.today() - timedelta(days=30)
    db.add_donation(approved_donor, last, "City Blood Bank")

    data = api.get(f"/api/donor/{approved_donor}/details").json()

    assert data["success"] is True
    assert data["bloodGroup"] == "O+"
    assert data["lastDonation"] == last.isoformat()
    assert data["nextEligible"] == (last + timedelta(days=90)).isoformat()
    assert data["daysUntilEligible"] == 60
    assert data["isEligible"] is False


def test_details_for_first_time_donor(api, approved_donor):
    data = api.get(f"/api/donor/{approved_donor}/details").json()

    assert data["isEligible"] is True
    assert data["lastDonation"] is None
    assert data["nextEligible"] is None
    assert data["daysUntilEligible"] is None


def test_details_unknown_donor(api):
    response = api.get("/api/donor/999/details")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_recent_donations_limit_and_order(api, db, approved_donor):
    for days_ago in range(1, 8):
        db.add_donation(approved_donor, date.today() - timedelta(days=days_ago * 100),
                        f"Site {days_ago}", units=1, blood_group="O+")

    data = api.get(f"/api/donor/{approved_donor}/recent-donations", params={"limit": 5}).json()

    assert data["success"] is True
    assert [d["location"] for d in data["donations"]] == [f"Site {i}" for i in range(1, 6)]
    assert data["donations"][0]["bloodGroup"] == "O+"
    assert set(data["donations"][0]) == {"date", "location", "units", "bloodGroup"}


def test_recent_donations_default_limit(api, db, approved_donor):
    for days_ago in range(1, 10):
        db.add_donation(approved_donor, date.today() - timedelta(days=days_ago), "Site")

    data = api.get(f"/api/donor/{approved_donor}/recent-donations").json()

    assert len(data["donations"]) == 5


@pytest.mark.parametrize("limit", [0, 51, "many"])
def test_recent_donations_rejects_bad_limit(api, approved_donor, limit):
    response = api.get(f"/api/donor/{approved_donor}/recent-donations", params={"limit": limit})

    assert response.status_code == 422


def test_profile_found_and_missing(api, db, approved_donor):
    other = db.add_donor("Eshan")

    found = api.get(f"/api/profile/donor/{approved_donor}")
    missing = api.get(f"/api/profile/donor/{other}")

    assert found.json() == {"success": True, "profile": {"approval_status": "approved", "admin_remarks": None}}
    assert missing.status_code == 404
    assert missing.json()["success"] is False


def test_stats(api, db, approved_donor):
    db.add_donation(approved_donor, date(2026, 1, 1), "A", units=2)
    db.add_donation(approved_donor, date(2026, 5, 1), "B", units=1)

    data = api.get(f"/api/blood-requests/donor/{approved_donor}/stats").json()

    assert data == {"success": True, "donatedCount": 2, "totalUnits": 3}


def test_available_requests_match_blood_group(api, db, approved_donor):
    db.add_blood_request("A+", "Teaching Hospital")
    db.add_blood_request("O-", "Trauma Center")

    data = api.get(f"/api/blood-requests/available/{approved_donor}").json()

    assert [r["hospital"] for r in data["requests"]] == ["Teaching Hospital"]
    assert data["requests"][0]["bloodGroup"] == "A+"


def test_available_requests_need_approved_profile(api, db):
    pending = db.add_donor("Chandra", blood_group="O-")
    db.upsert_profile(pending, "pending")
    db.add_blood_request("A+", "Teaching Hospital")

    data = api.get(f"/api/blood-requests/available/{pending}").json()

    assert data == {"success": True, "requests": []}


def test_unread_count(api, db, approved_donor):
    db.add_notification(approved_donor, "New request")
    db.add_notification(approved_donor, "Seen", is_read=True)

    data = api.get(f"/api/notifications/{approved_donor}/unread-count").json()

    assert data == {"success": True, "count": 1}
