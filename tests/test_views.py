import pytest

pytestmark = pytest.mark.django_db

SECRET = {"HTTP_X_ADMIN_SECRET": "let-me-in"}


def test_health(client):
    response = client.get("/api/health/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_report_requires_secret(client):
    assert client.get("/api/status-report/").status_code == 401
    assert client.get("/api/status-report/", HTTP_X_ADMIN_SECRET="wrong").status_code == 401


def test_status_report(client, make_volunteer):
    make_volunteer(status="active", commitments=2)
    make_volunteer()

    response = client.get("/api/status-report/", **SECRET)

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert body["counts"] == {"lead": 0, "active": 1, "probation": 1, "inactive": 0}
    assert body["groups"]["active"][0]["commitments"] == 2


def test_volunteer_detail(client, make_volunteer):
    volunteer = make_volunteer(commitments=1, started_days_ago=30)

    response = client.get(f"/api/volunteers/{volunteer.handle}/", **SECRET)

    assert response.status_code == 200
    body = response.json()
    assert body["volunteer"]["handle"] == volunteer.handle
    assert body["probation"]["commitments_needed"] == 2
    assert body["probation"]["eligible"] is False


def test_volunteer_detail_errors(client):
    assert client.get("/api/volunteers/nobody_here/", **SECRET).status_code == 404
    assert client.get("/api/volunteers/ab/", **SECRET).status_code == 400
