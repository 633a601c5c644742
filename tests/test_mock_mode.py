import os

os.environ.setdefault("USE_MOCK_DATA", "true")
os.environ.setdefault("SUPABASE_URL", "https://mock-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "mock-key")

from fastapi.testclient import TestClient  # noqa: E402

from backend.app.main import app  # noqa: E402

import pytest  # noqa: E402


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


def test_health_endpoint(client):
    response = client.get("/api/system/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["use_mock_data"] is True


def test_list_and_search_leads(client):
    response = client.get("/api/leads")
    assert response.status_code == 200
    leads = response.json()
    assert [lead["id"] for lead in leads] == ["lead_priya1", "lead_rahul2", "lead_amit3"]

    search = client.get("/api/leads", params={"search": "kumar"})
    assert [lead["id"] for lead in search.json()] == ["lead_rahul2"]

    booked = client.get("/api/leads", params={"status": "booked"})
    assert [lead["id"] for lead in booked.json()] == ["lead_amit3"]


def test_pipeline_columns(client):
    response = client.get("/api/leads/pipeline")
    assert response.status_code == 200
    columns = {column["status"]: column for column in response.json()}
    assert columns["new"]["count"] == 1
    assert columns["quoted"]["leads"][0]["name"] == "Rahul Kumar"
    assert columns["failed"]["count"] == 0


def test_lead_create_update_delete(client):
    create_response = client.post(
        "/api/leads",
        json={
            "name": "Charlie Tester",
            "email": "charlie@example.com",
            "mobile": "9000090000",
            "no_of_adults": "",
            "no_of_children": "two",
            "travel_date_from": "",
        },
    )
    assert create_response.status_code == 200
    created = create_response.json()
    lead_id = created["id"]
    assert created["status"] == "new"
    assert created["no_of_adults"] == 1
    assert created["no_of_children"] == 0
    assert created["travel_date_from"] is None

    update_response = client.put(
        f"/api/leads/{lead_id}",
        json={"status": "contacted", "assigned_to": "Anita"},
    )
    assert update_response.status_code == 200
    updated = update_response.json()
    assert updated["status"] == "contacted"
    assert updated["assigned_to"] == "Anita"
    assert updated["name"] == "Charlie Tester"

    delete_response = client.delete(f"/api/leads/{lead_id}")
    assert delete_response.status_code == 200
    assert delete_response.json()["status"] == "deleted"

    missing = client.get(f"/api/leads/{lead_id}")
    assert missing.status_code == 404


def test_invalid_lead_status_is_rejected(client):
    response = client.put("/api/leads/lead_priya1", json={"status": "archived"})
    assert response.status_code == 422


def test_comments_and_documents(client):
    comments = client.get("/api/leads/lead_rahul2/comments")
    assert comments.status_code == 200
    assert len(comments.json()) == 1

    added = client.post(
        "/api/leads/lead_rahul2/comments",
        json={"comment": "  Called back, waiting on dates.  "},
    )
    assert added.status_code == 200
    comment = added.json()
    assert comment["comment"] == "Called back, waiting on dates."
    assert comment["user_name"] == "Current User"

    thread = client.get("/api/leads/lead_rahul2/comments").json()
    assert len(thread) == 2

    blank = client.post("/api/leads/lead_rahul2/comments", json={"comment": "   "})
    assert blank.status_code == 422

    document = client.post(
        "/api/leads/lead_priya1/documents",
        json={
            "file_name": "passport.pdf",
            "file_url": "https://cdn.example.com/docs/passport.pdf",
            "file_type": "application/pdf",
        },
    )
    assert document.status_code == 200
    documents = client.get("/api/leads/lead_priya1/documents").json()
    assert [doc["file_name"] for doc in documents] == ["passport.pdf"]

    orphan = client.post("/api/leads/lead_missing/comments", json={"comment": "Hi"})
    assert orphan.status_code == 404


def test_dashboard_summary(client):
    response = client.get("/api/dashboard/summary")
    assert response.status_code == 200
    summary = response.json()
    assert summary["total"] == 3
    assert summary["by_status"]["booked"] == 1
    assert len(summary["recent_leads"]) == 3
    assert summary["open_drafts"] == 0


def test_activity_log_and_clear(client):
    client.get("/api/leads")
    activity_response = client.get("/api/system/activity")
    assert activity_response.status_code == 200
    entries = activity_response.json()
    assert entries
    assert entries[-1]["action"] == "leads.list"

    limited = client.get("/api/system/activity", params={"limit": 1})
    assert len(limited.json()) == 1

    clear_response = client.delete("/api/system/activity")
    assert clear_response.status_code == 200
    assert client.get("/api/system/activity").json() == []
