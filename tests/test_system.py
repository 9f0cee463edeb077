import asyncio

from hris.db import integrations_collection, notifications_collection, roles_collection, store, users_collection
from hris.models.integrations import Integration
from hris.models.notifications import NotificationType
from hris.utils.notification_utils import create_notification

from conftest import auth


def test_index(client):
    assert client.get("/").status_code == 200


def test_notifications_are_private(client, users):
    mine = create_notification(users["employee"]["id"], NotificationType.LEAVE_APPROVED, "Approved", "leave-1")
    theirs = create_notification(users["lm"]["id"], NotificationType.LEAVE_REQUEST, "New request", "leave-1")
    headers = auth(users["employee"])

    listed = client.get("/api/notifications", headers=headers).json()
    assert [n["id"] for n in listed] == [mine["id"]]

    assert client.put(f"/api/notifications/{theirs['id']}/read", headers=headers).status_code == 404
    read = client.put(f"/api/notifications/{mine['id']}/read", headers=headers)
    assert read.status_code == 200
    assert read.json()["read"] is True


def test_attendance_uploads(client, users):
    headers = auth(users["employee"])

    created = client.post("/api/attendance-uploads", json={"fileName": "october.xlsx", "totalHours": 152}, headers=headers)
    assert created.status_code == 201
    assert created.json()["workingDays"] == 20
    assert created.json()["totalHours"] == 152

    assert len(client.get("/api/attendance-uploads", headers=headers).json()) == 1

    params = {"employeeId": users["employee"]["id"]}
    assert client.get("/api/attendance-uploads", params=params, headers=auth(users["lm"])).status_code == 403
    assert len(client.get("/api/attendance-uploads", params=params, headers=auth(users["hr"])).json()) == 1


def test_integrations_typed_patch(client, users):
    integration = integrations_collection.insert_one(Integration(name="Email").to_record())
    url = f"/api/integrations/{integration['id']}"

    enabled = client.put(url, json={"enabled": True, "config": {"host": "smtp.company.com"}}, headers=auth(users["admin"]))
    assert enabled.status_code == 200
    assert enabled.json()["enabled"] is True
    assert enabled.json()["name"] == "Email"

    assert client.put(url, json={"id": "hijack"}, headers=auth(users["admin"])).status_code == 400
    assert client.put(url, json={"enabled": None}, headers=auth(users["admin"])).status_code == 400
    assert client.put(url, json={"config": None}, headers=auth(users["admin"])).status_code == 400
    assert integrations_collection.find_one({"id": integration["id"]})["enabled"] is True
    assert client.put(url, json={"enabled": False}, headers=auth(users["hr"])).status_code == 403
    assert client.put("/api/integrations/missing", json={}, headers=auth(users["admin"])).status_code == 404


def test_system_settings_merge(client, users):
    headers = auth(users["admin"])

    client.put("/api/system-settings", json={"companyName": "Acme"}, headers=headers)
    merged = client.put("/api/system-settings", json={"timezone": "Africa/Accra"}, headers=headers).json()

    assert merged == {"companyName": "Acme", "timezone": "Africa/Accra"}
    assert store.system_settings == merged
    assert client.get("/api/system-settings", headers=auth(users["hr"])).status_code == 403


def test_system_stats_and_stubs(client, users):
    headers = auth(users["admin"])

    stats = client.get("/api/system/stats", headers=headers).json()
    assert stats["totalUsers"] == 5
    assert stats["activeUsers"] == 5
    assert stats["totalLeaveRequests"] == 0

    assert client.post("/api/system/backup", headers=headers).status_code == 200
    assert client.post("/api/system/maintenance", headers=headers).status_code == 200
    assert client.post("/api/system/backup", headers=auth(users["hr"])).status_code == 403


def test_expiry_job_notifies_once(client, users, monkeypatch):
    from hris import cron_jobs

    document = {
        "id": "doc-1",
        "employeeId": users["employee"]["id"],
        "type": "ghana_card",
        "originalFileName": "card.png",
        "expiryDate": "2026-11-01",
    }
    monkeypatch.setattr(cron_jobs, "expiring_documents", lambda: [document])

    assert asyncio.run(cron_jobs.notify_expiring_documents()) == 1
    assert asyncio.run(cron_jobs.notify_expiring_documents()) == 0

    warnings = notifications_collection.find({"type": "document_expiring"})
    assert [n["userId"] for n in warnings] == [users["employee"]["id"]]


def test_seed_builds_a_reporting_chain():
    from hris import seed

    ids = seed.seed_users()
    seed.seed_roles()
    seed.seed_integrations()

    employee = users_collection.find_one({"id": ids["employee"]})
    line_manager = users_collection.find_one({"id": employee["managerId"]})
    assert line_manager["role"] == "line_manager"
    assert line_manager["managerId"] == ids["hou"]
    assert roles_collection.count_documents() == 5
    assert integrations_collection.find_one({"name": "Email"})["enabled"] is False

    assert seed.seed_users() == ids
    assert users_collection.count_documents() == 5
