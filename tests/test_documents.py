import os
from datetime import date, timedelta

from hris.config import settings
from hris.db import document_audit_logs_collection, documents_collection, notifications_collection
from hris.utils.document_utils import check_compliance, document_stats

from conftest import auth

PDF = ("cv.pdf", b"%PDF-1.4 fake content", "application/pdf")


def upload(client, user, document_type="cv", file=PDF, **fields):
    data = {"type": document_type, **fields}
    return client.post("/api/documents/upload", data=data, files={"file": file}, headers=auth(user))


def uploaded(client, user, document_type="cv", **fields):
    response = upload(client, user, document_type, **fields)
    assert response.status_code == 201, response.text
    return response.json()


def decide(client, user, document_id, body):
    return client.put(f"/api/documents/{document_id}/approve", json=body, headers=auth(user))


def audit_actions(document_id):
    return [entry["action"] for entry in document_audit_logs_collection.find({"documentId": document_id})]


def test_upload_stores_file_and_record(client, users):
    document = uploaded(client, users["employee"], message="My latest CV")

    assert document["status"] == "pending"
    assert document["isRequired"] is True
    assert document["employeeId"] == users["employee"]["id"]
    assert document["originalFileName"] == "cv.pdf"
    assert document["fileName"].endswith(".pdf") and document["fileName"] != "cv.pdf"
    assert os.path.exists(document["filePath"])
    assert os.path.dirname(document["filePath"]) == os.path.abspath(settings.UPLOAD_DIR)
    assert audit_actions(document["id"]) == ["uploaded"]


def test_upload_alias_route(client, users):
    response = client.post(
        "/api/documents",
        data={"type": "certificate"},
        files={"file": PDF},
        headers=auth(users["employee"]),
    )

    assert response.status_code == 201
    assert response.json()["isRequired"] is False


def test_unsupported_type_is_rejected_before_storing(client, users):
    response = upload(client, users["employee"], file=("run.exe", b"MZ", "application/x-msdownload"))

    assert response.status_code == 400
    assert documents_collection.count_documents() == 0
    assert not os.path.exists(settings.UPLOAD_DIR) or not os.listdir(settings.UPLOAD_DIR)


def test_oversized_upload_is_rejected(client, users, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 16)

    response = upload(client, users["employee"], file=("big.pdf", b"x" * 17, "application/pdf"))

    assert response.status_code == 400
    assert documents_collection.count_documents() == 0


def test_related_entity_fields_come_together(client, users):
    response = upload(client, users["employee"], document_type="medical_certificate", relatedEntityType="leave_request")
    assert response.status_code == 400

    response = upload(
        client,
        users["employee"],
        document_type="medical_certificate",
        relatedEntityId="no-such-leave",
        relatedEntityType="leave_request",
    )
    assert response.status_code == 400


def test_document_linked_to_own_leave(client, users):
    leave = client.post(
        "/api/leave-requests",
        json={"type": "sick", "startDate": "2026-11-02", "endDate": "2026-11-03"},
        headers=auth(users["employee"]),
    ).json()

    document = uploaded(
        client,
        users["employee"],
        document_type="medical_certificate",
        relatedEntityId=leave["id"],
        relatedEntityType="leave_request",
    )

    assert document["relatedEntityId"] == leave["id"]


def test_approval_appends_one_audit_entry_and_notifies(client, users):
    document = uploaded(client, users["employee"])

    response = decide(client, users["hr"], document["id"], {"status": "approved"})

    assert response.status_code == 200
    assert response.json()["status"] == "approved"
    assert response.json()["approvedBy"] == users["hr"]["id"]
    assert audit_actions(document["id"]) == ["uploaded", "approved"]
    types = [n["type"] for n in notifications_collection.find({"userId": users["employee"]["id"]})]
    assert types == ["document_approved"]


def test_rejection_needs_a_reason(client, users):
    document = uploaded(client, users["employee"])

    for body in ({"status": "rejected"}, {"status": "rejected", "rejectionReason": "   "}):
        assert decide(client, users["hr"], document["id"], body).status_code == 400
    assert documents_collection.find_one({"id": document["id"]})["status"] == "pending"
    assert audit_actions(document["id"]) == ["uploaded"]

    response = decide(client, users["hr"], document["id"], {"status": "rejected", "rejectionReason": "Blurry scan"})
    assert response.status_code == 200
    assert response.json()["rejectionReason"] == "Blurry scan"
    assert audit_actions(document["id"]) == ["uploaded", "rejected"]


def test_decisions_are_final(client, users):
    document = uploaded(client, users["employee"])
    decide(client, users["hr"], document["id"], {"status": "approved"})

    again = decide(client, users["admin"], document["id"], {"status": "rejected", "rejectionReason": "Changed my mind"})

    assert again.status_code == 400
    assert audit_actions(document["id"]) == ["uploaded", "approved"]


def test_only_hr_and_admin_decide(client, users):
    document = uploaded(client, users["employee"])

    assert decide(client, users["employee"], document["id"], {"status": "approved"}).status_code == 403
    assert decide(client, users["lm"], document["id"], {"status": "approved"}).status_code == 403
    assert decide(client, users["hr"], document["id"], {"status": "pending"}).status_code == 400


def test_download_is_audited(client, users):
    document = uploaded(client, users["employee"])

    response = client.get(f"/api/documents/{document['id']}/download", headers=auth(users["employee"]))

    assert response.status_code == 200
    assert response.content == PDF[1]
    assert audit_actions(document["id"]) == ["uploaded", "downloaded"]

    stranger = client.get(f"/api/documents/{document['id']}/download", headers=auth(users["lm"]))
    assert stranger.status_code == 403


def test_delete_keeps_the_audit_trail(client, users):
    document = uploaded(client, users["employee"])

    response = client.delete(f"/api/documents/{document['id']}", headers=auth(users["employee"]))

    assert response.status_code == 204
    assert documents_collection.find_one({"id": document["id"]}) is None
    assert not os.path.exists(document["filePath"])

    trail = client.get(f"/api/documents/{document['id']}/audit", headers=auth(users["hr"]))
    assert trail.status_code == 200
    assert [entry["action"] for entry in trail.json()] == ["uploaded", "deleted"]

    owner_view = client.get(f"/api/documents/{document['id']}/audit", headers=auth(users["employee"]))
    assert owner_view.status_code == 403


def test_listing_and_filters(client, users):
    cv = uploaded(client, users["employee"])
    uploaded(client, users["employee"], document_type="certificate")
    other = uploaded(client, users["lm"], document_type="ghana_card")
    decide(client, users["hr"], cv["id"], {"status": "approved"})

    own = client.get("/api/documents", params={"employeeId": users["lm"]["id"]}, headers=auth(users["employee"]))
    assert {d["employeeId"] for d in own.json()} == {users["employee"]["id"]}

    approved = client.get("/api/documents", params={"status": "approved"}, headers=auth(users["hr"])).json()
    assert [d["id"] for d in approved] == [cv["id"]]

    required = client.get("/api/documents", params={"isRequired": "true"}, headers=auth(users["hr"])).json()
    assert {d["id"] for d in required} == {cv["id"], other["id"]}

    by_employee = client.get(f"/api/documents/employee/{users['lm']['id']}", headers=auth(users["employee"]))
    assert by_employee.status_code == 403


def test_expiry_date_filters(client, users):
    soon = uploaded(client, users["employee"], document_type="ghana_card", expiryDate="2027-01-15")
    uploaded(client, users["employee"], document_type="certificate", expiryDate="2030-06-01")

    response = client.get(
        "/api/documents",
        params={"expiryDateFrom": "2027-01-01", "expiryDateTo": "2027-12-31"},
        headers=auth(users["hr"]),
    )

    assert [d["id"] for d in response.json()] == [soon["id"]]
    assert upload(client, users["employee"], expiryDate="next tuesday").status_code == 400


def test_required_types_and_catalogue(client, users):
    headers = auth(users["employee"])

    assert client.get("/api/documents/required", headers=headers).json() == ["cv", "ghana_card"]
    catalogue = client.get("/api/documents/types", headers=headers).json()
    assert catalogue["ghana_card"]["label"] == "Ghana Card"


def test_compliance_needs_every_required_type_approved(client, users):
    employee_id = users["employee"]["id"]
    cv = uploaded(client, users["employee"], document_type="cv")
    card = uploaded(client, users["employee"], document_type="ghana_card")

    assert check_compliance(employee_id)["missingTypes"] == ["cv", "ghana_card"]

    decide(client, users["hr"], cv["id"], {"status": "approved"})
    decide(client, users["hr"], card["id"], {"status": "rejected", "rejectionReason": "Expired card"})
    result = client.get(f"/api/documents/compliance/{employee_id}", headers=auth(users["hr"])).json()
    assert result["compliant"] is False
    assert result["approvedTypes"] == ["cv"]
    assert result["missingTypes"] == ["ghana_card"]

    card = uploaded(client, users["employee"], document_type="ghana_card")
    decide(client, users["hr"], card["id"], {"status": "approved"})
    assert check_compliance(employee_id)["compliant"] is True

    assert client.get(f"/api/documents/compliance/{employee_id}", headers=auth(users["employee"])).status_code == 403


def test_stats(client, users):
    today = date(2026, 10, 19)
    in_a_week = (today + timedelta(days=7)).isoformat()
    first = uploaded(client, users["employee"], document_type="ghana_card", expiryDate=in_a_week)
    second = uploaded(client, users["employee"], document_type="cv", expiryDate="2026-10-01")
    uploaded(client, users["lm"], document_type="certificate")
    decide(client, users["hr"], first["id"], {"status": "approved"})
    decide(client, users["hr"], second["id"], {"status": "approved"})

    stats = document_stats(today=today)

    assert stats["totalDocuments"] == 3
    assert stats["pendingApproval"] == 1
    assert stats["approved"] == 2
    assert stats["rejected"] == 0
    assert stats["expiringSoon"] == 1
    # employee is compliant; hr, head of unit and line manager are not; admin is not counted
    assert stats["missingRequired"] == 3

    assert client.get("/api/documents/stats", headers=auth(users["hr"])).status_code == 200
    assert client.get("/api/documents/stats", headers=auth(users["employee"])).status_code == 403
