from hris.db import onboarding_collection, users_collection

from conftest import auth

NEW_EMPLOYEE = {
    "email": "New.Hire@Company.com",
    "name": "Nana Newhire",
    "role": "employee",
    "department": "Engineering",
    "position": "QA Engineer",
}


def test_create_and_fetch_employee(client, users):
    headers = auth(users["hr"])
    body = {**NEW_EMPLOYEE, "managerId": users["lm"]["id"]}

    created = client.post("/api/employees", json=body, headers=headers)

    assert created.status_code == 201, created.text
    employee = created.json()
    assert employee["email"] == "new.hire@company.com"
    assert employee["status"] == "active"
    assert employee["employeeId"].startswith("EMP")
    assert "password" not in employee

    fetched = client.get(f"/api/employees/{employee['id']}", headers=headers).json()
    assert fetched == employee

    assert onboarding_collection.find_one({"employeeId": employee["id"]})["status"] == "pending"


def test_new_employee_can_log_in_with_default_password(client, users):
    client.post("/api/employees", json=NEW_EMPLOYEE, headers=auth(users["hr"]))

    login = client.post("/api/auth/login", json={"email": "new.hire@company.com", "password": "defaultPassword123"})
    assert login.status_code == 200


def test_duplicate_email_is_rejected(client, users):
    body = {**NEW_EMPLOYEE, "email": "EMPLOYEE@company.com"}

    response = client.post("/api/employees", json=body, headers=auth(users["hr"]))

    assert response.status_code == 400
    assert users_collection.count_documents() == 5


def test_unknown_manager_or_field_is_rejected(client, users):
    headers = auth(users["hr"])

    assert client.post("/api/employees", json={**NEW_EMPLOYEE, "managerId": "nobody"}, headers=headers).status_code == 400
    assert client.post("/api/employees", json={**NEW_EMPLOYEE, "salary": 1}, headers=headers).status_code == 400
    assert client.post("/api/employees", json={**NEW_EMPLOYEE, "email": "not-an-email"}, headers=headers).status_code == 400


def test_only_hr_and_admin_manage_employees(client, users):
    for key in ("employee", "lm", "hou"):
        assert client.get("/api/employees", headers=auth(users[key])).status_code == 403
    assert client.get("/api/employees", headers=auth(users["admin"])).status_code == 200


def test_list_filters(client, users):
    headers = auth(users["hr"])

    managers = client.get("/api/employees", params={"role": "line_manager"}, headers=headers).json()
    assert [m["id"] for m in managers] == [users["lm"]["id"]]

    engineering = client.get("/api/employees", params={"department": "Engineering"}, headers=headers).json()
    assert len(engineering) == 3


def test_update_employee(client, users):
    employee_id = users["employee"]["id"]
    headers = auth(users["hr"])

    response = client.put(f"/api/employees/{employee_id}", json={"position": "Senior Engineer"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["position"] == "Senior Engineer"
    assert response.json()["name"] == users["employee"]["name"]

    assert client.put(f"/api/employees/{employee_id}", json={"managerId": employee_id}, headers=headers).status_code == 400
    assert client.put("/api/employees/missing", json={"position": "x"}, headers=headers).status_code == 404


def test_delete_employee(client, users):
    created = client.post("/api/employees", json=NEW_EMPLOYEE, headers=auth(users["hr"])).json()

    response = client.delete(f"/api/employees/{created['id']}", headers=auth(users["admin"]))

    assert response.status_code == 204
    assert users_collection.find_one({"id": created["id"]}) is None
    assert onboarding_collection.find_one({"employeeId": created["id"]}) is None
    assert client.delete(f"/api/employees/{created['id']}", headers=auth(users["admin"])).status_code == 404


def test_required_fields_cannot_be_nulled(client, users):
    employee_id = users["employee"]["id"]
    headers = auth(users["hr"])

    for field in ("role", "name", "email", "status"):
        response = client.put(f"/api/employees/{employee_id}", json={field: None}, headers=headers)
        assert response.status_code == 400, field

    stored = users_collection.find_one({"id": employee_id})
    assert stored["role"] == "employee"
    assert stored["name"] == users["employee"]["name"]
    assert client.get("/api/users/me", headers=auth(users["employee"])).status_code == 200

    unassigned = client.put(f"/api/employees/{employee_id}", json={"managerId": None}, headers=headers)
    assert unassigned.status_code == 200
    assert unassigned.json()["managerId"] is None


def test_padded_initial_password_is_trimmed(client, users):
    body = {**NEW_EMPLOYEE, "password": "  padded-pass-9  "}
    client.post("/api/employees", json=body, headers=auth(users["hr"]))

    login = client.post("/api/auth/login", json={"email": "new.hire@company.com", "password": "padded-pass-9"})
    assert login.status_code == 200
