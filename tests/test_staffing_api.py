from shiftcensus.context import RequestContext


def test_department_pattern_and_rule_lifecycle(client, acme):
    department = client.post("/api/departments", json={"name": "Dietary"})
    assert department.status_code == 200
    department_id = department.json()["id"]
    assert department.json()["org_code"] == "ACME"

    pattern = client.post(
        "/api/shift-patterns",
        json={
            "name": "Night",
            "department_id": department_id,
            "start_local": "22:00",
            "end_local": "06:00",
            "timezone": "America/Los_Angeles",
        },
    )
    assert pattern.status_code == 200
    assert pattern.json()["start_local"] == "22:00:00"
    pattern_id = pattern.json()["id"]

    rule = client.post(
        "/api/staffing-minimums",
        json={
            "department_id": department_id,
            "role": "Cook",
            "dow": 0,
            "min_count": 2,
            "shift_pattern_id": pattern_id,
            "schedule_type": "Regular",
        },
    )
    assert rule.status_code == 200
    assert rule.json()["schedule_type"] == "regular"
    rule_id = rule.json()["id"]

    updated = client.patch(f"/api/staffing-minimums/{rule_id}", json={"min_count": 1})
    assert updated.json()["min_count"] == 1

    generated = client.post("/api/schedules/generate", json={"month": "2024-03", "department_id": department_id})
    assert generated.json()["slots_created"] == 5

    listed = client.get("/api/staffing-minimums", params={"department_id": department_id})
    assert [item["id"] for item in listed.json()] == [rule_id]

    assert client.delete(f"/api/staffing-minimums/{rule_id}").json() == {"success": True}
    assert client.get("/api/staffing-minimums", params={"department_id": department_id}).json() == []


def test_pattern_validation(client, acme):
    bad_time = client.post("/api/shift-patterns", json={"name": "Bad", "start_local": "6am", "end_local": "14:00"})
    assert bad_time.status_code == 422

    bad_zone = client.post("/api/shift-patterns", json={"name": "Bad", "timezone": "Mars/Olympus"})
    assert bad_zone.status_code == 422

    bad_department = client.post("/api/shift-patterns", json={"name": "Bad", "department_id": 9999})
    assert bad_department.status_code == 400


def test_rule_validation(client, acme):
    base = {"department_id": acme["department"].id, "role": "RN", "dow": 3, "min_count": 1}

    assert client.post("/api/staffing-minimums", json={**base, "dow": 7}).status_code == 422
    assert client.post("/api/staffing-minimums", json={**base, "min_count": -1}).status_code == 422
    assert client.post("/api/staffing-minimums", json={**base, "shift_pattern_id": 9999}).status_code == 400


def test_pattern_update_and_scoping(client, client_factory, acme):
    pattern_id = acme["pattern"].id

    updated = client.patch(f"/api/shift-patterns/{pattern_id}", json={"start_local": "07:00:00"})
    assert updated.status_code == 200
    assert updated.json()["start_local"] == "07:00:00"
    assert updated.json()["name"] == "P1"

    outsider = client_factory(RequestContext(user_id="o-1", org_code="OTHER", role="admin"))
    assert outsider.patch(f"/api/shift-patterns/{pattern_id}", json={"name": "x"}).status_code == 404
    assert outsider.get("/api/shift-patterns").json() == []


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}
