from shiftcensus.context import RequestContext
from shiftcensus.models import Shift


def _generate(client, department_id, month="2024-02", **extra):
    return client.post("/api/schedules/generate", json={"month": month, "department_id": department_id, **extra})


def test_generate_publish_and_read_batch(client, session, acme):
    response = _generate(client, acme["department"].id)
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["slots_created"] == 4
    assert body["batch"]["status"] == "draft"
    assert isinstance(body["run_id"], int)
    batch_id = body["batch"]["id"]

    published = client.post(f"/api/schedules/publish/{batch_id}")
    assert published.status_code == 200
    assert published.json()["shifts_upserted"] == 4
    assert published.json()["batch"]["status"] == "published"

    again = client.post(f"/api/schedules/publish/{batch_id}")
    assert again.json()["shifts_upserted"] == 4
    assert session.query(Shift).count() == 4

    detail = client.get(f"/api/schedules/batch/{batch_id}")
    assert detail.status_code == 200
    slots = detail.json()["slots"]
    assert [slot["slot_date"] for slot in slots] == ["2024-02-07", "2024-02-14", "2024-02-21", "2024-02-28"]
    assert slots[0]["start_time"] == "2024-02-07T14:00:00Z"
    assert slots[0]["end_time"] == "2024-02-08T02:00:00Z"
    assert slots[0]["position_no"] == 1
    assert slots[0]["staffing_minimum_id"] == acme["rule"].id


def test_generate_without_rules_reports_note(client, acme):
    response = _generate(client, acme["department"].id, schedule_type="oncall")

    assert response.status_code == 200
    assert response.json()["slots_created"] == 0
    assert "No staffing_minimums" in response.json()["note"]


def test_generate_rejects_bad_input(client, acme):
    missing = client.post("/api/schedules/generate", json={"department_id": acme["department"].id})
    assert missing.status_code == 400
    assert missing.json() == {"error": "Missing month or department_id"}

    assert client.post("/api/schedules/generate").status_code == 400
    assert _generate(client, acme["department"].id, month="2024-13").status_code == 400
    assert _generate(client, "D1").status_code == 400
    assert _generate(client, 9999).status_code == 400


def test_publish_missing_batch_is_404(client, acme):
    response = client.post("/api/schedules/publish/9999")

    assert response.status_code == 404
    assert response.json() == {"error": "Batch not found"}
    assert client.get("/api/schedules/batch/9999").status_code == 404


def test_busy_batch_returns_conflict(client, store, acme):
    batch_id = _generate(client, acme["department"].id).json()["batch"]["id"]
    store.claim_batch(batch_id, 300)

    assert client.post(f"/api/schedules/publish/{batch_id}").status_code == 409


def test_list_batches_filters_by_month(client, acme):
    _generate(client, acme["department"].id, month="2024-02")
    _generate(client, acme["department"].id, month="2024-03")

    response = client.get("/api/schedules/batches", params={"month": "2024-03"})

    assert response.status_code == 200
    assert [batch["month_key"] for batch in response.json()] == ["2024-03"]


def test_members_cannot_generate(client_factory, acme):
    client = client_factory(RequestContext(user_id="m-1", org_code="ACME", role="cna"))

    assert _generate(client, acme["department"].id).status_code == 403


def test_missing_org_context(client_factory, acme):
    client = client_factory(RequestContext(user_id="a-1", org_code=None, role="admin"))

    assert client.get("/api/schedules/batches").status_code == 400


def test_unauthenticated_requests_are_rejected(client_factory, acme):
    client = client_factory(None)

    assert _generate(client, acme["department"].id).status_code == 401


def test_other_org_cannot_read_batch(client_factory, acme, admin_ctx):
    owner = client_factory(admin_ctx)
    batch_id = _generate(owner, acme["department"].id).json()["batch"]["id"]

    outsider = client_factory(RequestContext(user_id="o-1", org_code="OTHER", role="admin"))

    assert outsider.get(f"/api/schedules/batch/{batch_id}").status_code == 404
