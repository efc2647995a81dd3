"""
Verificación pública: proyección redactada, 404 uniforme, sin efectos.
"""
import pytest

from carehub.core.errors import NotFound
from carehub.schemas.prescription import PrescriptionCreate
from carehub.services import issuance, prescription_store
from carehub.services.verification import verify, NOT_FOUND_DETAIL


async def _issue(db, seed, **overrides):
    body = {
        "patient_id": "p1",
        "diagnosis": "Acute bronchitis",
        "medicines": [{"name": "Amoxicillin", "dosage": "500mg twice daily for 7 days"}],
    }
    body.update(overrides)
    return await issuance.issue(db, seed.users["doctor"], PrescriptionCreate(**body))


async def test_verify_returns_redacted_projection(db, seed):
    rx = await _issue(db, seed, advice="Rest")
    view = await verify(db, rx.id)

    assert view.verified is True
    assert view.display_id == rx.id[:16] + "..."
    assert view.diagnosis == "Acute bronchitis"
    assert [m.model_dump() for m in view.medicines] == [
        {"name": "Amoxicillin", "dosage": "500mg twice daily for 7 days"}
    ]
    assert view.advice == "Rest"
    assert view.patient_name == "Jane Roe"
    assert view.doctor.name == "Dr. Gregory House"
    assert view.doctor.specialization == "Internal Medicine"
    assert view.doctor.license_number == "LIC-12345"


@pytest.mark.parametrize("bad_id", [None, "", "not-a-real-id", "x" * 500, "a" * 32])
async def test_verify_misses_all_look_the_same(db, seed, bad_id):
    with pytest.raises(NotFound) as exc:
        await verify(db, bad_id)
    assert exc.value.status_code == 404
    assert exc.value.detail == NOT_FOUND_DETAIL


async def test_verify_is_idempotent_and_read_only(db, seed):
    rx = await _issue(db, seed)
    first = await verify(db, rx.id)
    second = await verify(db, rx.id)
    assert first == second
    assert not db.dirty and not db.new and not db.deleted

    db.expunge_all()
    stored = await prescription_store.get_by_id(db, rx.id)
    assert stored.diagnosis == "Acute bronchitis"
    assert len(stored.items) == 1


# ---------- HTTP ----------

async def test_verify_endpoint_is_anonymous_and_hides_contact_fields(client, seed, auth, rx_body):
    r = await client.post("/prescriptions", json=rx_body(), headers=auth(seed.users["doctor"]))
    assert r.status_code == 201, r.text
    rx_id = r.json()["id"]

    r = await client.get("/verify", params={"id": rx_id})
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["diagnosis"] == "Acute bronchitis"
    assert body["medicines"] == [{"name": "Amoxicillin", "dosage": "500mg twice daily for 7 days"}]
    assert body["doctor"]["name"] == "Dr. Gregory House"
    assert body["doctor"]["specialization"] == "Internal Medicine"

    for leaked in ("id", "patient_id", "doctor_id", "email", "phone", "birth_date", "doc_id"):
        assert leaked not in body
    raw = r.text
    assert "jane@example.com" not in raw
    assert "1990-05-17" not in raw
    assert "555-0199" not in raw
    assert "30111222" not in raw
    assert rx_id not in raw


async def test_verify_endpoint_unknown_and_malformed_are_indistinguishable(client, seed):
    unknown = await client.get("/verify", params={"id": prescription_store.new_prescription_id()})
    malformed = await client.get("/verify", params={"id": "'; DROP TABLE prescriptions; --"})
    missing = await client.get("/verify")
    too_long = await client.get("/verify", params={"id": "z" * 4000})

    for r in (unknown, malformed, missing, too_long):
        assert r.status_code == 404
        assert r.json() == {"detail": NOT_FOUND_DETAIL}
