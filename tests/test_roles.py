"""
Role Authority: capabilities leídas de la tabla, nunca del token.
"""
from carehub.models.user import CapabilityEnum
from carehub.services.roles import (
    has_capability, grant_capability, revoke_capability, list_capabilities,
)


async def test_doctor_has_doctor_capability(db, seed):
    assert await has_capability(db, seed.users["doctor"].id, CapabilityEnum.doctor)
    assert await has_capability(db, seed.users["doctor"].id, "doctor")


async def test_patient_lacks_doctor_capability(db, seed):
    assert not await has_capability(db, seed.users["patient"].id, CapabilityEnum.doctor)


async def test_doctor_profile_alone_is_not_a_capability(db, seed):
    assert not await has_capability(db, seed.users["impostor"].id, CapabilityEnum.doctor)


async def test_unknown_identity_is_simply_not_authorized(db):
    assert await has_capability(db, "no-such-user", CapabilityEnum.doctor) is False
    assert await has_capability(db, None, CapabilityEnum.doctor) is False


async def test_unknown_capability_name_is_false(db, seed):
    assert await has_capability(db, seed.users["doctor"].id, "surgeon-general") is False


async def test_inactive_user_loses_capabilities(db, seed):
    assert not await has_capability(db, seed.users["inactive_doctor"].id, CapabilityEnum.doctor)


async def test_grant_is_idempotent_and_revoke_takes_effect_immediately(db, seed):
    uid = seed.users["patient2"].id

    assert await grant_capability(db, uid, CapabilityEnum.doctor) is True
    assert await grant_capability(db, uid, CapabilityEnum.doctor) is False
    assert await has_capability(db, uid, CapabilityEnum.doctor)
    assert set(await list_capabilities(db, uid)) == {CapabilityEnum.patient, CapabilityEnum.doctor}

    assert await revoke_capability(db, uid, CapabilityEnum.doctor) is True
    assert not await has_capability(db, uid, CapabilityEnum.doctor)
    assert await revoke_capability(db, uid, CapabilityEnum.doctor) is False


async def test_concurrent_grant_of_same_capability_is_not_an_error(db, seed, monkeypatch):
    # simula otro request que insertó la fila entre el select y el insert:
    # el chequeo previo no la ve, pero la tabla ya la tiene (uq_user_capability)
    class _Empty:
        def first(self):
            return None

    real_execute = db.execute
    calls = []

    async def execute(stmt, *args, **kwargs):
        if not calls:
            calls.append(stmt)
            return _Empty()
        return await real_execute(stmt, *args, **kwargs)

    monkeypatch.setattr(db, "execute", execute)
    uid = seed.users["doctor"].id

    assert await grant_capability(db, uid, CapabilityEnum.doctor) is False
    assert await has_capability(db, uid, CapabilityEnum.doctor)
    assert await list_capabilities(db, uid) == [CapabilityEnum.doctor]
