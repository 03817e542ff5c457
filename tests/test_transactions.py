"""Unit of work: compensation without transactions."""
import pytest

from pinboard.core.exceptions import AlreadyExistsException
from pinboard.db.transactions import UnitOfWork, unit_of_work


class Boom(Exception):
    pass


async def test_compensations_run_in_reverse_on_failure(db):
    calls = []

    async def record(label):
        calls.append(label)

    with pytest.raises(Boom):
        async with unit_of_work(db, use_transactions=False) as uow:
            uow.on_rollback(record, "first")
            uow.on_rollback(record, "second")
            raise Boom()

    assert calls == ["second", "first"]


async def test_no_compensation_on_success(db):
    calls = []

    async def record(label):
        calls.append(label)

    async with unit_of_work(db, use_transactions=False) as uow:
        uow.on_rollback(record, "never")

    assert calls == []


async def test_failed_step_is_undone(db):
    await db.users.insert_one({"username": "a", "following": []})

    with pytest.raises(Boom):
        async with unit_of_work(db, use_transactions=False) as uow:
            await db.users.update_one({"username": "a"}, {"$addToSet": {"following": "b"}}, **uow.options)
            uow.on_rollback(db.users.update_one, {"username": "a"}, {"$pull": {"following": "b"}})
            raise Boom()

    assert (await db.users.find_one({"username": "a"}))["following"] == []


async def test_failing_compensation_does_not_hide_original_error(db):
    calls = []

    async def broken():
        raise RuntimeError("compensation failed")

    async def record():
        calls.append("ran")

    with pytest.raises(Boom):
        async with unit_of_work(db, use_transactions=False) as uow:
            uow.on_rollback(record)
            uow.on_rollback(broken)
            raise Boom()

    assert calls == ["ran"]


async def test_api_error_compensates_without_warning(db, caplog):
    calls = []

    async def record():
        calls.append("ran")

    with pytest.raises(AlreadyExistsException):
        async with unit_of_work(db, use_transactions=False) as uow:
            uow.on_rollback(record)
            raise AlreadyExistsException()

    assert calls == ["ran"]
    assert "running compensations" not in caplog.text


async def test_unexpected_error_is_logged(db, caplog):
    with pytest.raises(Boom):
        async with unit_of_work(db, use_transactions=False):
            raise Boom()

    assert "running compensations" in caplog.text


def test_session_bound_unit_skips_compensation(db):
    uow = UnitOfWork(db, session=object())

    uow.on_rollback(lambda: None)

    assert uow.transactional is True
    assert uow._compensations == []
    assert "session" in uow.options
    assert UnitOfWork(db).options == {}
