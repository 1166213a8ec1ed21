import asyncio
import base64
from datetime import datetime, timezone

import pytest

from app.database.memory_repository import InMemoryFormRepository
from app.database.repository import decode_cursor, encode_cursor
from app.models.form import FormCreate
from app.utils.errors import ConflictError, NotFoundError, ValidationError


def test_cursor_round_trip():
    created_at = datetime(2025, 3, 1, 12, 30, 15, 123000, tzinfo=timezone.utc)
    assert decode_cursor(encode_cursor(created_at, "abc")) == (created_at, "abc")


@pytest.mark.parametrize("cursor", [
    "%%%",
    base64.urlsafe_b64encode(b"[1, 2]").decode(),
    base64.urlsafe_b64encode(b'{"t": "yesterday", "id": "x"}').decode(),
    base64.urlsafe_b64encode(b'{"t": "2025-01-01T00:00:00+00:00", "id": 5}').decode(),
])
def test_garbage_cursor_is_a_validation_error(cursor):
    with pytest.raises(ValidationError):
        decode_cursor(cursor)


def test_memory_update_is_conditional_on_version():
    async def scenario():
        repo = InMemoryFormRepository()
        form = await repo.create("owner", FormCreate.model_validate({"schema": [{"name": "a"}]}))

        updated = await repo.update(form.id, {"name": "one"}, expected_version=1)
        assert updated.version == 2

        with pytest.raises(ConflictError):
            await repo.update(form.id, {"name": "two"}, expected_version=1)
        with pytest.raises(NotFoundError):
            await repo.update("missing", {"name": "x"}, expected_version=1)

        assert (await repo.get_by_id(form.id)).name == "one"

    asyncio.run(scenario())


def test_memory_repository_returns_copies():
    async def scenario():
        repo = InMemoryFormRepository()
        form = await repo.create("owner", FormCreate.model_validate({"schema": [{"name": "a"}]}))
        fetched = await repo.get_by_id(form.id)
        fetched.schema_fields[0].name = "mutated"
        assert (await repo.get_by_id(form.id)).schema_fields[0].name == "a"

    asyncio.run(scenario())


def test_memory_list_is_scoped_to_owner():
    async def scenario():
        repo = InMemoryFormRepository()
        payload = FormCreate.model_validate({"schema": [{"name": "a"}]})
        mine = await repo.create("me", payload)
        await repo.create("you", payload)
        page = await repo.list("me", limit=10)
        assert [f.id for f in page.items] == [mine.id]
        assert page.next_cursor is None

    asyncio.run(scenario())
