"""
Artisan writes against a real PostgreSQL.

Runs only when TEST_DATABASE_URL points at a disposable database: the
migration's down section is applied first, so every table is recreated.
"""

import os
from pathlib import Path

import asyncpg
import pytest
import pytest_asyncio
from fastapi import HTTPException

from artisans import schemas, service
from core.db import Database

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "")
MIGRATION = Path(__file__).resolve().parents[2] / "db" / "migrations" / "20250101000000_init.sql"

pytestmark = pytest.mark.skipif(not TEST_DATABASE_URL, reason="TEST_DATABASE_URL is not set")


def _migration_sections() -> tuple[str, str]:
    text = MIGRATION.read_text(encoding="utf-8")
    up, down = text.split("-- migrate:down", 1)
    return up.replace("-- migrate:up", "", 1), down


@pytest_asyncio.fixture
async def database():
    up, down = _migration_sections()
    pool = await asyncpg.create_pool(dsn=TEST_DATABASE_URL, min_size=1, max_size=2)
    async with pool.acquire() as conn:
        await conn.execute(down)
        await conn.execute(up)
    try:
        yield Database(pool)
    finally:
        await pool.close()


@pytest.fixture
def artisan(artisan_data):
    # The reference tables start empty.
    return {**artisan_data, "tehsil_id": None, "employment_type_id": None}


async def drain(events):
    return [event async for event in events]


async def _create(database, artisan, **sections) -> int:
    payload = schemas.ArtisanCreate.model_validate({"artisan": artisan, **sections})
    events = await drain(service.create_artisan(database, payload))
    return events[-1]["id"]


@pytest.mark.asyncio
async def test_create_then_get(database, artisan):
    artisan_id = await _create(
        database,
        artisan,
        trainings=[{"title": "Glazing"}, {"title": "Kiln firing"}],
        loans=[{"amount": 5000, "date": "2023-06-01", "loan_type": "micro"}],
    )

    stored = await service.get_artisan(database, artisan_id)

    assert [t["title"] for t in stored["trainings"]] == ["Glazing", "Kiln firing"]
    assert len(stored["loans"]) == 1
    assert "machines" not in stored
    assert stored["has_machinery"] == "Yes"


@pytest.mark.asyncio
async def test_update_replaces_children(database, artisan):
    artisan_id = await _create(database, artisan, trainings=[{"title": "A"}, {"title": "B"}])

    update = schemas.ArtisanUpdate.model_validate({"trainings": [{"title": "C"}]})
    events = await drain(service.update_artisan(database, artisan_id, update))

    assert events[-1]["status"] == "complete"
    stored = await service.get_artisan(database, artisan_id)
    assert [t["title"] for t in stored["trainings"]] == ["C"]


@pytest.mark.asyncio
async def test_update_of_deleted_artisan_changes_nothing(database, artisan):
    artisan_id = await _create(database, artisan, trainings=[{"title": "A"}])
    await service.soft_delete_artisan(database, artisan_id)

    update = schemas.ArtisanUpdate.model_validate({"trainings": [{"title": "C"}]})
    with pytest.raises(HTTPException) as exc_info:
        await drain(service.update_artisan(database, artisan_id, update))

    assert exc_info.value.status_code == 404
    stored = await service.get_artisan(database, artisan_id, include_inactive=True)
    assert [t["title"] for t in stored["trainings"]] == ["A"]


@pytest.mark.asyncio
async def test_soft_delete_hides_artisan(database, artisan):
    artisan_id = await _create(database, artisan)

    await service.soft_delete_artisan(database, artisan_id)

    with pytest.raises(HTTPException):
        await service.get_artisan(database, artisan_id)
    stored = await service.get_artisan(database, artisan_id, include_inactive=True)
    assert stored["is_active"] is False
    assert await service.list_artisans(database, {}) == []
