"""Tests for artisan row folding and the create/update progress streams."""

import pytest
from fastapi import HTTPException

from artisans import schemas, service
from artisans.repository import ARTISAN_COLUMNS
from core.uploads import StagedFile


async def drain(events):
    return [event async for event in events]


class TestCollapseArtisanRows:
    def test_children_are_deduplicated_in_first_seen_order(self):
        base = {"id": 5, "name": "Rashid", "is_active": True}
        rows = [
            {**base, "training__id": 1, "training__title": "Glazing", "loan__id": 7, "loan__amount": 5000,
             "machine__id": None, "machine__title": None},
            {**base, "training__id": 2, "training__title": "Kiln", "loan__id": 7, "loan__amount": 5000,
             "machine__id": None, "machine__title": None},
        ]

        artisan = service.collapse_artisan_rows(rows)

        assert artisan["id"] == 5
        assert artisan["name"] == "Rashid"
        assert [t["title"] for t in artisan["trainings"]] == ["Glazing", "Kiln"]
        assert artisan["loans"] == [{"id": 7, "amount": 5000}]
        assert "machines" not in artisan
        assert "training__id" not in artisan

    def test_no_rows_means_no_artisan(self):
        assert service.collapse_artisan_rows([]) is None


class TestGetArtisan:
    @pytest.mark.asyncio
    async def test_missing_artisan_is_not_found(self, fake_db):
        with pytest.raises(HTTPException) as exc_info:
            await service.get_artisan(fake_db, 99)

        assert exc_info.value.status_code == 404
        [(_method, _sql, args)] = fake_db.calls
        assert args == (99, False)


class TestCreateArtisan:
    @pytest.mark.asyncio
    async def test_progress_then_complete(self, fake_db, artisan_data):
        payload = schemas.ArtisanCreate.model_validate(
            {
                "artisan": artisan_data,
                "trainings": [{"title": "Glazing"}, {"title": "Kiln"}],
                "loans": [{"amount": 5000, "loan_type": "micro"}],
            }
        )
        fake_db.queue("fetch_one", {"id": 42})

        events = await drain(service.create_artisan(fake_db, payload))

        assert [e["message"] for e in events[:-1]] == [
            "Creating artisan...",
            "Creating trainings...",
            "Creating loans...",
            "Creating machines...",
            "Creating product images...",
            "Creating shop images...",
        ]
        assert all(e["status"] == "progress" for e in events[:-1])
        assert events[-1] == {
            "status": "complete",
            "statusCode": 201,
            "id": 42,
            "imagePaths": [],
            "shopImagePaths": [],
            "message": "Artisan and related data created successfully",
        }
        inserts = fake_db.sql("execute")
        assert sum("INSERT INTO trainings" in sql for sql in inserts) == 2
        assert sum("INSERT INTO loans" in sql for sql in inserts) == 1
        assert not any("INSERT INTO machines" in sql for sql in inserts)

    @pytest.mark.asyncio
    async def test_yes_no_values_are_stored_as_text(self, fake_db, artisan_data):
        payload = schemas.ArtisanCreate.model_validate({"artisan": artisan_data})
        fake_db.queue("fetch_one", {"id": 1})

        await drain(service.create_artisan(fake_db, payload))

        (_method, _sql, args) = fake_db.calls[0]
        assert args[ARTISAN_COLUMNS.index("has_machinery")] == "Yes"
        assert args[ARTISAN_COLUMNS.index("loan_status")] == "No"

    @pytest.mark.asyncio
    async def test_staged_images_are_moved_and_recorded(self, fake_db, artisan_data, tmp_path, monkeypatch):
        monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
        staged_path = tmp_path / "staged.png"
        staged_path.write_bytes(b"\x89PNG")
        staged = StagedFile(path=staged_path, original_name="pot.PNG", size_bytes=4)
        payload = schemas.ArtisanCreate.model_validate({"artisan": artisan_data})
        fake_db.queue("fetch_one", {"id": 8})

        events = await drain(service.create_artisan(fake_db, payload, product_images=[staged]))

        [path] = events[-1]["imagePaths"]
        assert path.startswith("uploads/product_images/product_image-")
        assert path.endswith(".png")
        assert (tmp_path / path).exists()
        assert not staged_path.exists()
        assert ("execute", "INSERT INTO product_images (artisan_id, image_path) VALUES ($1, $2)", (8, path)) in fake_db.calls

    @pytest.mark.asyncio
    async def test_profile_picture_is_recorded_after_the_insert(self, fake_db, artisan_data, tmp_path, monkeypatch):
        monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
        staged_path = tmp_path / "me.jpg"
        staged_path.write_bytes(b"\xff\xd8")
        staged = StagedFile(path=staged_path, original_name="me.jpg", size_bytes=2)
        payload = schemas.ArtisanCreate.model_validate({"artisan": artisan_data})
        fake_db.queue("fetch_one", {"id": 8})

        await drain(service.create_artisan(fake_db, payload, profile_picture=staged))

        insert, update = fake_db.calls[:2]
        assert insert[2][ARTISAN_COLUMNS.index("profile_picture")] is None
        assert update[1] == "UPDATE artisans SET profile_picture = $1 WHERE id = $2"
        path, artisan_id = update[2]
        assert artisan_id == 8
        assert path.startswith("uploads/profile_pictures/profile_picture-")
        assert (tmp_path / path).read_bytes() == b"\xff\xd8"
        assert not staged_path.exists()

    @pytest.mark.asyncio
    async def test_failed_insert_leaves_no_profile_picture(self, fake_db, artisan_data, tmp_path, monkeypatch):
        monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
        staged_path = tmp_path / "me.png"
        staged_path.write_bytes(b"\x89PNG")
        staged = StagedFile(path=staged_path, original_name="me.png", size_bytes=4)
        payload = schemas.ArtisanCreate.model_validate({"artisan": artisan_data})
        fake_db.queue("fetch_one", RuntimeError("insert failed"))

        with pytest.raises(RuntimeError):
            await drain(service.create_artisan(fake_db, payload, profile_picture=staged))

        assert not (tmp_path / "uploads" / "profile_pictures").exists()
        assert not staged_path.exists()
        assert fake_db.sql("execute") == []


class TestUpdateArtisan:
    @pytest.mark.asyncio
    async def test_children_are_replaced_inside_one_transaction(self, fake_db):
        payload = schemas.ArtisanUpdate.model_validate({"trainings": [{"title": "Dyeing"}]})

        events = await drain(service.update_artisan(fake_db, 5, payload))

        assert [e["message"] for e in events] == [
            "Updating artisan...",
            "Updating trainings...",
            "Artisan and related data updated successfully",
        ]
        assert events[-1]["statusCode"] == 200
        assert fake_db.events == ["BEGIN", "execute", "execute", "execute", "COMMIT"]
        touch, delete, insert = fake_db.sql("execute")
        assert touch.startswith("UPDATE artisans SET updated_at = now()")
        assert delete == "DELETE FROM trainings WHERE artisan_id = $1"
        assert insert.startswith("INSERT INTO trainings")

    @pytest.mark.asyncio
    async def test_artisan_section_overwrites_the_row(self, fake_db, artisan_data):
        payload = schemas.ArtisanUpdate.model_validate({"artisan": artisan_data})

        await drain(service.update_artisan(fake_db, 5, payload))

        [sql] = fake_db.sql("execute")
        assert "profile_picture = COALESCE(" in sql
        assert "is_active = true" in sql
        assert fake_db.calls[0][2][-1] == 5

    @pytest.mark.asyncio
    async def test_missing_artisan_rolls_back_before_children(self, fake_db):
        payload = schemas.ArtisanUpdate.model_validate({"trainings": [{"title": "Dyeing"}], "loans": []})
        fake_db.queue("execute", 0)

        with pytest.raises(HTTPException) as exc_info:
            await drain(service.update_artisan(fake_db, 5, payload))

        assert exc_info.value.status_code == 404
        assert fake_db.events == ["BEGIN", "execute", "ROLLBACK"]

    @pytest.mark.asyncio
    async def test_failing_child_write_rolls_back(self, fake_db):
        payload = schemas.ArtisanUpdate.model_validate({"machines": [{"title": "Loom"}]})
        fake_db.queue("execute", 1, 1, RuntimeError("insert failed"))

        with pytest.raises(RuntimeError):
            await drain(service.update_artisan(fake_db, 5, payload))

        assert fake_db.events[-1] == "ROLLBACK"
        assert "COMMIT" not in fake_db.events


class TestSoftDelete:
    @pytest.mark.asyncio
    async def test_deleted(self, fake_db):
        assert await service.soft_delete_artisan(fake_db, 3) == {"message": "Artisan deleted successfully", "id": 3}

    @pytest.mark.asyncio
    async def test_already_deleted_is_not_found(self, fake_db):
        fake_db.queue("execute", 0)

        with pytest.raises(HTTPException) as exc_info:
            await service.soft_delete_artisan(fake_db, 3)

        assert exc_info.value.status_code == 404
