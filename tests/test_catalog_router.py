"""HTTP tests for the reference table endpoints."""

import pytest

from catalog import router as catalog_router


@pytest.fixture
def client(make_client):
    return make_client(catalog_router.router)


class TestCatalogRoutes:
    def test_create_returns_new_id(self, client, fake_db):
        fake_db.queue("fetch_one", {"id": 11})

        response = client.post("/techniques", json={"name": "Block printing", "category_id": 2, "color": "#aa3300"})

        assert response.status_code == 201
        assert response.json() == {"id": 11}
        [(_method, sql, args)] = fake_db.calls
        assert sql == (
            "INSERT INTO techniques (name, category_id, color, is_active) VALUES ($1, $2, $3, $4) RETURNING id"
        )
        assert args == ("Block printing", 2, "#aa3300", True)

    def test_create_validates_body(self, client, fake_db):
        response = client.post("/categories", json={"name": "Textiles"})

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"
        assert fake_db.calls == []

    def test_update_missing_row(self, client, fake_db):
        fake_db.queue("execute", 0)

        response = client.put("/crafts/4", json={"name": "Woodwork"})

        assert response.status_code == 404
        assert response.json() == {"error": "Craft not found"}

    def test_delete_is_soft_for_crafts(self, client, fake_db):
        response = client.delete("/crafts/4")

        assert response.status_code == 200
        assert fake_db.sql("execute") == ["UPDATE crafts SET is_active = false WHERE id = $1 AND is_active = true"]

    def test_delete_is_hard_for_geo_levels(self, client, fake_db):
        client.delete("/geo-levels/4")

        assert fake_db.sql("execute") == ["DELETE FROM geo_level WHERE id = $1"]

    def test_geo_levels_by_code_length(self, client, fake_db):
        fake_db.queue("fetch_all", [{"id": 1, "code": "01", "name": "Lahore"}])

        response = client.get("/geo-levels", params={"code_length": 2})

        assert response.json() == [{"id": 1, "code": "01", "name": "Lahore"}]
        assert fake_db.calls[0][2] == (2,)

    def test_lists(self, client, fake_db):
        for path in ("/crafts", "/categories", "/techniques", "/education", "/employment-types", "/geo-levels"):
            assert client.get(path).status_code == 200

        assert len(fake_db.calls) == 6
