"""
Reference table persistence (raw SQL).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.db import Database


@dataclass(frozen=True)
class Table:
    name: str
    columns: tuple[str, ...]
    soft_delete: bool = True


CRAFTS = Table("crafts", ("name", "is_active"))
CATEGORIES = Table("categories", ("name", "craft_id", "is_active"))
TECHNIQUES = Table("techniques", ("name", "category_id", "color", "is_active"))
EDUCATION_LEVELS = Table("education_levels", ("name", "is_active"))
EMPLOYMENT_TYPES = Table("employment_types", ("name", "is_active"))
GEO_LEVELS = Table("geo_level", ("code", "name"), soft_delete=False)


async def insert(db: Database, table: Table, values: dict[str, Any]) -> int:
    columns = ", ".join(table.columns)
    placeholders = ", ".join(f"${i}" for i in range(1, len(table.columns) + 1))
    row = await db.fetch_one(
        f"INSERT INTO {table.name} ({columns}) VALUES ({placeholders}) RETURNING id",
        *[values.get(column) for column in table.columns],
    )
    if row is None:
        raise RuntimeError(f"Failed to insert into {table.name}.")
    return int(row["id"])


async def update(db: Database, table: Table, row_id: int, values: dict[str, Any]) -> int:
    assignments = ", ".join(f"{column} = ${i}" for i, column in enumerate(table.columns, start=1))
    return await db.execute(
        f"UPDATE {table.name} SET {assignments} WHERE id = ${len(table.columns) + 1}",
        *[values.get(column) for column in table.columns],
        row_id,
    )


async def delete(db: Database, table: Table, row_id: int) -> int:
    if table.soft_delete:
        return await db.execute(
            f"UPDATE {table.name} SET is_active = false WHERE id = $1 AND is_active = true",
            row_id,
        )
    return await db.execute(f"DELETE FROM {table.name} WHERE id = $1", row_id)


async def list_crafts(db: Database) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT c.id, c.name, c.is_active,
               COUNT(DISTINCT cat.id) AS category_count,
               COUNT(DISTINCT t.id) AS technique_count,
               COUNT(DISTINCT a.id) AS artisan_count
        FROM crafts c
        LEFT JOIN categories cat ON cat.craft_id = c.id AND cat.is_active = true
        LEFT JOIN techniques t ON t.category_id = cat.id AND t.is_active = true
        LEFT JOIN artisans a ON a.skill_id = t.id AND a.is_active = true
        WHERE c.is_active = true
        GROUP BY c.id, c.name, c.is_active
        ORDER BY c.name
        """
    )


async def list_categories(db: Database) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, name, craft_id, craft_name, is_active
        FROM categories_view
        WHERE is_active = true
        ORDER BY name
        """
    )


async def list_techniques(db: Database) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT t.id, t.name, t.color, t.category_id, t.category_name,
               t.craft_id, t.craft_name, t.is_active,
               COUNT(a.id) AS artisan_count
        FROM techniques_view t
        LEFT JOIN artisans a ON a.skill_id = t.id AND a.is_active = true
        WHERE t.is_active = true
        GROUP BY t.id, t.name, t.color, t.category_id, t.category_name,
                 t.craft_id, t.craft_name, t.is_active
        ORDER BY t.name
        """
    )


async def list_education_levels(db: Database) -> list[dict]:
    return await db.fetch_all(
        "SELECT id, name, is_active FROM education_levels WHERE is_active = true ORDER BY id"
    )


async def list_employment_types(db: Database) -> list[dict]:
    return await db.fetch_all(
        "SELECT id, name, is_active FROM employment_types WHERE is_active = true ORDER BY id"
    )


async def list_geo_levels(db: Database, *, code_length: int | None = None) -> list[dict]:
    if code_length is not None:
        return await db.fetch_all(
            "SELECT id, code, name FROM geo_level WHERE length(code) = $1 ORDER BY name",
            code_length,
        )
    return await db.fetch_all("SELECT id, code, name FROM geo_level ORDER BY name")
