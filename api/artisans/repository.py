"""
Artisan persistence (raw SQL).

Every function takes the `Database` to run on, so the same helpers work on
the pool and inside a transaction.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from core.db import Database
from core.filters import apply_filters

from . import schemas
from .filters import ARTISAN_FILTERS

ARTISAN_COLUMNS = (
    "name",
    "father_name",
    "cnic",
    "gender",
    "date_of_birth",
    "contact_no",
    "email",
    "address",
    "tehsil_id",
    "education_level_id",
    "dependents_count",
    "profile_picture",
    "ntn",
    "skill_id",
    "major_product",
    "experience",
    "avg_monthly_income",
    "employment_type_id",
    "raw_material",
    "crafting_method",
    "loan_status",
    "has_machinery",
    "has_training",
    "inherited_skills",
    "financial_assistance",
    "technical_assistance",
    "comments",
    "latitude",
    "longitude",
    "user_id",
)

# Child table -> (alias, prefix, columns) for the single-row-per-child join.
CHILD_TABLES: dict[str, tuple[str, str, tuple[str, ...]]] = {
    "trainings": ("t", "training", ("id", "title", "duration", "organization")),
    "loans": ("l", "loan", ("id", "amount", "date", "loan_type", "name")),
    "machines": ("m", "machine", ("id", "title", "size", "number_of_machines")),
    "product_images": ("pi", "product_image", ("id", "image_path")),
    "shop_images": ("si", "shop_image", ("id", "image_path")),
}


def _artisan_values(artisan: schemas.ArtisanIn, *, profile_picture: str | None) -> list[Any]:
    values = artisan.model_dump()
    values["profile_picture"] = profile_picture
    return [values[column] for column in ARTISAN_COLUMNS]


async def insert_artisan(db: Database, artisan: schemas.ArtisanIn, *, profile_picture: str | None) -> int:
    columns = ", ".join(ARTISAN_COLUMNS)
    placeholders = ", ".join(f"${i}" for i in range(1, len(ARTISAN_COLUMNS) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO artisans ({columns})
        VALUES ({placeholders})
        RETURNING id
        """,
        *_artisan_values(artisan, profile_picture=profile_picture),
    )
    if row is None:
        raise RuntimeError("Failed to create artisan.")
    return int(row["id"])


async def set_profile_picture(db: Database, artisan_id: int, path: str) -> int:
    return await db.execute(
        """
        UPDATE artisans
        SET profile_picture = $1
        WHERE id = $2
        """,
        path,
        artisan_id,
    )


async def update_artisan(db: Database, artisan_id: int, artisan: schemas.ArtisanIn) -> int:
    """
    Overwrite every artisan column; the profile picture is kept when not given.
    """
    assignments = []
    for i, column in enumerate(ARTISAN_COLUMNS, start=1):
        if column == "profile_picture":
            assignments.append(f"profile_picture = COALESCE(${i}, profile_picture)")
        else:
            assignments.append(f"{column} = ${i}")
    id_param = len(ARTISAN_COLUMNS) + 1

    return await db.execute(
        f"""
        UPDATE artisans
        SET {", ".join(assignments)},
            updated_at = now()
        WHERE id = ${id_param}
          AND is_active = true
        """,
        *_artisan_values(artisan, profile_picture=artisan.profile_picture),
        artisan_id,
    )


async def touch_artisan(db: Database, artisan_id: int) -> int:
    return await db.execute(
        """
        UPDATE artisans
        SET updated_at = now()
        WHERE id = $1
          AND is_active = true
        """,
        artisan_id,
    )


async def soft_delete_artisan(db: Database, artisan_id: int) -> int:
    return await db.execute(
        """
        UPDATE artisans
        SET is_active = false,
            updated_at = now()
        WHERE id = $1
          AND is_active = true
        """,
        artisan_id,
    )


async def insert_trainings(db: Database, artisan_id: int, trainings: list[schemas.TrainingIn]) -> int:
    for training in trainings:
        await db.execute(
            """
            INSERT INTO trainings (artisan_id, title, duration, organization)
            VALUES ($1, $2, $3, $4)
            """,
            artisan_id,
            training.title,
            training.duration,
            training.organization,
        )
    return len(trainings)


async def insert_loans(db: Database, artisan_id: int, loans: list[schemas.LoanIn]) -> int:
    for loan in loans:
        await db.execute(
            """
            INSERT INTO loans (artisan_id, amount, date, loan_type, name)
            VALUES ($1, $2, $3, $4, $5)
            """,
            artisan_id,
            loan.amount,
            loan.date,
            loan.loan_type,
            loan.name,
        )
    return len(loans)


async def insert_machines(db: Database, artisan_id: int, machines: list[schemas.MachineIn]) -> int:
    for machine in machines:
        await db.execute(
            """
            INSERT INTO machines (artisan_id, title, size, number_of_machines)
            VALUES ($1, $2, $3, $4)
            """,
            artisan_id,
            machine.title,
            machine.size,
            machine.number_of_machines,
        )
    return len(machines)


async def _insert_image_paths(db: Database, table: str, artisan_id: int, paths: list[str]) -> int:
    for path in paths:
        await db.execute(
            f"""
            INSERT INTO {table} (artisan_id, image_path)
            VALUES ($1, $2)
            """,
            artisan_id,
            path,
        )
    return len(paths)


async def insert_product_images(db: Database, artisan_id: int, paths: list[str]) -> int:
    return await _insert_image_paths(db, "product_images", artisan_id, paths)


async def insert_shop_images(db: Database, artisan_id: int, paths: list[str]) -> int:
    return await _insert_image_paths(db, "shop_images", artisan_id, paths)


async def delete_trainings(db: Database, artisan_id: int) -> int:
    return await db.execute("DELETE FROM trainings WHERE artisan_id = $1", artisan_id)


async def delete_loans(db: Database, artisan_id: int) -> int:
    return await db.execute("DELETE FROM loans WHERE artisan_id = $1", artisan_id)


async def delete_machines(db: Database, artisan_id: int) -> int:
    return await db.execute("DELETE FROM machines WHERE artisan_id = $1", artisan_id)


async def list_artisans(db: Database, filters: Mapping[str, Any]) -> list[dict]:
    query, params = apply_filters(
        "SELECT a.* FROM artisans_view a WHERE a.is_active = true",
        [],
        filters,
        ARTISAN_FILTERS,
    )
    return await db.fetch_all(f"{query} ORDER BY a.id", *params)


def _child_select_list() -> str:
    parts = []
    for alias, prefix, columns in CHILD_TABLES.values():
        parts.extend(f"{alias}.{column} AS {prefix}__{column}" for column in columns)
    return ",\n               ".join(parts)


async def get_artisan_rows(db: Database, artisan_id: int, *, include_inactive: bool = False) -> list[dict]:
    """
    One row per combination of child records; the service collapses them.
    """
    joins = "\n".join(
        f"LEFT JOIN {table} {alias} ON {alias}.artisan_id = a.id"
        for table, (alias, _prefix, _columns) in CHILD_TABLES.items()
    )
    order = ", ".join(f"{alias}.id" for alias, _prefix, _columns in CHILD_TABLES.values())
    return await db.fetch_all(
        f"""
        SELECT a.*,
               {_child_select_list()}
        FROM artisans_view a
        {joins}
        WHERE a.id = $1
          AND ($2::boolean OR a.is_active = true)
        ORDER BY {order}
        """,
        artisan_id,
        include_inactive,
    )
