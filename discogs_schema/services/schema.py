import logging
from typing import Any, Dict, List

from sqlalchemy import Table, inspect, text
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from discogs_schema.core.exceptions import SchemaError, SchemaMismatchError
from discogs_schema.models.tables import METADATA_BY_VARIANT, SchemaVariant
from discogs_schema.services.sql_script import (
    INDEXES,
    TABLES,
    TEARDOWN,
    load_statements,
    script_path,
)

logger = logging.getLogger(__name__)

_dialect = postgresql.dialect()


async def execute_file(conn: AsyncConnection, path: str) -> int:
    """Run every statement of a script, in order, on an open connection."""
    statements = load_statements(path)
    for statement in statements:
        logger.debug(f"Executing: {statement.splitlines()[0]}")
        await conn.execute(text(statement))
    logger.info(f"Executed {len(statements)} statements from {path}")
    return len(statements)


async def init(
    engine: AsyncEngine,
    variant: SchemaVariant = SchemaVariant.CURRENT,
    create_indexes: bool = False,
) -> None:
    """
    Drop and recreate the tables of a variant.

    Everything runs in one transaction, so a failing statement leaves the
    previous tables in place.
    """
    variant = SchemaVariant(variant)
    if create_indexes and variant != SchemaVariant.CURRENT:
        raise SchemaError(f"No indexes are defined for the {variant.value} schema")

    logger.info(f"Creating the tables ({variant.value} schema).")
    async with engine.begin() as conn:
        # The legacy script only drops its own three tables
        if variant == SchemaVariant.LEGACY:
            await execute_file(conn, script_path(TEARDOWN, variant))
        await execute_file(conn, script_path(TABLES, variant))
        if create_indexes:
            logger.info("Creating the indexes.")
            await execute_file(conn, script_path(INDEXES, variant))


async def create_indexes(engine: AsyncEngine) -> None:
    logger.info("Creating the indexes.")
    async with engine.begin() as conn:
        await execute_file(conn, script_path(INDEXES, SchemaVariant.CURRENT))


async def drop_tables(engine: AsyncEngine) -> None:
    """Drop all five tables; absent tables are ignored."""
    logger.info("Dropping the tables.")
    async with engine.begin() as conn:
        await execute_file(conn, script_path(TEARDOWN, SchemaVariant.CURRENT))


def _type_name(type_: Any) -> str:
    return type_.compile(dialect=_dialect)


def _is_serial(reflected: Dict[str, Any]) -> bool:
    default = reflected.get("default") or ""
    return default.startswith("nextval(")


def diff_table(table: Table, reflected: List[Dict[str, Any]]) -> List[str]:
    """Compare declared columns with the columns reflected from the database."""
    differences = []
    live = {column["name"]: column for column in reflected}
    expected_names = [column.name for column in table.columns]

    for column in table.columns:
        found = live.get(column.name)
        if found is None:
            differences.append(f"{table.name}.{column.name}: missing column")
            continue

        expected_type = _type_name(column.type)
        actual_type = _type_name(found["type"])
        if expected_type != actual_type:
            differences.append(
                f"{table.name}.{column.name}: type {actual_type}, expected {expected_type}"
            )

        if bool(found["nullable"]) != bool(column.nullable):
            expected = "NULL" if column.nullable else "NOT NULL"
            differences.append(f"{table.name}.{column.name}: expected {expected}")

        # autoincrement is the string "auto" unless set explicitly
        expects_serial = column.autoincrement is True
        if expects_serial != _is_serial(found):
            expected = "a serial default" if expects_serial else "no serial default"
            differences.append(f"{table.name}.{column.name}: expected {expected}")

    for name in live:
        if name not in expected_names:
            differences.append(f"{table.name}.{name}: unexpected column")

    live_order = [column["name"] for column in reflected if column["name"] in expected_names]
    declared_order = [name for name in expected_names if name in live]
    if live_order != declared_order:
        differences.append(
            f"{table.name}: column order {live_order}, expected {declared_order}"
        )

    return differences


def _collect_differences(sync_conn, variant: SchemaVariant) -> List[str]:
    inspector = inspect(sync_conn)
    existing = set(inspector.get_table_names())
    differences = []
    for table in METADATA_BY_VARIANT[variant].tables.values():
        if table.name not in existing:
            differences.append(f"{table.name}: missing table")
            continue
        differences.extend(diff_table(table, inspector.get_columns(table.name)))
    return differences


async def verify_schema(
    engine: AsyncEngine,
    variant: SchemaVariant = SchemaVariant.CURRENT,
) -> List[str]:
    """Return every difference between the live tables and the declared ones."""
    variant = SchemaVariant(variant)
    async with engine.connect() as conn:
        differences = await conn.run_sync(_collect_differences, variant)
    for difference in differences:
        logger.warning(f"Schema difference: {difference}")
    return differences


async def assert_schema(
    engine: AsyncEngine,
    variant: SchemaVariant = SchemaVariant.CURRENT,
) -> None:
    differences = await verify_schema(engine, variant)
    if differences:
        raise SchemaMismatchError(differences)


async def reset_schema(
    engine: AsyncEngine,
    variant: SchemaVariant = SchemaVariant.CURRENT,
    create_indexes: bool = False,
) -> None:
    await init(engine, variant, create_indexes=create_indexes)
    await assert_schema(engine, variant)
    logger.info("All tables created successfully!")
