import logging
import os
from typing import Dict, List, Tuple

from discogs_schema.core.exceptions import SchemaScriptNotFound
from discogs_schema.models.tables import SchemaVariant

logger = logging.getLogger(__name__)

_sql_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'sql')

TABLES = "tables"
TEARDOWN = "teardown"
INDEXES = "indexes"

# (kind, variant) -> file under the packaged sql/ directory
_SCRIPTS: Dict[Tuple[str, SchemaVariant], str] = {
    (TABLES, SchemaVariant.CURRENT): os.path.join(TABLES, "release.sql"),
    (TABLES, SchemaVariant.LEGACY): os.path.join(TABLES, "legacy_release.sql"),
    (TEARDOWN, SchemaVariant.CURRENT): os.path.join(TEARDOWN, "release.sql"),
    (TEARDOWN, SchemaVariant.LEGACY): os.path.join(TEARDOWN, "release.sql"),
    (INDEXES, SchemaVariant.CURRENT): os.path.join(INDEXES, "release.sql"),
}


def script_path(kind: str, variant: SchemaVariant = SchemaVariant.CURRENT) -> str:
    """Absolute path of the packaged script for a kind/variant pair."""
    relative = _SCRIPTS.get((kind, SchemaVariant(variant)))
    if relative is None:
        raise SchemaScriptNotFound(f"{kind}/{SchemaVariant(variant).value}")
    return os.path.join(_sql_dir, relative)


def load_script(path: str) -> str:
    if not os.path.isfile(path):
        raise SchemaScriptNotFound(path)
    with open(path, encoding="utf-8") as f:
        return f.read()


def split_statements(sql: str) -> List[str]:
    """
    Split a DDL script into single statements.

    asyncpg runs one statement per execute() call, so the script can't be
    sent as a batch. `--` comments are dropped; the scripts never put a
    semicolon inside a literal.
    """
    lines = []
    for line in sql.splitlines():
        code = line.split("--", 1)[0].rstrip()
        if code:
            lines.append(code)

    statements = []
    for chunk in "\n".join(lines).split(";"):
        statement = chunk.strip()
        if statement:
            statements.append(statement)
    return statements


def load_statements(path: str) -> List[str]:
    statements = split_statements(load_script(path))
    logger.debug(f"Loaded {len(statements)} statements from {path}")
    return statements
