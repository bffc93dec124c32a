import enum
from typing import Dict

from sqlalchemy import Column, Integer, MetaData, Table, Text
from sqlalchemy.dialects.postgresql import ARRAY as PGARRAY


class SchemaVariant(str, enum.Enum):
    CURRENT = "current"
    LEGACY = "legacy"


# These are NOT mapped classes. They describe the columns the SQL scripts
# create, so the live database can be checked against them.
# No primary or foreign keys: release_id is only NOT NULL.
metadata = MetaData()

release = Table(
    'release',
    metadata,
    Column('id', Integer, nullable=False, autoincrement=False),
    Column('status', Text),
    Column('title', Text),
    Column('country', Text),
    Column('released', Text),
    Column('notes', Text),
    Column('genres', PGARRAY(Text)),
    Column('styles', PGARRAY(Text)),
    Column('master_id', Integer),
    Column('data_quality', Text),
)

# Surrogate ids are serial columns, which are implicitly NOT NULL.
release_label = Table(
    'release_label',
    metadata,
    Column('id', Integer, nullable=False, autoincrement=True),
    Column('release_id', Integer, nullable=False),
    Column('label_id', Integer),
    Column('label', Text),
    Column('catno', Text),
)

release_video = Table(
    'release_video',
    metadata,
    Column('id', Integer, nullable=False, autoincrement=True),
    Column('release_id', Integer, nullable=False),
    Column('duration', Integer),
    Column('src', Text),
    Column('title', Text),
)

track = Table(
    'track',
    metadata,
    Column('id', Integer, nullable=False, autoincrement=True),
    Column('release_id', Integer, nullable=False),
    Column('title', Text),
    Column('position', Text),
    Column('duration', Text),
)

release_format = Table(
    'format',
    metadata,
    Column('id', Integer, nullable=False, autoincrement=True),
    Column('release_id', Integer, nullable=False),
    Column('name', Text),
    Column('qty', Text),
    Column('text', Text),
)


# Superseded layout without surrogate keys or track/format
legacy_metadata = MetaData()

legacy_release = release.to_metadata(legacy_metadata)

legacy_release_label = Table(
    'release_label',
    legacy_metadata,
    Column('release_id', Integer, nullable=False),
    Column('label', Text),
    Column('catno', Text),
    Column('label_id', Integer),
)

legacy_release_video = Table(
    'release_video',
    legacy_metadata,
    Column('release_id', Integer, nullable=False),
    Column('duration', Integer),
    Column('src', Text),
    Column('title', Text),
)


METADATA_BY_VARIANT: Dict[SchemaVariant, MetaData] = {
    SchemaVariant.CURRENT: metadata,
    SchemaVariant.LEGACY: legacy_metadata,
}
