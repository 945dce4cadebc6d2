"""Portable column types."""

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from libs.common.datetime_utils import ensure_utc


class UTCDateTime(TypeDecorator):
    """Timezone-aware timestamp that always comes back as UTC.

    PostgreSQL stores ``timestamptz`` natively; SQLite drops the offset, so
    values read back are re-tagged as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return ensure_utc(value)

    def process_result_value(self, value, dialect):
        return ensure_utc(value)
