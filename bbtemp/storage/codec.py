"""Encode and decode the entry collection for the key-value slot.

The stored form is a JSON array of objects::

    [{"id": "…", "date": "2026-02-03T07:15:00", "temperature": 36.45,
      "isPeriodDay": false}, …]

Dates are written as ISO-8601.  On read, numeric dates are accepted as
seconds since 2001-01-01 UTC, the default date encoding of collections
exported by the iOS app.

Decoding never raises: a missing, empty or malformed blob yields an empty
collection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from bbtemp.tracker.models import TemperatureEntry, naive_local

logger = logging.getLogger("bbtemp.storage.codec")

# Reference date of numeric timestamps in the iOS export
_APPLE_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)


class BBTempBase(BaseModel):
    """Base model with shared config for all stored BBTemp schemas."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class EntryRecord(BBTempBase):
    """Stored shape of one TemperatureEntry."""

    id: UUID = Field(default_factory=uuid4)
    date: datetime
    temperature: float
    is_period_day: bool = Field(default=False, alias="isPeriodDay")

    @field_validator("date", mode="before")
    @classmethod
    def _numeric_reference_date(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            try:
                moment = _APPLE_EPOCH + timedelta(seconds=value)
            except (OverflowError, ValueError) as exc:
                raise ValueError(f"timestamp {value!r} is out of range") from exc
            return naive_local(moment)
        return value

    @field_validator("date")
    @classmethod
    def _naive_local(cls, value: datetime) -> datetime:
        return naive_local(value)

    @classmethod
    def from_entry(cls, entry: TemperatureEntry) -> EntryRecord:
        return cls(
            id=entry.id,
            date=entry.date,
            temperature=entry.temperature,
            is_period_day=entry.is_period_day,
        )

    def to_entry(self) -> TemperatureEntry:
        return TemperatureEntry(
            id=self.id,
            date=self.date,
            temperature=self.temperature,
            is_period_day=self.is_period_day,
        )


_RECORDS = TypeAdapter(list[EntryRecord])


def encode_entries(entries: Iterable[TemperatureEntry]) -> bytes:
    """Serialize entries to the stored JSON form."""
    records = [EntryRecord.from_entry(e) for e in entries]
    return _RECORDS.dump_json(records, by_alias=True)


def decode_entries(blob: bytes | str | None) -> list[TemperatureEntry]:
    """Deserialize the stored JSON form.

    Returns an empty list for a missing or empty blob, and for anything that
    fails to parse or validate.
    """
    if not blob:
        return []
    try:
        records = _RECORDS.validate_json(blob)
    except ValidationError as exc:
        logger.warning(
            "Discarding unreadable entry data (%d error(s)): %s",
            exc.error_count(),
            exc.errors()[0]["msg"] if exc.errors() else "unknown",
        )
        return []
    except UnicodeDecodeError as exc:
        logger.warning("Discarding undecodable entry data: %s", exc)
        return []
    return [r.to_entry() for r in records]
