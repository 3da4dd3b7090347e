"""Timestamp helpers.

Domain records carry timezone-aware UTC datetimes. On disk they are RFC3339
strings produced through protobuf's Timestamp well-known type; blobs written
by the web till carry epoch milliseconds instead, which are also accepted.
"""

from datetime import datetime, timezone
from typing import Union

from google.protobuf.timestamp_pb2 import Timestamp

from .errors import CorruptPersistedStateError


def now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(timezone.utc)


def to_rfc3339(moment: datetime) -> str:
    ts = Timestamp()
    ts.FromDatetime(moment)
    return ts.ToJsonString()


def parse_timestamp(value: Union[str, int, float]) -> datetime:
    """Parse an RFC3339 string or epoch milliseconds into a UTC datetime.

    Raises:
        CorruptPersistedStateError: If the value is neither, or out of range.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise CorruptPersistedStateError(f"invalid timestamp: {value!r}")

    ts = Timestamp()
    try:
        if isinstance(value, str):
            ts.FromJsonString(value)
        else:
            ts.FromMilliseconds(int(value))
        return ts.ToDatetime(tzinfo=timezone.utc)
    except (OverflowError, ValueError) as e:
        raise CorruptPersistedStateError("invalid timestamp", e) from e
