# alumni_server/core/utils.py

import math
from datetime import datetime, timezone


def utcnow() -> datetime:
    """
    Current UTC time as a naive datetime, the form every timestamp column stores.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def isoformat(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")


def page_meta(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "pages": math.ceil(total / limit),
        "total": total,
        "hasMore": page * limit < total,
    }


def offset_for(page: int, limit: int) -> int:
    return (page - 1) * limit
