"""Datetime helpers."""

from __future__ import annotations

import os
from datetime import datetime

import pendulum

DEFAULT_TZ = "UTC"


def timezone_name() -> str:
    return os.environ.get("TIMEZONE", DEFAULT_TZ)


def now_in_tz() -> pendulum.DateTime:
    tz = pendulum.timezone(timezone_name())
    return pendulum.now(tz)


def iso_timestamp(value: datetime | None = None) -> str:
    """ISO-8601 rendering used for log lines."""
    moment = pendulum.instance(value) if value is not None else now_in_tz()
    return moment.to_iso8601_string()


def parse_timestamp(value: str) -> pendulum.DateTime:
    return pendulum.parse(value)


def to_rfc3339(value: datetime) -> str:
    moment = pendulum.instance(value).in_timezone("UTC")
    return moment.isoformat().replace("+00:00", "Z")
