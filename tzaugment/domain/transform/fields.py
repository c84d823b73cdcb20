from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tzaugment.domain.error_codes import ErrorCode
from tzaugment.domain.models import DiagnosticStage, GeoPoint
from tzaugment.domain.transform.result import StepResult

TIMESTAMP_INDEX = 0
LATITUDE_INDEX = 1
LONGITUDE_INDEX = 2
MIN_FIELDS = 3

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# YYYY-MM-DD HH:MM:SS; "T" is accepted so that produced local timestamps re-parse.
_TIMESTAMP_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}[ T][0-9]{2}:[0-9]{2}:[0-9]{2}")


def split_line(line: str, delimiter: str = ",") -> tuple[str, ...]:
    """
    Назначение:
        Буквальное разбиение строки по разделителю (без кавычек и экранирования).

    Выходные данные:
        tuple[str, ...]
            Поля в исходном порядке, включая пустые хвостовые.
    """
    return tuple(line.split(delimiter))


def strip_line_terminator(line: str) -> str:
    return line.rstrip("\r\n")


def parse_timestamp(raw: str) -> StepResult[datetime]:
    """
    Назначение:
        Разбирает наивную дату-время фиксированного формата.

    Выходные данные:
        StepResult[datetime]
            Наивный datetime без зоны либо MALFORMED_TIMESTAMP.
    """
    if not _TIMESTAMP_RE.fullmatch(raw):
        return StepResult.failure(
            DiagnosticStage.PARSE_TIMESTAMP,
            ErrorCode.MALFORMED_TIMESTAMP,
            f"timestamp {raw!r} does not match YYYY-MM-DD HH:MM:SS",
            field="timestamp",
        )
    try:
        value = datetime.strptime(raw.replace("T", " "), TIMESTAMP_FORMAT)
    except ValueError as exc:
        return StepResult.failure(
            DiagnosticStage.PARSE_TIMESTAMP,
            ErrorCode.MALFORMED_TIMESTAMP,
            f"timestamp {raw!r} is not a valid date-time: {exc}",
            field="timestamp",
        )
    return StepResult.success(value)


def parse_utc_instant(fields: Sequence[str]) -> StepResult[datetime]:
    """
    Назначение:
        Поле 0 -> aware datetime в UTC.
    """
    if len(fields) <= TIMESTAMP_INDEX or not fields[TIMESTAMP_INDEX]:
        return StepResult.failure(
            DiagnosticStage.PARSE_TIMESTAMP,
            ErrorCode.MALFORMED_TIMESTAMP,
            "timestamp field is empty",
            field="timestamp",
        )
    parsed = parse_timestamp(fields[TIMESTAMP_INDEX])
    if not parsed.ok:
        return parsed
    return StepResult.success(parsed.value.replace(tzinfo=timezone.utc))


def _parse_degrees(raw: str, name: str) -> StepResult[float]:
    # float() also takes non-ASCII digits and "_" separators
    if not raw.isascii() or "_" in raw:
        return StepResult.failure(
            DiagnosticStage.PARSE_COORDINATES,
            ErrorCode.MALFORMED_ROW,
            f"{name} {raw!r} is not a decimal number",
            field=name,
        )
    try:
        value = float(raw)
    except ValueError:
        return StepResult.failure(
            DiagnosticStage.PARSE_COORDINATES,
            ErrorCode.MALFORMED_ROW,
            f"{name} {raw!r} is not a decimal number",
            field=name,
        )
    if not math.isfinite(value):
        return StepResult.failure(
            DiagnosticStage.PARSE_COORDINATES,
            ErrorCode.MALFORMED_ROW,
            f"{name} {raw!r} is not finite",
            field=name,
        )
    return StepResult.success(value)


def parse_geo_point(fields: Sequence[str]) -> StepResult[GeoPoint]:
    """
    Назначение:
        Поля 1 и 2 -> GeoPoint (широта, долгота).

    Алгоритм:
        - меньше трёх полей -> MALFORMED_ROW;
        - каждое значение разбирается как float, NaN/inf отклоняются.
    """
    if len(fields) < MIN_FIELDS:
        return StepResult.failure(
            DiagnosticStage.PARSE_COORDINATES,
            ErrorCode.MALFORMED_ROW,
            f"expected at least {MIN_FIELDS} fields, got {len(fields)}",
        )
    latitude = _parse_degrees(fields[LATITUDE_INDEX], "latitude")
    if not latitude.ok:
        return StepResult(issue=latitude.issue)
    longitude = _parse_degrees(fields[LONGITUDE_INDEX], "longitude")
    if not longitude.ok:
        return StepResult(issue=longitude.issue)
    return StepResult.success(GeoPoint(latitude=latitude.value, longitude=longitude.value))


def to_local_time(instant: datetime, zone_id: str) -> StepResult[datetime]:
    """
    Назначение:
        Переводит UTC-момент в гражданское время зоны (с учётом летнего времени).

    Примечание:
        Перевод UTC -> local однозначен; в "повторяющийся" час осени
        fold=1 у второго момента, но строковое представление без смещения совпадает.
    """
    try:
        zone = ZoneInfo(zone_id)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        return StepResult.failure(
            DiagnosticStage.CONVERT,
            ErrorCode.ZONE_UNKNOWN,
            f"zone {zone_id!r} is not available in the tz database: {exc}",
            field="zone_id",
        )
    try:
        local = instant.astimezone(zone)
    except OverflowError as exc:
        return StepResult.failure(
            DiagnosticStage.CONVERT,
            ErrorCode.CONVERSION_FAILED,
            f"cannot express {instant.isoformat()} in {zone_id}: {exc}",
            field="timestamp",
        )
    return StepResult.success(local)


def format_local_timestamp(value: datetime) -> str:
    # isoformat keeps the 4-digit year that strftime("%Y") drops on some platforms
    return value.replace(tzinfo=None).isoformat(timespec="seconds")
