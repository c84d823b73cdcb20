from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """
    Назначение:
        Единая таксономия кодов ошибок обработки строки и потока.
    """

    MALFORMED_ROW = "MALFORMED_ROW"
    MALFORMED_TIMESTAMP = "MALFORMED_TIMESTAMP"
    ZONE_NOT_FOUND = "ZONE_NOT_FOUND"
    ZONE_UNKNOWN = "ZONE_UNKNOWN"
    CONVERSION_FAILED = "CONVERSION_FAILED"
    SINK_WRITE_FAILED = "SINK_WRITE_FAILED"

