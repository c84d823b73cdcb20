from __future__ import annotations

from dataclasses import dataclass

from tzaugment.domain.error_codes import ErrorCode


@dataclass
class SinkWriteError(Exception):
    """
    Назначение:
        Фатальная ошибка записи в выходной поток.
    Инварианты/гарантии:
        - code установлен в ErrorCode.SINK_WRITE_FAILED.
        - line_no указывает строку, которую не удалось записать (None при сбое flush).
    """

    line_no: int | None
    reason: str

    @property
    def code(self) -> ErrorCode:
        return ErrorCode.SINK_WRITE_FAILED

    def __str__(self) -> str:
        if self.line_no is None:
            return f"Output sink is not writable: {self.reason}"
        return f"Output sink is not writable at line {self.line_no}: {self.reason}"


__all__ = ["SinkWriteError"]
