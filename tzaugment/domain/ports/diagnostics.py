from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from tzaugment.domain.models import RowIssue


@runtime_checkable
class FailedRowRecorderProtocol(Protocol):
    """
    Назначение:
        Приёмник диагностики по деградировавшим строкам.

    Контракт:
        - record(fields, issue, line_no) -> None
            Сохраняет исходные поля строки для разбора оператором.
        - Никогда не бросает исключений и не блокирует обработку потока.
    """

    def record(self, fields: Sequence[str], issue: RowIssue, line_no: int) -> None: ...


class NullFailedRowRecorder:
    """
    Назначение:
        Recorder по умолчанию: диагностика отбрасывается.
    """

    def record(self, fields: Sequence[str], issue: RowIssue, line_no: int) -> None:
        return None


__all__ = ["FailedRowRecorderProtocol", "NullFailedRowRecorder"]
