from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ReportMeta:
    """
    Назначение:
        Метаданные запуска команды.
    """

    run_id: str
    command: str
    started_at: str
    finished_at: str | None = None
    duration_ms: int | None = None
    items_limit: int | None = None
    items_truncated: bool = False


@dataclass
class ReportSummary:
    """
    Назначение:
        Счётчики выполнения преобразования.
    """

    rows_total: int = 0
    rows_passed: int = 0
    rows_degraded: int = 0
    blank_lines_skipped: int = 0
    by_code: dict[str, int] = field(default_factory=dict)
    by_stage: dict[str, int] = field(default_factory=dict)
    by_source: dict[str, dict[str, int]] = field(default_factory=dict)


@dataclass(frozen=True)
class ReportDiagnostic:
    stage: str
    code: str
    field: str | None
    message: str


@dataclass
class ReportItem:
    """
    Назначение:
        Деградировавшая строка с исходными полями и причиной.
    """

    source: str
    line_no: int
    fields: list[str]
    diagnostic: ReportDiagnostic


@dataclass
class ReportEnvelope:
    """
    Назначение:
        Корневой объект отчёта.
    """

    status: str
    meta: ReportMeta
    summary: ReportSummary
    items: list[ReportItem]
    context: dict[str, Any] = field(default_factory=dict)
