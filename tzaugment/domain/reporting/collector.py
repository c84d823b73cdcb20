from __future__ import annotations

from dataclasses import asdict
from typing import Any

from tzaugment.common.time import getNowIso
from tzaugment.domain.models import AugmentedRow
from tzaugment.domain.reporting.models import (
    ReportDiagnostic,
    ReportEnvelope,
    ReportItem,
    ReportMeta,
    ReportSummary,
)


class ReportCollector:
    """
    Назначение/ответственность:
        Единый сборщик отчёта для команд CLI.
    """

    def __init__(self, run_id: str, command: str, started_at: str | None = None) -> None:
        self.meta = ReportMeta(
            run_id=run_id,
            command=command,
            started_at=started_at or getNowIso(),
        )
        self.summary = ReportSummary()
        self.items: list[ReportItem] = []
        self.context: dict[str, Any] = {}
        self.status: str | None = None

    def set_meta(self, *, items_limit: int | None = None) -> None:
        if items_limit is not None:
            self.meta.items_limit = items_limit

    def set_context(self, name: str, value: dict[str, Any]) -> None:
        self.context[name] = value

    def add_blank_lines(self, source: str, count: int) -> None:
        if count <= 0:
            return
        self.summary.blank_lines_skipped += count
        self._source_entry(source)["blank_lines_skipped"] += count

    def add_row(self, source: str, row: AugmentedRow) -> None:
        """
        Назначение:
            Учитывает выведенную строку; деградировавшие сохраняются в items (до лимита).
        """
        entry = self._source_entry(source)
        self.summary.rows_total += 1
        entry["rows_total"] += 1
        if row.ok:
            self.summary.rows_passed += 1
            entry["rows_passed"] += 1
            return

        self.summary.rows_degraded += 1
        entry["rows_degraded"] += 1
        issue = row.issue
        code = issue.code.value
        stage = issue.stage.value
        self.summary.by_code[code] = self.summary.by_code.get(code, 0) + 1
        self.summary.by_stage[stage] = self.summary.by_stage.get(stage, 0) + 1

        if self._should_store_item():
            self.items.append(
                ReportItem(
                    source=source,
                    line_no=row.line_no,
                    fields=list(row.fields),
                    diagnostic=ReportDiagnostic(
                        stage=stage,
                        code=code,
                        field=issue.field,
                        message=issue.message,
                    ),
                )
            )
        else:
            self.meta.items_truncated = True

    def fail(self, reason: str) -> None:
        """
        Назначение:
            Фиксирует фатальную ошибку команды (статус FAILED).
        """
        self.status = "FAILED"
        self.set_context("error", {"message": reason})

    def finish(self, finished_at: str | None = None, duration_ms: int | None = None) -> None:
        self.meta.finished_at = finished_at or getNowIso()
        self.meta.duration_ms = duration_ms
        if self.status is None:
            self.status = self._derive_status()

    def build(self) -> ReportEnvelope:
        return ReportEnvelope(
            status=self.status or self._derive_status(),
            meta=self.meta,
            summary=self.summary,
            items=self.items,
            context=self.context,
        )

    def _source_entry(self, source: str) -> dict[str, int]:
        return self.summary.by_source.setdefault(
            source,
            {"rows_total": 0, "rows_passed": 0, "rows_degraded": 0, "blank_lines_skipped": 0},
        )

    def _should_store_item(self) -> bool:
        limit = self.meta.items_limit
        if limit is None:
            return True
        return len(self.items) < limit

    def _derive_status(self) -> str:
        if self.summary.rows_degraded == 0:
            return "SUCCESS"
        if self.summary.rows_passed > 0:
            return "PARTIAL"
        return "FAILED"


def asdict_report(envelope: ReportEnvelope) -> dict[str, Any]:
    """
    Назначение:
        Сериализация отчёта в словарь для JSON.
    """
    return {
        "status": envelope.status,
        "meta": asdict(envelope.meta),
        "summary": asdict(envelope.summary),
        "items": [asdict(item) for item in envelope.items],
        "context": envelope.context,
    }
