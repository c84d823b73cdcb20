from __future__ import annotations

from tzaugment.domain.error_codes import ErrorCode
from tzaugment.domain.models import AugmentedRow, DiagnosticStage, RowIssue
from tzaugment.domain.reporting.collector import ReportCollector, asdict_report


def _ok(line_no: int) -> AugmentedRow:
    return AugmentedRow(line_no=line_no, fields=("ts", "1", "2"), zone_id="UTC", local_time="2013-07-10T02:52:49")


def _degraded(line_no: int) -> AugmentedRow:
    issue = RowIssue(
        stage=DiagnosticStage.RESOLVE_ZONE,
        code=ErrorCode.ZONE_NOT_FOUND,
        field=None,
        message="no time zone",
    )
    return AugmentedRow(line_no=line_no, fields=("ts", "151.2", "-33.9"), issue=issue)


def test_counts_rows_by_outcome_and_source():
    report = ReportCollector(run_id="run-1", command="transform")
    report.add_row("a.csv", _ok(1))
    report.add_row("a.csv", _degraded(2))
    report.add_row("b.csv", _ok(1))
    report.add_blank_lines("b.csv", 2)
    report.finish(duration_ms=5)

    data = asdict_report(report.build())
    assert data["status"] == "PARTIAL"
    assert data["summary"]["rows_total"] == 3
    assert data["summary"]["rows_degraded"] == 1
    assert data["summary"]["blank_lines_skipped"] == 2
    assert data["summary"]["by_code"] == {"ZONE_NOT_FOUND": 1}
    assert data["summary"]["by_stage"] == {"RESOLVE_ZONE": 1}
    assert data["summary"]["by_source"]["a.csv"]["rows_degraded"] == 1
    assert data["summary"]["by_source"]["b.csv"]["blank_lines_skipped"] == 2
    assert data["items"] == [
        {
            "source": "a.csv",
            "line_no": 2,
            "fields": ["ts", "151.2", "-33.9"],
            "diagnostic": {
                "stage": "RESOLVE_ZONE",
                "code": "ZONE_NOT_FOUND",
                "field": None,
                "message": "no time zone",
            },
        }
    ]


def test_items_limit_marks_truncation():
    report = ReportCollector(run_id="run-1", command="transform")
    report.set_meta(items_limit=1)
    report.add_row("-", _degraded(1))
    report.add_row("-", _degraded(2))

    assert len(report.items) == 1
    assert report.meta.items_truncated is True


def test_status_reflects_outcome():
    clean = ReportCollector(run_id="r", command="transform")
    clean.add_row("-", _ok(1))
    clean.finish()
    assert clean.build().status == "SUCCESS"

    all_bad = ReportCollector(run_id="r", command="transform")
    all_bad.add_row("-", _degraded(1))
    all_bad.finish()
    assert all_bad.build().status == "FAILED"

    fatal = ReportCollector(run_id="r", command="transform")
    fatal.add_row("-", _ok(1))
    fatal.fail("Output sink is not writable")
    fatal.finish()
    assert fatal.build().status == "FAILED"
    assert fatal.context["error"]["message"] == "Output sink is not writable"
