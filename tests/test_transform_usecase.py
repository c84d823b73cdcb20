import io
import logging

import pytest

from tzaugment.domain.exceptions import SinkWriteError
from tzaugment.domain.reporting.collector import ReportCollector
from tzaugment.usecases.transform_usecase import TransformUseCase

SOURCE_NZ = "2013-07-10 02:52:49,-44.490947,171.220966"


class _FakeResolver:
    def resolve(self, latitude: float, longitude: float):
        return "Pacific/Auckland"


def _usecase() -> TransformUseCase:
    return TransformUseCase(resolver=_FakeResolver(), delimiter=",", encoding="utf-8")


def _run(tmp_path, text: str, sink):
    source = tmp_path / "in.csv"
    source.write_text(text, encoding="utf-8")
    report = ReportCollector(run_id="run-1", command="transform")
    logger = logging.getLogger("tzaugment.tests.transform_usecase")
    return report, lambda: _usecase().run([str(source)], sink, logger, "run-1", report)


def test_unencodable_output_raises_sink_write_error(tmp_path):
    sink = io.TextIOWrapper(io.BytesIO(), encoding="ascii")
    report, run = _run(tmp_path, f"{SOURCE_NZ}\n{SOURCE_NZ},café\n", sink)

    with pytest.raises(SinkWriteError) as excinfo:
        run()

    assert excinfo.value.line_no == 2
    assert report.summary.rows_total == 1


def test_closed_sink_fails_on_flush(tmp_path):
    sink = io.StringIO()
    sink.close()
    _, run = _run(tmp_path, "\n\n", sink)

    with pytest.raises(SinkWriteError) as excinfo:
        run()

    assert excinfo.value.line_no is None
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_rows_are_written_and_counted(tmp_path):
    sink = io.StringIO()
    report, run = _run(tmp_path, f"{SOURCE_NZ}\n\n", sink)

    assert run() == 1
    assert sink.getvalue() == SOURCE_NZ + ",Pacific/Auckland,2013-07-10T14:52:49\n"
    assert report.summary.blank_lines_skipped == 1
