from __future__ import annotations

import io
from typing import Callable, Iterable, Iterator, Sequence, TextIO

from tzaugment.domain.error_codes import ErrorCode
from tzaugment.domain.exceptions import SinkWriteError
from tzaugment.domain.models import AugmentedRow, DiagnosticStage, RowIssue
from tzaugment.domain.ports.diagnostics import FailedRowRecorderProtocol, NullFailedRowRecorder
from tzaugment.domain.ports.timezone import TimezoneResolverProtocol
from tzaugment.domain.transform.fields import (
    format_local_timestamp,
    parse_geo_point,
    parse_utc_instant,
    split_line,
    strip_line_terminator,
    to_local_time,
)

RowObserver = Callable[[AugmentedRow], None]


class RowTransformer:
    """
    Назначение/ответственность:
        Однопроходное построчное преобразование:
        split -> UTC timestamp -> координаты -> зона -> локальное время -> вывод.

    Взаимодействия:
        - resolver: TimezoneResolverProtocol (внедряется снаружи).
        - recorder: FailedRowRecorderProtocol для диагностики деградировавших строк.

    Инварианты/гарантии:
        - Исходные поля всегда выводятся без изменений; добавляются ровно два поля.
        - Ошибки данных строки не бросаются наружу; фатальна только ошибка записи.
        - Пустые строки пропускаются, порядок строк сохраняется.
        - Трансформер не владеет потоками: открывает и закрывает их вызывающая сторона.
    """

    def __init__(
        self,
        resolver: TimezoneResolverProtocol,
        recorder: FailedRowRecorderProtocol | None = None,
        delimiter: str = ",",
        line_terminator: str = "\n",
    ) -> None:
        if len(delimiter) != 1:
            raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")
        self.resolver = resolver
        self.recorder = recorder or NullFailedRowRecorder()
        self.delimiter = delimiter
        self.line_terminator = line_terminator

    def transform_fields(self, fields: Sequence[str], line_no: int = 0) -> AugmentedRow:
        """
        Назначение:
            Применяет алгоритм строки к уже разделённым полям.

        Выходные данные:
            AugmentedRow
                С зоной и локальным временем либо с issue и пустыми полями.
        """
        original = tuple(fields)

        instant = parse_utc_instant(original)
        if not instant.ok:
            return self._degrade(original, instant.issue, line_no)

        point = parse_geo_point(original)
        if not point.ok:
            return self._degrade(original, point.issue, line_no)

        zone_id = self.resolver.resolve(point.value.latitude, point.value.longitude)
        if not zone_id:
            issue = RowIssue(
                stage=DiagnosticStage.RESOLVE_ZONE,
                code=ErrorCode.ZONE_NOT_FOUND,
                field=None,
                message=f"no time zone at latitude={point.value.latitude} longitude={point.value.longitude}",
            )
            return self._degrade(original, issue, line_no)

        local = to_local_time(instant.value, zone_id)
        if not local.ok:
            return self._degrade(original, local.issue, line_no)

        return AugmentedRow(
            line_no=line_no,
            fields=original,
            zone_id=zone_id,
            local_time=format_local_timestamp(local.value),
        )

    def transform_line(self, line: str, line_no: int = 0) -> AugmentedRow | None:
        """
        Назначение:
            Обрабатывает одну сырую строку; None для пустой строки.
        """
        text = strip_line_terminator(line)
        if not text.strip():
            return None
        return self.transform_fields(split_line(text, self.delimiter), line_no)

    def iter_transform(self, lines: Iterable[str]) -> Iterator[AugmentedRow]:
        """
        Назначение:
            Ленивый поток AugmentedRow в порядке входных строк.

        Примечание:
            line_no считается по всем входным строкам (включая пустые),
            чтобы диагностика указывала на физическую строку источника.
        """
        for line_no, line in enumerate(lines, start=1):
            row = self.transform_line(line, line_no)
            if row is not None:
                yield row

    def format_row(self, row: AugmentedRow) -> str:
        return row.render(self.delimiter) + self.line_terminator

    def write_row(self, sink: TextIO, row: AugmentedRow) -> None:
        """
        Назначение:
            Записывает строку в sink целиком.

        Поведение:
            - OSError, ошибка кодирования или закрытый sink -> SinkWriteError (фатально).
        """
        try:
            sink.write(self.format_row(row))
        except (OSError, ValueError) as exc:
            raise SinkWriteError(line_no=row.line_no, reason=str(exc)) from exc

    def transform(
        self,
        source: Iterable[str],
        sink: TextIO,
        observer: RowObserver | None = None,
    ) -> int:
        """
        Назначение:
            Основной API: читает source, пишет результат в sink.

        Входные данные:
            source: Iterable[str]
                Любой итерируемый набор строк (файл, StringIO, список).
            sink: TextIO
                Выходной текстовый поток.
            observer: RowObserver | None
                Вызывается после записи каждой строки (например, для отчёта).

        Выходные данные:
            int
                Количество записанных строк.
        """
        written = 0
        for row in self.iter_transform(source):
            self.write_row(sink, row)
            written += 1
            if observer is not None:
                observer(row)
        return written

    def transform_text(self, text: str) -> str:
        """
        Назначение:
            Удобный API для данных в памяти (тесты, небольшие фрагменты).
        """
        sink = io.StringIO()
        self.transform(io.StringIO(text), sink)
        return sink.getvalue()

    def _degrade(self, fields: tuple[str, ...], issue: RowIssue | None, line_no: int) -> AugmentedRow:
        row = AugmentedRow(line_no=line_no, fields=fields, issue=issue)
        if issue is not None:
            self.recorder.record(fields, issue, line_no)
        return row
