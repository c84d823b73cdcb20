from __future__ import annotations

import logging
from typing import Iterable, Iterator, TextIO

from tzaugment.domain.exceptions import SinkWriteError
from tzaugment.domain.ports.diagnostics import FailedRowRecorderProtocol
from tzaugment.domain.ports.timezone import TimezoneResolverProtocol
from tzaugment.domain.reporting.collector import ReportCollector
from tzaugment.domain.transform.row_transformer import RowTransformer
from tzaugment.infra.diagnostics.failed_rows import LoggingFailedRowRecorder
from tzaugment.infra.sources.line_source import iterSourceLines, openLineSource, sourceName
from tzaugment.loggingSetup import logEvent


class _LineCounter:
    """
    Назначение:
        Обёртка над источником строк, считающая прочитанные строки.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self.lines = lines
        self.count = 0

    def __iter__(self) -> Iterator[str]:
        for line in self.lines:
            self.count += 1
            yield line


class TransformUseCase:
    """
    Назначение/ответственность:
        Use-case команды transform: последовательно прогоняет источники через
        RowTransformer в общий sink и наполняет отчёт.

    Взаимодействия:
        - Открывает и закрывает входные файлы (контекстные менеджеры).
        - Sink открыт вызывающей стороной; здесь только запись и flush.
    """

    def __init__(
        self,
        resolver: TimezoneResolverProtocol,
        delimiter: str,
        encoding: str,
    ) -> None:
        self.resolver = resolver
        self.delimiter = delimiter
        self.encoding = encoding

    def build_transformer(self, recorder: FailedRowRecorderProtocol | None) -> RowTransformer:
        return RowTransformer(self.resolver, recorder=recorder, delimiter=self.delimiter)

    def run_source(
        self,
        lines: Iterable[str],
        source: str,
        sink: TextIO,
        logger: logging.Logger,
        run_id: str,
        report: ReportCollector,
    ) -> int:
        """
        Назначение:
            Преобразует один источник строк.

        Выходные данные:
            int
                Количество строк, записанных в sink.
        """
        recorder = LoggingFailedRowRecorder(logger, run_id, source=source)
        transformer = self.build_transformer(recorder)
        counter = _LineCounter(lines)
        written = transformer.transform(counter, sink, observer=lambda row: report.add_row(source, row))
        report.add_blank_lines(source, counter.count - written)
        logEvent(
            logger,
            logging.INFO,
            run_id,
            "transform",
            f"source done source={source} lines_read={counter.count} rows_written={written}",
        )
        return written

    def run(
        self,
        paths: list[str],
        sink: TextIO,
        logger: logging.Logger,
        run_id: str,
        report: ReportCollector,
    ) -> int:
        """
        Назначение:
            Преобразует все источники по порядку.

        Поведение:
            - SourceReadError / SinkWriteError пробрасываются (фатальные ошибки).
            - sink сбрасывается после каждого источника.

        Выходные данные:
            int
                Общее количество записанных строк.
        """
        total = 0
        for path in paths:
            name = sourceName(path)
            logEvent(logger, logging.INFO, run_id, "transform", f"source started source={name}")
            with openLineSource(path, self.encoding) as handle:
                total += self.run_source(iterSourceLines(handle, name), name, sink, logger, run_id, report)
            try:
                sink.flush()
            except (OSError, ValueError) as exc:
                raise SinkWriteError(line_no=None, reason=str(exc)) from exc
        return total
