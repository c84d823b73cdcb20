from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

import typer

from tzaugment.common.run_id import generate_run_id
from tzaugment.common.time import getDurationMs
from tzaugment.config import Settings, loadSettings
from tzaugment.domain.exceptions import SinkWriteError
from tzaugment.domain.ports.timezone import TimezoneResolverProtocol
from tzaugment.infra.artifacts.report_writer import createEmptyReport, finalizeReport, writeReportJson
from tzaugment.infra.sources.line_source import STDIN_MARKER, SourceReadError
from tzaugment.infra.timezone.timezonefinder_resolver import TimezoneFinderResolver
from tzaugment.loggingSetup import closeCommandLogger, createCommandLogger, logEvent
from tzaugment.usecases.transform_usecase import TransformUseCase

app = typer.Typer(no_args_is_help=True, add_completion=False)


def ensureDir(path: str) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def buildResolver(settings: Settings) -> TimezoneResolverProtocol:
    """
    Назначение:
        Создаёт резолвер часовых поясов по настройкам.
    """
    return TimezoneFinderResolver(
        in_memory=settings.in_memory_index,
        drop_ocean_zones=settings.drop_ocean_zones,
    )


def printRunHeader(runId: str, command: str, settings: Settings, sources: list[str]) -> None:
    """
    Назначение:
        Печатает сводку параметров запуска в stderr (stdout занят данными).
    """
    typer.echo(
        f"run_id={runId} command={command} "
        f"encoding={settings.input_encoding} delimiter={settings.delimiter!r} "
        f"drop_ocean_zones={settings.drop_ocean_zones} sources={sources} "
        f"log_level={settings.log_level}",
        err=True,
    )


@contextmanager
def openSink(outputPath: str | None) -> Iterator[TextIO]:
    """
    Назначение:
        Открывает выходной поток: файл или stdout.

    Поведение:
        - Файл закрывается на любом пути выхода, stdout не закрывается.
        - Перевод строки "\\n" транслируется в платформенный терминатор текстовым режимом.
    """
    if not outputPath or outputPath == STDIN_MARKER:
        yield sys.stdout
        return
    Path(outputPath).parent.mkdir(parents=True, exist_ok=True)
    with open(outputPath, "w", encoding="utf-8") as handle:
        yield handle


def runWithReport(ctx: typer.Context, commandName: str, runner, outputPath: str | None = None) -> None:
    """
    Назначение:
        Унифицированная обвязка выполнения команд:
        - создаёт логгер + файл лога
        - создаёт report.json skeleton
        - гарантирует запись отчёта в finally
        - необработанное исключение команды -> статус FAILED

    Входные данные:
        ctx: typer.Context
        commandName: str
        runner: callable(logger, report) -> int
            Возвращает exit code.
    """
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    sources = ctx.obj["sources"]

    startMonotonic = time.monotonic()

    logger, logFilePath = createCommandLogger(
        commandName=commandName,
        logDir=settings.log_dir,
        runId=runId,
        logLevel=settings.log_level,
    )

    report = createEmptyReport(runId=runId, command=commandName, configSources=sources)
    report.set_meta(items_limit=settings.report_items_limit)

    exitCode: int | None = None

    try:
        logEvent(logger, logging.INFO, runId, "core", "Command started")
        printRunHeader(runId, commandName, settings, sources)
        exitCode = runner(logger, report)
    except Exception as exc:
        logEvent(logger, logging.ERROR, runId, "core", f"Command aborted: {exc!r}")
        report.fail(f"Command aborted: {exc!r}")
        raise
    finally:
        durationMs = getDurationMs(startMonotonic, time.monotonic())
        finalizeReport(
            report=report,
            durationMs=durationMs,
            logFile=logFilePath,
            reportDir=settings.report_dir,
            outputPath=outputPath,
        )
        reportPath = writeReportJson(report, settings.report_dir, f"report_{commandName}_{runId}")
        logEvent(logger, logging.INFO, runId, "report", f"Report written: {reportPath}")
        closeCommandLogger(logger)

        if exitCode is not None:
            raise typer.Exit(code=exitCode)


def runTransformCommand(ctx: typer.Context, files: list[str], outputPath: str | None) -> None:
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    paths = files or [STDIN_MARKER]

    def execute(logger, report) -> int:
        usecase = TransformUseCase(
            resolver=buildResolver(settings),
            delimiter=settings.delimiter,
            encoding=settings.input_encoding,
        )
        report.set_context("input", {"files": paths, "encoding": settings.input_encoding})
        try:
            with openSink(outputPath) as sink:
                written = usecase.run(paths, sink, logger, runId, report)
        except SourceReadError as exc:
            logEvent(logger, logging.ERROR, runId, "source", str(exc))
            report.fail(str(exc))
            typer.echo(f"ERROR: {exc}", err=True)
            return 2
        except SinkWriteError as exc:
            logEvent(logger, logging.ERROR, runId, "sink", str(exc))
            report.fail(str(exc))
            typer.echo(f"ERROR: {exc}", err=True)
            return 2
        except OSError as exc:
            logEvent(logger, logging.ERROR, runId, "sink", f"Cannot open output: {exc}")
            report.fail(f"Cannot open output: {exc}")
            typer.echo(f"ERROR: cannot open output: {exc}", err=True)
            return 2

        summary = report.summary
        logEvent(
            logger,
            logging.INFO,
            runId,
            "transform",
            f"transform done rows_total={summary.rows_total} passed={summary.rows_passed} "
            f"degraded={summary.rows_degraded} blank_skipped={summary.blank_lines_skipped} written={written}",
        )
        if summary.rows_degraded and settings.fail_on_degraded:
            return 1
        return 0

    runWithReport(ctx=ctx, commandName="transform", runner=execute, outputPath=outputPath)


def runLocateCommand(ctx: typer.Context, latitude: float, longitude: float) -> None:
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]

    def execute(logger, report) -> int:
        zone = buildResolver(settings).resolve(latitude, longitude)
        report.set_context("locate", {"latitude": latitude, "longitude": longitude, "zone_id": zone})
        if zone is None:
            logEvent(logger, logging.WARNING, runId, "locate", f"no zone for lat={latitude} lon={longitude}")
            typer.echo("NOT_FOUND")
            return 1
        logEvent(logger, logging.INFO, runId, "locate", f"lat={latitude} lon={longitude} zone={zone}")
        typer.echo(zone)
        return 0

    runWithReport(ctx=ctx, commandName="locate", runner=execute)


@app.callback()
def main(
    ctx: typer.Context,
    config: str | None = typer.Option(None, "--config", help="Path to config.yml"),
    runId: str | None = typer.Option(None, "--run-id", help="Run identifier (UUID). If omitted, generated."),
    logLevel: str | None = typer.Option(None, "--log-level", help="Log level: ERROR|WARN|INFO|DEBUG"),
    logDir: str | None = typer.Option(None, "--log-dir", help="Directory for logs."),
    reportDir: str | None = typer.Option(None, "--report-dir", help="Directory for reports."),
    encoding: str | None = typer.Option(None, "--encoding", help="Input encoding for files and stdin (default utf-8-sig)."),
    delimiter: str | None = typer.Option(None, "--delimiter", help="Field delimiter (single character)."),
    keepOceanZones: bool | None = typer.Option(
        None,
        "--keep-ocean-zones",
        help="Emit Etc/GMT±N zones for open ocean instead of empty fields.",
    ),
    inMemoryIndex: bool | None = typer.Option(None, "--in-memory-index", help="Load timezone polygons into memory."),
    reportItemsLimit: int | None = typer.Option(None, "--report-items-limit", help="Limit degraded rows stored in report"),
    failOnDegraded: bool | None = typer.Option(
        None,
        "--fail-on-degraded",
        help="Exit with code 1 when any row could not be augmented.",
    ),
):
    """
    Назначение:
        Глобальная инициализация CLI:
        - генерирует/принимает run_id
        - загружает настройки (CLI > ENV > config > defaults)
        - создаёт каталоги log/report
        - сохраняет всё в ctx.obj для подкоманд
    """
    if not runId:
        runId = generate_run_id()

    cliOverrides = {
        "log_level": logLevel,
        "log_dir": logDir,
        "report_dir": reportDir,
        "input_encoding": encoding,
        "delimiter": delimiter,
        "drop_ocean_zones": (not keepOceanZones) if keepOceanZones is not None else None,
        "in_memory_index": inMemoryIndex,
        "report_items_limit": reportItemsLimit,
        "fail_on_degraded": failOnDegraded,
    }
    try:
        loaded = loadSettings(config_path=config, cli_overrides=cliOverrides)
    except ValueError as exc:
        typer.echo(f"ERROR: invalid settings: {exc}", err=True)
        raise typer.Exit(code=2)

    ensureDir(loaded.settings.log_dir)
    ensureDir(loaded.settings.report_dir)

    ctx.obj = {
        "runId": runId,
        "settings": loaded.settings,
        "sources": loaded.sources_used,
    }


@app.command()
def transform(
    ctx: typer.Context,
    files: list[str] | None = typer.Argument(None, help="Input CSV files; '-' or none reads stdin."),
    output: str | None = typer.Option(None, "--output", "-o", help="Output file (default stdout)."),
):
    """Append time zone and local time to each CSV row."""
    runTransformCommand(ctx, files or [], output)


@app.command()
def locate(
    ctx: typer.Context,
    latitude: float = typer.Argument(..., help="Latitude, decimal degrees (North positive)."),
    longitude: float = typer.Argument(..., help="Longitude, decimal degrees (East positive)."),
):
    """Print the time zone at a coordinate."""
    runLocateCommand(ctx, latitude, longitude)


if __name__ == "__main__":
    app()
