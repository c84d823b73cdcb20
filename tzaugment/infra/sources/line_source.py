from __future__ import annotations

import io
import sys
from contextlib import contextmanager
from typing import Iterator, TextIO

STDIN_MARKER = "-"
STDIN_NAME = "<stdin>"


class SourceReadError(Exception):
    """
    Назначение:
        Ошибка открытия/чтения/декодирования входного источника (фатальная).
    """


def sourceName(path: str) -> str:
    return STDIN_NAME if path == STDIN_MARKER else path


@contextmanager
def openLineSource(path: str, encoding: str) -> Iterator[TextIO]:
    """
    Назначение:
        Открывает источник строк: файл по пути либо stdin для "-".

    Поведение:
        - Файл закрывается на любом пути выхода; stdin не закрывается.
        - stdin декодируется той же кодировкой, что и файлы (BOM снимается utf-8-sig).
        - OSError или неизвестная кодировка -> SourceReadError.
    """
    if path == STDIN_MARKER:
        buffer = getattr(sys.stdin, "buffer", None)
        if buffer is None:
            yield sys.stdin
            return
        try:
            handle = io.TextIOWrapper(buffer, encoding=encoding, newline=None)
        except LookupError as exc:
            raise SourceReadError(f"Cannot decode input {STDIN_NAME}: {exc}") from exc
        try:
            yield handle
        finally:
            handle.detach()
        return
    try:
        handle = open(path, "r", encoding=encoding, newline=None)
    except (OSError, LookupError) as exc:
        raise SourceReadError(f"Cannot open input {path}: {exc}") from exc
    with handle:
        yield handle


def iterSourceLines(handle: TextIO, name: str) -> Iterator[str]:
    """
    Назначение:
        Итерирует строки источника, переводя ошибки чтения/декодирования в SourceReadError.
    """
    try:
        for line in handle:
            yield line
    except UnicodeDecodeError as exc:
        raise SourceReadError(f"Cannot decode input {name}: {exc}") from exc
    except OSError as exc:
        raise SourceReadError(f"Cannot read input {name}: {exc}") from exc
