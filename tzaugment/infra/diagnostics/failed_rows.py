from __future__ import annotations

import logging
from typing import Sequence

from tzaugment.domain.models import RowIssue


class LoggingFailedRowRecorder:
    """
    Назначение/ответственность:
        Пишет исходные поля деградировавшей строки в лог команды (WARNING).

    Инварианты/гарантии:
        - Никогда не бросает исключений: сбой логирования не прерывает поток.
    """

    def __init__(self, logger: logging.Logger, run_id: str, source: str = "<stdin>", component: str = "transform") -> None:
        self.logger = logger
        self.run_id = run_id
        self.source = source
        self.component = component

    def record(self, fields: Sequence[str], issue: RowIssue, line_no: int) -> None:
        try:
            self.logger.log(
                logging.WARNING,
                f"degraded row source={self.source} line={line_no} code={issue.code.value} "
                f"stage={issue.stage.value} reason={issue.message} fields={list(fields)!r}",
                extra={"runId": self.run_id, "component": self.component},
            )
        except Exception:
            # diagnostics must never break row processing
            return
