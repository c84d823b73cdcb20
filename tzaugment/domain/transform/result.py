from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from tzaugment.domain.error_codes import ErrorCode
from tzaugment.domain.models import DiagnosticStage, RowIssue

T = TypeVar("T")


@dataclass(frozen=True)
class StepResult(Generic[T]):
    """
    Назначение:
        Результат одного шага обработки строки: значение либо причина отказа.

    Инварианты/гарантии:
        - Ровно одно из value/issue осмысленно: при issue is None шаг успешен.
    """

    value: T | None = None
    issue: RowIssue | None = None

    @property
    def ok(self) -> bool:
        return self.issue is None

    @classmethod
    def success(cls, value: T) -> "StepResult[T]":
        return cls(value=value)

    @classmethod
    def failure(
        cls,
        stage: DiagnosticStage,
        code: ErrorCode,
        message: str,
        field: str | None = None,
    ) -> "StepResult[T]":
        return cls(issue=RowIssue(stage=stage, code=code, field=field, message=message))
