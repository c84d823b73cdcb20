from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tzaugment.domain.error_codes import ErrorCode


class DiagnosticStage(str, Enum):
    """
    Назначение:
        Шаг пайплайна строки, на котором возникла диагностика.
    """

    PARSE_TIMESTAMP = "PARSE_TIMESTAMP"
    PARSE_COORDINATES = "PARSE_COORDINATES"
    RESOLVE_ZONE = "RESOLVE_ZONE"
    CONVERT = "CONVERT"


@dataclass(frozen=True)
class RowIssue:
    """
    Назначение:
        Причина деградации строки (строка выводится с пустыми зоной и локальным временем).
    """

    stage: DiagnosticStage
    code: ErrorCode
    field: str | None
    message: str


@dataclass(frozen=True)
class GeoPoint:
    """
    Назначение:
        Пара координат в десятичных градусах (положительные значения — север/восток).
    """

    latitude: float
    longitude: float


@dataclass(frozen=True)
class AugmentedRow:
    """
    Назначение:
        Результат обработки одной строки: исходные поля + зона + локальное время.

    Инварианты/гарантии:
        - fields — исходные поля без изменений и в исходном порядке.
        - При ошибке zone_id и local_time пустые, issue заполнен.
    """

    line_no: int
    fields: tuple[str, ...]
    zone_id: str = ""
    local_time: str = ""
    issue: RowIssue | None = None

    @property
    def ok(self) -> bool:
        return self.issue is None

    def render(self, delimiter: str = ",") -> str:
        """
        Назначение:
            Формирует выходную строку без завершающего перевода строки.

        Алгоритм:
            - каждое исходное поле + разделитель;
            - затем зона, разделитель, локальное время (пустые при ошибке).
        """
        parts = [field + delimiter for field in self.fields]
        parts.append(self.zone_id)
        parts.append(delimiter)
        parts.append(self.local_time)
        return "".join(parts)
