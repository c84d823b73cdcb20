from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TimezoneResolverProtocol(Protocol):
    """
    Назначение:
        Абстракция определения часового пояса по координатам.

    Контракт:
        - resolve(latitude: float, longitude: float) -> str | None
            Возвращает IANA-идентификатор зоны (например, "Pacific/Auckland")
            или None, если точка не покрыта ни одной зоной.
        - Вызывающая сторона не обязана валидировать координаты:
          для некорректных значений возвращается None, а не исключение.
        - Чистая функция: без побочных эффектов, детерминирована для фиксированных данных.
    """

    def resolve(self, latitude: float, longitude: float) -> str | None: ...


__all__ = ["TimezoneResolverProtocol"]
