from __future__ import annotations

from timezonefinder import TimezoneFinder

OCEAN_ZONE_PREFIX = "Etc/"


class TimezoneFinderResolver:
    """
    Назначение/ответственность:
        Реализация TimezoneResolverProtocol поверх timezonefinder
        (полигоны границ часовых поясов, без сетевых запросов).

    Поведение:
        - Координаты вне диапазона (timezonefinder бросает ValueError) -> None.
        - Морские псевдозоны Etc/GMT±N -> None при drop_ocean_zones=True:
          открытый океан считается "зона не найдена".
    """

    def __init__(
        self,
        finder: TimezoneFinder | None = None,
        *,
        in_memory: bool = False,
        drop_ocean_zones: bool = True,
    ) -> None:
        self.finder = finder if finder is not None else TimezoneFinder(in_memory=in_memory)
        self.drop_ocean_zones = drop_ocean_zones

    def resolve(self, latitude: float, longitude: float) -> str | None:
        try:
            zone = self.finder.timezone_at(lng=longitude, lat=latitude)
        except ValueError:
            return None
        if not zone:
            return None
        if self.drop_ocean_zones and zone.startswith(OCEAN_ZONE_PREFIX):
            return None
        return zone


__all__ = ["TimezoneFinderResolver"]
