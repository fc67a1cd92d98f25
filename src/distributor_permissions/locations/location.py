"""Location value type.

A :class:`Location` is one concrete place, described by its city,
province and country names.  Codes from the source dataset are carried
along for display but never take part in equality or region matching.
"""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Location:
    """A real-world place.

    Attributes
    ----------
    city:
        City name, e.g. ``"Hubli"``.
    province:
        Province or state name, e.g. ``"Karnataka"``.
    country:
        Country name, e.g. ``"India"``.
    city_code, province_code, country_code:
        Optional dataset codes.  Ignored by ``==`` and ``hash``.
    """

    city: str
    province: str
    country: str
    city_code: str = field(default="", compare=False)
    province_code: str = field(default="", compare=False)
    country_code: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        for name in ("city", "province", "country"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Location.{name} must be a non-empty string, got {value!r}")

    def parts(self) -> tuple[str, str, str]:
        """Return ``(city, province, country)`` trimmed and lower-cased."""
        return (
            self.city.strip().lower(),
            self.province.strip().lower(),
            self.country.strip().lower(),
        )

    def __str__(self) -> str:
        return f"{self.city}, {self.province}, {self.country}"
