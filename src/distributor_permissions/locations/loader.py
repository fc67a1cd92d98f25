"""CSV location dataset loader.

Each row of the source file holds six comma-separated fields::

    cityCode,provinceCode,countryCode,cityName,provinceName,countryName

Only the three name fields feed :class:`Location` equality and region
matching; the codes are kept on the record for display.

Example
-------
::

    loader = LocationLoader()
    locations = loader.load("cities.csv")
    hubli = find_location(locations, "Hubli", "Karnataka", "India")
"""
from __future__ import annotations

import csv
import logging
from collections.abc import Iterable
from pathlib import Path

from distributor_permissions.locations.location import Location

logger = logging.getLogger(__name__)

_FIELD_COUNT: int = 6


class LocationLoadError(ValueError):
    """Raised when a location dataset cannot be read or contains a bad row.

    Attributes
    ----------
    source:
        The file the error came from, if known.
    line_number:
        1-based line number of the offending row, if applicable.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        line_number: int | None = None,
    ) -> None:
        self.source = source
        self.line_number = line_number
        prefix = ""
        if source:
            prefix = f"[{source}:{line_number}] " if line_number else f"[{source}] "
        super().__init__(f"{prefix}{message}")


class LocationLoader:
    """Reads :class:`Location` records from a comma-separated file.

    Parameters
    ----------
    strict:
        When ``True`` (default), a row with the wrong number of fields or
        an empty name raises :class:`LocationLoadError`.  When ``False``,
        such rows are skipped and a warning is logged.
    encoding:
        Text encoding of the source file.
    """

    def __init__(self, strict: bool = True, encoding: str = "utf-8") -> None:
        self._strict = strict
        self._encoding = encoding

    def load(self, source: str | Path) -> list[Location]:
        """Load every location in *source*.

        Each call re-reads the file from the start.

        Raises
        ------
        FileNotFoundError
            If *source* does not exist.
        LocationLoadError
            On a malformed row in strict mode.
        """
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Location dataset not found: {path}")

        with path.open("r", encoding=self._encoding, newline="") as fh:
            locations = self.parse_rows(csv.reader(fh), source=str(path))

        logger.info("Loaded %d locations from %s", len(locations), path)
        return locations

    def load_from_string(self, text: str, source: str | None = None) -> list[Location]:
        """Load locations from CSV text already held in memory."""
        return self.parse_rows(csv.reader(text.splitlines()), source=source)

    def parse_rows(
        self,
        rows: Iterable[list[str]],
        source: str | None = None,
    ) -> list[Location]:
        """Convert raw CSV rows into :class:`Location` records."""
        locations: list[Location] = []
        for line_number, row in enumerate(rows, start=1):
            if not row or all(not cell.strip() for cell in row):
                continue
            try:
                locations.append(self._row_to_location(row))
            except ValueError as exc:
                if self._strict:
                    raise LocationLoadError(str(exc), source, line_number) from exc
                logger.warning(
                    "Skipping row %d of %s: %s", line_number, source or "<string>", exc
                )
        return locations

    @staticmethod
    def _row_to_location(row: list[str]) -> Location:
        if len(row) != _FIELD_COUNT:
            raise ValueError(f"Expected {_FIELD_COUNT} fields, got {len(row)}")
        city_code, province_code, country_code, city, province, country = (
            cell.strip() for cell in row
        )
        return Location(
            city=city,
            province=province,
            country=country,
            city_code=city_code,
            province_code=province_code,
            country_code=country_code,
        )


def find_location(
    locations: Iterable[Location],
    city: str,
    province: str,
    country: str,
) -> Location | None:
    """Return the first location whose names match, ignoring case and padding.

    Returns ``None`` when nothing matches.  Permission checks treat that
    as an unresolved location and deny it.
    """
    wanted = (city.strip().lower(), province.strip().lower(), country.strip().lower())
    for location in locations:
        if location.parts() == wanted:
            return location
    return None
