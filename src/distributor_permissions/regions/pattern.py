"""Region patterns.

A region pattern is a ``-`` separated label path written most-specific
first::

    "hubli-karnataka-india"   city, province, country
    "karnataka-india"         two segments
    "india"                   one segment

Segments are trimmed and lower-cased when the pattern is parsed.  A
pattern must have between one and three non-empty segments; anything
else raises :class:`MalformedPatternError`.
"""
from __future__ import annotations

from dataclasses import dataclass

DELIMITER: str = "-"
MAX_SEGMENTS: int = 3


class MalformedPatternError(ValueError):
    """Raised when a region pattern has no segments, an empty segment,
    or more than three segments.

    Attributes
    ----------
    pattern:
        The raw pattern text that failed validation.
    """

    def __init__(self, message: str, pattern: object = None) -> None:
        self.pattern = pattern
        super().__init__(message)


@dataclass(frozen=True)
class RegionPattern:
    """A parsed, normalised region pattern.

    Attributes
    ----------
    raw:
        The pattern text as originally supplied.
    segments:
        Normalised segments, most-specific first.
    """

    raw: str
    segments: tuple[str, ...]

    @classmethod
    def parse(cls, text: str | RegionPattern) -> RegionPattern:
        """Parse and validate *text*.

        Raises
        ------
        MalformedPatternError
            If *text* is not a string, is blank, has an empty segment, or
            has more than three segments.
        """
        if isinstance(text, RegionPattern):
            return text
        if not isinstance(text, str):
            raise MalformedPatternError(
                f"Region pattern must be a string, got {type(text).__name__}", text
            )
        if not text.strip():
            raise MalformedPatternError("Region pattern must not be empty", text)

        segments = tuple(part.strip().lower() for part in text.split(DELIMITER))
        if any(not segment for segment in segments):
            raise MalformedPatternError(
                f"Region pattern {text!r} contains an empty segment", text
            )
        if len(segments) > MAX_SEGMENTS:
            raise MalformedPatternError(
                f"Region pattern {text!r} has {len(segments)} segments; "
                f"at most {MAX_SEGMENTS} are allowed",
                text,
            )
        return cls(raw=text, segments=segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return DELIMITER.join(self.segments)
