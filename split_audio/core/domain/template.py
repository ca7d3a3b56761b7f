"""
Positional filename templates.

A template describes where the recording timestamp sits inside a
fixed-width filename. Tokens are aligned to character offsets, there are no
delimiters:

    ?     one ignored character
    YYYY  year
    MM    month
    DD    day
    hh    hour
    mm    minute
    ss    second

Any other character is a literal and is skipped. The filename characters in
front of the year token form the literal prefix that is carried over into
every output name.

Example:
    template "??YYYYMMDDhhmmss", filename "XX20240115143000"
    -> prefix "XX", timestamp 2024-01-15 14:30:00
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from split_audio.core.domain.errors import ConfigurationError, MatchError, MatchFailure

YEAR = "year"
MONTH = "month"
DAY = "day"
HOUR = "hour"
MINUTE = "minute"
SECOND = "second"

WILDCARD = "?"

# Cyrillic atoms are the vocabulary of older settings files.
YEAR_ATOMS: frozenset[str] = frozenset({"YYYY", "ГГГГ"})

FIELD_ATOMS: dict[str, str] = {
    "MM": MONTH,
    "DD": DAY,
    "hh": HOUR,
    "mm": MINUTE,
    "ss": SECOND,
    "ММ": MONTH,
    "ДД": DAY,
    "чч": HOUR,
    "мм": MINUTE,
    "сс": SECOND,
}

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True, slots=True)
class DateToken:
    """A date/time field bound to a fixed offset and width."""

    field: str
    offset: int
    width: int


@dataclass(frozen=True, slots=True)
class MatchResult:
    timestamp: datetime
    prefix: str


def classify_token(template: str, offset: int) -> tuple[int, str | None]:
    """
    Classify the template token starting at ``offset``.

    Returns ``(width, field)``: the number of template characters consumed
    and the date field they encode, or ``None`` for wildcards and literals.
    """
    window = template[offset:offset + 4]

    if not window:
        raise IndexError(f"offset {offset} is past the end of the template")

    if window.startswith(WILDCARD):
        return 1, None

    if window in YEAR_ATOMS:
        return 4, YEAR

    field = FIELD_ATOMS.get(window[:2])
    if field is not None:
        return 2, field

    return 1, None


@dataclass(frozen=True, slots=True)
class CompiledTemplate:
    """
    Template reduced to its date tokens and the offset of the year token.
    """

    template: str
    tokens: tuple[DateToken, ...]
    year_offset: int

    def match(self, filename: str) -> MatchResult:
        """
        Extract the timestamp and literal prefix from ``filename``.

        Raises MatchError when the filename is shorter than the template,
        a date field is not a digit run, or the fields do not form a valid
        calendar date-time.
        """
        if len(filename) < len(self.template):
            raise MatchError(
                filename,
                MatchFailure.TOO_SHORT,
                f"{len(filename)} characters, template needs {len(self.template)}",
            )

        values: dict[str, int] = {
            MONTH: 1,
            DAY: 1,
            HOUR: 0,
            MINUTE: 0,
            SECOND: 0,
        }

        for token in self.tokens:
            raw = filename[token.offset:token.offset + token.width]
            if not _DIGITS.fullmatch(raw):
                raise MatchError(
                    filename,
                    MatchFailure.NOT_NUMERIC,
                    f"{token.field} {raw!r} at offset {token.offset}",
                )
            values[token.field] = int(raw)

        try:
            timestamp = datetime(**values)
        except ValueError as exc:
            raise MatchError(
                filename,
                MatchFailure.INVALID_DATETIME,
                str(exc),
            ) from exc

        return MatchResult(
            timestamp=timestamp,
            prefix=filename[:self.year_offset],
        )


def compile_template(template: str) -> CompiledTemplate:
    """
    Scan ``template`` once, left to right, and collect its date tokens.

    A field encoded more than once keeps the value of its last token; the
    prefix ends at the first year token.

    Raises ConfigurationError if the template is empty or has no year token.
    """
    if not template:
        raise ConfigurationError("pattern must not be empty")

    tokens: list[DateToken] = []
    year_offset: int | None = None

    offset = 0
    while offset < len(template):
        width, field = classify_token(template, offset)

        if field is not None:
            if field == YEAR and year_offset is None:
                year_offset = offset

            tokens.append(DateToken(field=field, offset=offset, width=width))

        offset += width

    if year_offset is None:
        raise ConfigurationError(
            f"pattern {template!r} has no year token (YYYY)"
        )

    return CompiledTemplate(
        template=template,
        tokens=tuple(tokens),
        year_offset=year_offset,
    )


def match_filename(filename: str, template: str) -> MatchResult:
    """Compile ``template`` and match ``filename`` against it."""
    return compile_template(template).match(filename)
