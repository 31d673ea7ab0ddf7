# Copyright 2026 Canonical Ltd.
# See LICENSE file for licensing details.

"""Date conversion between two configured date patterns.

Patterns use the letter syntax known from SimpleDateFormat, for example
``yyyy-MM-dd`` or ``dd/MM/yyyy HH:mm``. Text between single quotes is copied
verbatim, two single quotes produce a literal quote and any other non-letter
character is a literal.

Supported letters: ``G y M L d D E u a H k K h m s S z Z X``. The week based
letters ``F w W Y`` are rejected. A two digit ``yy`` year is placed in the
window from 80 years before to 20 years after the current date. A letter
repeated in the input pattern is parsed every time and the last value wins.
"""

import calendar
import dataclasses
import datetime
import enum
import functools
import logging
import re
import typing

from .config import is_blank
from .exceptions import InvalidPatternError

logger = logging.getLogger(__name__)

PATTERN_LETTERS = "GyMLdDEuaHkKhmsSzZX"
# Maximum digits of the numeric letters when parsing.
NUMERIC_WIDTHS = {"d": 2, "D": 3, "H": 2, "k": 2, "K": 2, "h": 2, "m": 2, "s": 2}
OFFSET_REGEX = r"Z|[+-]\d{2}(?::?\d{2})?"


class ConversionFailure(enum.Enum):
    """Reasons a value could not be turned into a date attribute.

    Attributes:
        MISSING_CONFIG: a date pattern or the attribute name is not configured.
        MISSING_VALUE: the federated profile has no value.
        UNSUPPORTED_MULTI_VALUE: the federated profile has a list of values.
        PARSE_FAILURE: the value does not match the input pattern.
        INVALID_PATTERN: a configured pattern cannot be compiled.
    """

    MISSING_CONFIG = "missing-config"
    MISSING_VALUE = "missing-value"
    UNSUPPORTED_MULTI_VALUE = "unsupported-multi-value"
    PARSE_FAILURE = "parse-failure"
    INVALID_PATTERN = "invalid-pattern"


@dataclasses.dataclass(frozen=True)
class ConversionResult:
    """Outcome of a date conversion.

    Attributes:
        value: the formatted date, if the conversion succeeded.
        failure: the failure reason, if the conversion failed.
        ok: whether the conversion succeeded.
    """

    value: typing.Optional[str] = None
    failure: typing.Optional[ConversionFailure] = None

    @property
    def ok(self) -> bool:
        """Check if the conversion succeeded.

        Returns:
            True if a formatted value is available.
        """
        return self.failure is None

    @classmethod
    def success(cls, value: str) -> "ConversionResult":
        """Build a successful result.

        Args:
            value: the formatted date.

        Returns:
            The result.
        """
        return cls(value=value)

    @classmethod
    def failed(cls, failure: ConversionFailure) -> "ConversionResult":
        """Build a failed result.

        Args:
            failure: the failure reason.

        Returns:
            The result.
        """
        return cls(failure=failure)


class PatternToken(typing.NamedTuple):
    """A compiled pattern element.

    Attributes:
        letter: pattern letter, empty for literal text.
        count: number of repetitions of the letter.
        literal: literal text, empty for pattern letters.
    """

    letter: str
    count: int
    literal: str


@functools.lru_cache(maxsize=128)
def compile_pattern(pattern: str) -> typing.Tuple[PatternToken, ...]:
    """Split a date pattern into letter runs and literal text.

    Args:
        pattern: the date pattern.

    Returns:
        The pattern tokens.

    Raises:
        InvalidPatternError: if the pattern has an unknown letter or an
            unterminated quote.
    """
    tokens: typing.List[PatternToken] = []
    literal: typing.List[str] = []
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if char == "'":
            if pattern.startswith("''", index):
                literal.append("'")
                index += 2
                continue
            index += 1
            while True:
                if index >= length:
                    raise InvalidPatternError("Unterminated quote", pattern)
                if pattern.startswith("''", index):
                    literal.append("'")
                    index += 2
                elif pattern[index] == "'":
                    index += 1
                    break
                else:
                    literal.append(pattern[index])
                    index += 1
            continue
        if char.isascii() and char.isalpha():
            if char not in PATTERN_LETTERS:
                raise InvalidPatternError(f"Illegal pattern character '{char}'", pattern)
            if literal:
                tokens.append(PatternToken("", 0, "".join(literal)))
                literal = []
            count = 1
            while index + count < length and pattern[index + count] == char:
                count += 1
            tokens.append(PatternToken(char, count, ""))
            index += count
            continue
        literal.append(char)
        index += 1
    if literal:
        tokens.append(PatternToken("", 0, "".join(literal)))
    return tuple(tokens)


def _names_regex(names: typing.Iterable[str]) -> str:
    """Build an alternation of calendar names, longest first.

    Args:
        names: month or weekday names.

    Returns:
        The regex alternation.
    """
    return "|".join(re.escape(name) for name in sorted(names, key=len, reverse=True) if name)


def _token_regex(token: PatternToken) -> str:
    """Build the regex matching a single token of the input pattern.

    Args:
        token: the pattern token.

    Returns:
        The regex, without group.
    """
    letter, count = token.letter, token.count
    if letter == "y":
        return r"\d{2}" if count == 2 else rf"\d{{{min(count, 4)},4}}"
    if letter in "ML":
        if count >= 3:
            return _names_regex([*calendar.month_name, *calendar.month_abbr])
        return r"\d{1,2}"
    if letter == "E":
        return _names_regex([*calendar.day_name, *calendar.day_abbr])
    if letter == "u":
        return "[1-7]"
    if letter == "G":
        return "AD"
    if letter == "a":
        return "AM|PM"
    if letter == "S":
        return r"\d+"
    if letter in "ZX":
        return OFFSET_REGEX
    if letter == "z":
        return "UTC|GMT"
    return rf"\d{{1,{max(count, NUMERIC_WIDTHS[letter])}}}"


@functools.lru_cache(maxsize=128)
def _compile_parser(pattern: str) -> "re.Pattern[str]":
    """Build the regex parsing values of an input pattern.

    Each letter run is captured in a group named after its token position so
    that a letter may appear more than once.

    Args:
        pattern: the input pattern.

    Returns:
        The compiled regex.
    """
    parts = []
    for index, token in enumerate(compile_pattern(pattern)):
        if token.letter:
            parts.append(f"(?P<t{index}>{_token_regex(token)})")
        else:
            parts.append(
                r"\s+".join(re.escape(part) for part in re.split(r"\s+", token.literal))
            )
    return re.compile("".join(parts), re.IGNORECASE)


def expand_two_digit_year(value: int, today: typing.Optional[datetime.date] = None) -> int:
    """Place a two digit year within 80 years before and 20 years after today.

    Args:
        value: the two digit year.
        today: the reference date, defaults to the current date.

    Returns:
        The four digit year.
    """
    start = (today or datetime.date.today()).year - 80
    year = start - start % 100 + value
    if year < start:
        year += 100
    return year


def _parse_offset(text: str) -> datetime.timezone:
    """Parse a UTC offset such as Z, +02, +0200 or +02:00.

    Args:
        text: the offset text.

    Returns:
        The matching timezone.
    """
    if text.upper() == "Z":
        return datetime.timezone.utc
    digits = text[1:].replace(":", "")
    offset = datetime.timedelta(hours=int(digits[:2]), minutes=int(digits[2:] or 0))
    return datetime.timezone(-offset if text[0] == "-" else offset)


def _name_index(text: str, full: typing.Sequence[str], abbr: typing.Sequence[str]) -> int:
    """Find the position of a month or weekday name.

    Args:
        text: the parsed name.
        full: full names.
        abbr: abbreviated names.

    Returns:
        The index of the name in the calendar sequence.

    Raises:
        ValueError: if the name is not a calendar name.
    """
    lowered = text.lower()
    for names in (full, abbr):
        for index, name in enumerate(names):
            if name and name.lower() == lowered:
                return index
    raise ValueError(f"Unknown name {text!r}")


def parse_date(  # pylint: disable=too-many-locals,too-many-branches
    raw_value: str, pattern: str, today: typing.Optional[datetime.date] = None
) -> datetime.datetime:
    """Parse a value strictly against a date pattern.

    Args:
        raw_value: the value to parse.
        pattern: the input pattern.
        today: reference date for two digit years, defaults to the current date.

    Returns:
        The parsed date.

    Raises:
        ValueError: if the value does not match the pattern or is out of range.
        InvalidPatternError: if the pattern cannot be compiled.
    """
    match = _compile_parser(pattern).fullmatch(raw_value)
    if match is None:
        raise ValueError(f"{raw_value!r} does not match pattern {pattern!r}")
    fields = {"year": 1900, "month": 1, "day": 1, "minute": 0, "second": 0}
    hour, hour12, pm = 0, None, None
    day_of_year = None
    milliseconds = 0
    tzinfo: typing.Optional[datetime.tzinfo] = None
    for index, token in enumerate(compile_pattern(pattern)):
        if not token.letter:
            continue
        text = match.group(f"t{index}")
        letter = token.letter
        if letter == "y":
            fields["year"] = (
                expand_two_digit_year(int(text), today) if token.count == 2 else int(text)
            )
        elif letter in "ML":
            fields["month"] = (
                _name_index(text, calendar.month_name, calendar.month_abbr)
                if token.count >= 3
                else int(text)
            )
        elif letter == "d":
            fields["day"] = int(text)
        elif letter == "D":
            day_of_year = int(text)
        elif letter == "H":
            hour, hour12 = int(text), None
        elif letter == "k":
            if not 1 <= int(text) <= 24:
                raise ValueError(f"Hour {text} out of range 1-24")
            hour, hour12 = int(text) % 24, None
        elif letter == "h":
            if not 1 <= int(text) <= 12:
                raise ValueError(f"Hour {text} out of range 1-12")
            hour12 = int(text) % 12
        elif letter == "K":
            if not 0 <= int(text) <= 11:
                raise ValueError(f"Hour {text} out of range 0-11")
            hour12 = int(text)
        elif letter == "a":
            pm = text.upper() == "PM"
        elif letter == "m":
            fields["minute"] = int(text)
        elif letter == "s":
            fields["second"] = int(text)
        elif letter == "S":
            milliseconds = int(text)
        elif letter in "ZX":
            tzinfo = _parse_offset(text)
        elif letter == "z":
            tzinfo = datetime.timezone.utc
        # G and weekdays (E, u) are matched but do not change the date.
    if hour12 is not None:
        hour = hour12 + (12 if pm else 0)
    parsed = datetime.datetime(hour=hour, tzinfo=tzinfo, **fields)
    if day_of_year is not None:
        if not 1 <= day_of_year <= (366 if calendar.isleap(parsed.year) else 365):
            raise ValueError(f"Day of year {day_of_year} out of range")
        parsed = parsed.replace(month=1, day=1) + datetime.timedelta(days=day_of_year - 1)
    return parsed + datetime.timedelta(milliseconds=milliseconds)


def _render_offset(value: datetime.datetime, token: PatternToken) -> str:
    """Render the UTC offset of a date.

    Args:
        value: the date.
        token: a Z or X token.

    Returns:
        The offset, empty for dates without timezone.
    """
    offset = value.utcoffset()
    if offset is None:
        return ""
    if token.letter == "X" and not offset:
        return "Z"
    text = value.strftime("%z")
    if token.letter == "X" and token.count == 1:
        return text[:3]
    if token.letter == "X" and token.count >= 3:
        return f"{text[:3]}:{text[3:5]}"
    return text[:5]


def _render_token(value: datetime.datetime, token: PatternToken) -> str:
    """Render a single token of the output pattern.

    Args:
        value: the parsed date.
        token: the pattern token.

    Returns:
        The rendered text.
    """
    letter, count = token.letter, token.count
    if not letter:
        return token.literal
    if letter == "y":
        if count == 2:
            return f"{value.year % 100:02d}"
        return str(value.year).zfill(count)
    if letter in "ML":
        if count >= 4:
            return value.strftime("%B")
        if count == 3:
            return value.strftime("%b")
        return str(value.month).zfill(count)
    if letter == "E":
        return value.strftime("%A" if count >= 4 else "%a")
    if letter == "G":
        return "AD"
    if letter == "a":
        return "PM" if value.hour >= 12 else "AM"
    if letter in "ZX":
        return _render_offset(value, token)
    if letter == "z":
        return value.tzname() or ""
    numeric = {
        "d": value.day,
        "D": value.timetuple().tm_yday,
        "u": value.isoweekday(),
        "H": value.hour,
        "k": value.hour or 24,
        "K": value.hour % 12,
        "h": value.hour % 12 or 12,
        "m": value.minute,
        "s": value.second,
        "S": value.microsecond // 1000,
    }
    return str(numeric[letter]).zfill(count)


def render(value: datetime.datetime, tokens: typing.Iterable[PatternToken]) -> str:
    """Render a date with a compiled pattern.

    Args:
        value: the date.
        tokens: the pattern tokens.

    Returns:
        The formatted date.
    """
    return "".join(_render_token(value, token) for token in tokens)


def convert(
    raw_value: str, input_pattern: str, output_pattern: str, mapper_name: str = ""
) -> ConversionResult:
    """Reformat a date string from the input pattern to the output pattern.

    The whole value must match the input pattern. Fields missing from the
    input pattern take the datetime defaults (1900-01-01 00:00:00) and no
    timezone conversion is applied.

    Args:
        raw_value: the value to convert.
        input_pattern: pattern the value is parsed with.
        output_pattern: pattern the result is rendered with.
        mapper_name: name of the calling mapper, used in diagnostics.

    Returns:
        The formatted value or the failure reason.
    """
    if is_blank(input_pattern) or is_blank(output_pattern):
        return ConversionResult.failed(ConversionFailure.MISSING_CONFIG)
    try:
        compile_pattern(input_pattern)
        output_tokens = compile_pattern(output_pattern)
    except InvalidPatternError as exc:
        logger.warning(
            "Invalid date pattern %r for mapper %s: %s", exc.pattern, mapper_name, exc.msg
        )
        return ConversionResult.failed(ConversionFailure.INVALID_PATTERN)
    try:
        parsed = parse_date(raw_value, input_pattern)
    except (ValueError, OverflowError):
        logger.warning(
            "Cannot parse date %r with pattern %r for mapper %s",
            raw_value,
            input_pattern,
            mapper_name,
        )
        return ConversionResult.failed(ConversionFailure.PARSE_FAILURE)
    return ConversionResult.success(render(parsed, output_tokens))
