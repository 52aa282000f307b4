"""Chat log line parser: frozen dataclass + fixed positional split."""

import re
from dataclasses import dataclass
from datetime import datetime

from chatlog_translator.errors import InvalidTimestampError, MalformedLineError

FIELD_SEPARATOR = "|"
MIN_FIELDS = 5

# 2022-10-22T20:13:42.0000000+09:00 (7 fractional digits, explicit offset)
TIMESTAMP_PATTERN = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})\.(\d{7})([+-]\d{2}:\d{2})$"
)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


@dataclass(frozen=True)
class LogEvent:
    timestamp: datetime
    category_code: str
    actor_name: str
    content: str
    raw: str = ""


def parse_timestamp(value: str) -> datetime:
    """Parse a ``YYYY-MM-DDThh:mm:ss.fffffff±hh:mm`` timestamp.

    datetime only carries microseconds, so the seventh fractional digit
    (100ns) is truncated.
    """
    match = TIMESTAMP_PATTERN.match(value)
    if not match:
        raise InvalidTimestampError(f"Invalid timestamp: {value!r}", value)

    base, fraction, offset = match.groups()
    try:
        parsed = datetime.strptime(base + offset, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise InvalidTimestampError(f"Invalid timestamp: {value!r} ({e})", value) from e
    return parsed.replace(microsecond=int(fraction[:6]))


def parse_line(line: str) -> LogEvent:
    """Parse one raw line into a LogEvent.

    Expected format:
        00|2022-10-22T20:13:42.0000000+09:00|003D|Name|Content|c83d39a60fdda387

    Raises MalformedLineError when fewer than five fields are present and
    InvalidTimestampError when the timestamp field is not in the log format.
    """
    stripped = line.rstrip("\r\n")
    parts = stripped.split(FIELD_SEPARATOR)
    if len(parts) < MIN_FIELDS:
        raise MalformedLineError(
            f"Expected at least {MIN_FIELDS} fields, got {len(parts)}", stripped
        )

    try:
        timestamp = parse_timestamp(parts[1])
    except InvalidTimestampError as e:
        e.line = stripped
        raise

    return LogEvent(
        timestamp=timestamp,
        category_code=parts[2],
        actor_name=parts[3],
        content=parts[4],
        raw=stripped,
    )
