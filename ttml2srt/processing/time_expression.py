"""TTML time expression parsing and SRT timestamp formatting.

TTML allows two families of time expressions:

- clock-time: ``HH:MM:SS``, ``HH:MM:SS.fff`` or ``HH:MM:SS:FF[.sub]`` (frames)
- offset-time: a number followed by a metric, e.g. ``1.5s``, ``250ms``, ``12f``

Frame and tick based values depend on timing parameters declared on the
document root, so a parser is built once per document from those parameters.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal, InvalidOperation

logger = logging.getLogger(__name__)

DEFAULT_FRAME_RATE = Decimal(30)

_CLOCK_TIME = re.compile(r"^(\d+):(\d{2}):(\d{2})(?:[.,](\d+))?$")
_CLOCK_TIME_FRAMES = re.compile(r"^(\d+):(\d{2}):(\d{2}):(\d+)(?:\.(\d+))?$")
_OFFSET_TIME = re.compile(r"^(\d+(?:\.\d+)?)(h|ms|m|s|f|t)$")

_MICROSECONDS_PER_UNIT = {
    "h": Decimal(3_600_000_000),
    "m": Decimal(60_000_000),
    "s": Decimal(1_000_000),
    "ms": Decimal(1_000),
}


def local_name(name: str) -> str:
    """Strip an ElementTree ``{namespace}`` prefix from a tag or attribute name."""
    return name.rsplit("}", 1)[-1]


def _positive_decimal(value: str, name: str) -> Decimal | None:
    try:
        number = Decimal(value.strip())
    except InvalidOperation:
        logger.warning(f"Ignoring invalid ttp:{name} value: {value!r}")
        return None
    if not number.is_finite() or number <= 0:
        logger.warning(f"Ignoring out-of-range ttp:{name} value: {value!r}")
        return None
    return number


@dataclass(frozen=True)
class TimingParameters:
    """Document-level timing parameters used for frame and tick expressions.

    Attributes:
        frame_rate: Effective frames per second (multiplier already applied).
        sub_frame_rate: Sub-frames per frame.
        tick_rate: Ticks per second.
    """

    frame_rate: Decimal = DEFAULT_FRAME_RATE
    sub_frame_rate: Decimal = Decimal(1)
    tick_rate: Decimal = Decimal(1)

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, str]) -> "TimingParameters":
        """Build timing parameters from the attributes of a ``tt`` root element.

        Attribute namespaces are ignored, so both the TTML parameter namespace
        and older TTAF namespaces are recognised.

        Args:
            attributes: Attribute mapping of the root element.

        Returns:
            TimingParameters with TTML defaults for anything not declared.
        """
        values = {local_name(key): value for key, value in attributes.items()}

        declared_rate = _positive_decimal(values["frameRate"], "frameRate") if "frameRate" in values else None
        frame_rate = declared_rate or DEFAULT_FRAME_RATE

        multiplier = values.get("frameRateMultiplier")
        if multiplier is not None:
            parts = multiplier.split()
            if len(parts) == 2 and all(part.isdigit() and int(part) > 0 for part in parts):
                frame_rate = frame_rate * Decimal(parts[0]) / Decimal(parts[1])
            else:
                logger.warning(f"Ignoring invalid ttp:frameRateMultiplier value: {multiplier!r}")

        sub_frame_rate = Decimal(1)
        if "subFrameRate" in values:
            sub_frame_rate = _positive_decimal(values["subFrameRate"], "subFrameRate") or Decimal(1)

        # Without an explicit tick rate, ticks follow the frame grid only when a frame rate is declared
        tick_rate = frame_rate * sub_frame_rate if declared_rate else Decimal(1)
        if "tickRate" in values:
            tick_rate = _positive_decimal(values["tickRate"], "tickRate") or tick_rate

        return cls(frame_rate=frame_rate, sub_frame_rate=sub_frame_rate, tick_rate=tick_rate)


class TimeExpressionParser:
    """Parse TTML time expressions into timedelta values."""

    def __init__(self, timing: TimingParameters | None = None) -> None:
        self.timing = timing or TimingParameters()

    def parse(self, expression: str) -> timedelta:
        """Parse a TTML time expression.

        Uppercase ``T`` and ``Z`` markers are removed before matching, so
        ISO-style values such as ``T00:00:01.000Z`` are accepted.

        Args:
            expression: Raw attribute value, e.g. ``00:00:01.500`` or ``1.5s``.

        Returns:
            The expression as a timedelta, truncated to whole microseconds.

        Raises:
            ValueError: If the expression matches none of the supported forms
                or lies outside the range of timedelta.
        """
        try:
            return self._parse(expression)
        except OverflowError as e:
            raise ValueError(f"Time expression out of range: {expression!r}") from e

    def _parse(self, expression: str) -> timedelta:
        value = expression.strip().replace("T", "").replace("Z", "")

        match = _CLOCK_TIME.match(value)
        if match:
            hours, minutes, seconds, fraction = match.groups()
            return timedelta(
                hours=int(hours),
                minutes=int(minutes),
                seconds=int(seconds),
                microseconds=self._fraction_to_microseconds(fraction),
            )

        match = _CLOCK_TIME_FRAMES.match(value)
        if match:
            hours, minutes, seconds, frames, sub_frames = match.groups()
            frame_count = Decimal(frames)
            if sub_frames:
                frame_count += Decimal(sub_frames) / self.timing.sub_frame_rate
            return timedelta(hours=int(hours), minutes=int(minutes), seconds=int(seconds)) + self._microseconds(
                frame_count / self.timing.frame_rate * 1_000_000
            )

        match = _OFFSET_TIME.match(value)
        if match:
            number, metric = Decimal(match.group(1)), match.group(2)
            if metric == "f":
                return self._microseconds(number / self.timing.frame_rate * 1_000_000)
            if metric == "t":
                return self._microseconds(number / self.timing.tick_rate * 1_000_000)
            return self._microseconds(number * _MICROSECONDS_PER_UNIT[metric])

        raise ValueError(f"Unsupported time expression: {expression!r}")

    @staticmethod
    def _fraction_to_microseconds(fraction: str | None) -> int:
        if not fraction:
            return 0
        # Digits beyond microsecond precision are dropped
        return int(fraction[:6].ljust(6, "0"))

    @staticmethod
    def _microseconds(value: Decimal) -> timedelta:
        return timedelta(microseconds=int(value))


def format_srt_timestamp(td: timedelta) -> str:
    """Convert timedelta to SRT timestamp format.

    Milliseconds are floored and hours are not wrapped at 24.

    Args:
        td: Timedelta object representing the timestamp.

    Returns:
        Timestamp in HH:MM:SS,mmm format.
    """
    total_milliseconds = td // timedelta(milliseconds=1)
    total_seconds, milliseconds = divmod(total_milliseconds, 1000)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{milliseconds:03d}"
