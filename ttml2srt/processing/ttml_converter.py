"""TTML to SRT conversion.

Every ``p`` element in the document is treated as one cue, whatever its
namespace or position in the tree. Cues that cannot be timed are skipped
and reported as CueError instances. Only malformed XML fails a document.
"""

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import timedelta
from xml.etree import ElementTree

import srt

from ttml2srt.errors import CueError, ParseError
from ttml2srt.processing.time_expression import (
    TimeExpressionParser,
    TimingParameters,
    format_srt_timestamp,
    local_name,
)

logger = logging.getLogger(__name__)

_LINE_BREAK_MARKUP = re.compile(r"<br\s*/?>", re.IGNORECASE)


@dataclass(frozen=True)
class Cue:
    """One timed text element as found in the source document.

    Attributes:
        index: 1-based position among the document's cue elements.
        begin_raw: Raw ``begin`` attribute, if present.
        end_raw: Raw ``end`` attribute, if present.
        dur_raw: Raw ``dur`` attribute, if present.
        text: Cue text with line breaks as ``\\n``, trimmed.
    """

    index: int
    begin_raw: str | None
    end_raw: str | None
    dur_raw: str | None
    text: str


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of converting a single document.

    Attributes:
        srt_text: The SRT document, empty when no cue could be emitted.
        cue_count: Number of emitted SRT blocks.
        cue_errors: Cues that were skipped, in document order.
    """

    srt_text: str
    cue_count: int
    cue_errors: list[CueError] = field(default_factory=list)


def parse_document(ttml_text: str) -> ElementTree.Element:
    """Parse TTML text into an element tree.

    Raises:
        ParseError: If the text is not well-formed XML.
    """
    try:
        return ElementTree.fromstring(ttml_text)
    except ElementTree.ParseError as e:
        raise ParseError() from e


def find_cue_elements(root: ElementTree.Element) -> Iterator[ElementTree.Element]:
    """Yield every ``p`` element in document order, ignoring namespaces."""
    for element in root.iter():
        if isinstance(element.tag, str) and local_name(element.tag) == "p":
            yield element


def extract_text(element: ElementTree.Element) -> str:
    """Extract the text of a cue element.

    ``br`` child elements and literal ``<br>`` markup in the text both
    become newlines. Each line is stripped and lines left empty are dropped,
    which also removes source indentation around ``br`` elements.
    """
    parts: list[str] = []
    _collect_text(element, parts)
    text = _LINE_BREAK_MARKUP.sub("\n", "".join(parts))
    lines = (line.strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def _collect_text(element: ElementTree.Element, parts: list[str]) -> None:
    if element.text:
        parts.append(element.text)
    for child in element:
        if isinstance(child.tag, str) and local_name(child.tag).lower() == "br":
            parts.append("\n")
        else:
            _collect_text(child, parts)
        if child.tail:
            parts.append(child.tail)


def read_cue(element: ElementTree.Element, index: int) -> Cue:
    """Read the timing attributes and text of a cue element.

    Empty attribute values are treated as absent.
    """
    return Cue(
        index=index,
        begin_raw=element.get("begin") or None,
        end_raw=element.get("end") or None,
        dur_raw=element.get("dur") or None,
        text=extract_text(element),
    )


class TTMLConverter:
    """Convert TTML documents into SRT text."""

    def convert_document(self, ttml_text: str) -> ConversionResult:
        """Convert a TTML document and report skipped cues.

        Args:
            ttml_text: Raw TTML document text.

        Returns:
            ConversionResult holding the SRT text and any cue errors.

        Raises:
            ParseError: If the document is not well-formed XML.
        """
        root = parse_document(ttml_text)
        time_parser = TimeExpressionParser(TimingParameters.from_attributes(root.attrib))

        subtitles: list[srt.Subtitle] = []
        cue_errors: list[CueError] = []
        for position, element in enumerate(find_cue_elements(root), start=1):
            cue = read_cue(element, position)
            try:
                start, end = self._resolve_times(cue, time_parser)
            except CueError as e:
                logger.warning(f"Skipping {e}")
                cue_errors.append(e)
                continue
            subtitles.append(srt.Subtitle(index=len(subtitles) + 1, start=start, end=end, content=cue.text))

        logger.debug(f"Converted {len(subtitles)} cue(s), skipped {len(cue_errors)}")
        return ConversionResult(
            srt_text=srt.compose(subtitles, reindex=False),
            cue_count=len(subtitles),
            cue_errors=cue_errors,
        )

    def convert(self, ttml_text: str) -> str:
        """Convert a TTML document to SRT text.

        Raises:
            ParseError: If the document is not well-formed XML.
        """
        return self.convert_document(ttml_text).srt_text

    def _resolve_times(self, cue: Cue, time_parser: TimeExpressionParser) -> tuple[timedelta, timedelta]:
        if cue.begin_raw is None:
            raise CueError(cue.index, "missing 'begin' attribute")
        start = self._parse_time(cue, cue.begin_raw, time_parser)

        if cue.end_raw is not None:
            end = self._parse_time(cue, cue.end_raw, time_parser)
        elif cue.dur_raw is not None:
            duration = self._parse_time(cue, cue.dur_raw, time_parser)
            try:
                end = start + duration
            except OverflowError as e:
                raise CueError(cue.index, f"begin + dur is out of range: {cue.begin_raw!r} + {cue.dur_raw!r}") from e
        else:
            raise CueError(cue.index, "no 'end' or 'dur' attribute, end time is unresolvable")

        if end < start:
            raise CueError(
                cue.index,
                f"end {format_srt_timestamp(end)} precedes begin {format_srt_timestamp(start)}",
            )
        return start, end

    @staticmethod
    def _parse_time(cue: Cue, expression: str, time_parser: TimeExpressionParser) -> timedelta:
        try:
            return time_parser.parse(expression)
        except ValueError as e:
            raise CueError(cue.index, str(e)) from e


def convert(ttml_text: str) -> str:
    """Convert a TTML document to SRT text.

    Args:
        ttml_text: Raw TTML document text.

    Returns:
        SRT text, or an empty string if the document has no usable cues.

    Raises:
        ParseError: If the document is not well-formed XML.
    """
    return TTMLConverter().convert(ttml_text)
