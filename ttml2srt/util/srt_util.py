"""SRT file parsing utilities for checking converter output."""

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

import srt


@dataclass(frozen=True)
class SRTEntry:
    """Single SRT subtitle entry.

    Attributes:
        index: SRT entry index (1-based).
        start: Start timestamp as timedelta.
        end: End timestamp as timedelta.
        content: Text content of the subtitle.
    """

    index: int
    start: timedelta
    end: timedelta
    content: str


class SRTUtil:
    """Utility class for reading SRT content back into entries."""

    @staticmethod
    def parse_srt_text(content: str) -> list[SRTEntry]:
        """Parse SRT text into a list of entries.

        Args:
            content: SRT formatted text.

        Returns:
            List of SRTEntry objects in file order.

        Raises:
            srt.SRTParseError: If the SRT content is malformed.
        """
        entries: list[SRTEntry] = []
        for sub in srt.parse(content):
            # srt library's start/end are timedelta-compatible but typed as _Timecode
            entries.append(
                SRTEntry(
                    index=sub.index,
                    start=timedelta(seconds=sub.start.total_seconds()),
                    end=timedelta(seconds=sub.end.total_seconds()),
                    content=sub.content,
                )
            )
        return entries

    @staticmethod
    def parse_srt_file(srt_path: Path) -> list[SRTEntry]:
        """Parse an SRT file into a list of entries.

        Raises:
            FileNotFoundError: If the SRT file does not exist.
            srt.SRTParseError: If the SRT file is malformed.
        """
        return SRTUtil.parse_srt_text(srt_path.read_text(encoding="utf-8"))

    @staticmethod
    def find_index_gaps(entries: list[SRTEntry]) -> list[int]:
        """Return the positions whose index differs from the expected ``1..N`` sequence.

        Args:
            entries: Parsed SRT entries.

        Returns:
            1-based positions of out-of-sequence entries. Empty when contiguous.
        """
        return [position for position, entry in enumerate(entries, start=1) if entry.index != position]
