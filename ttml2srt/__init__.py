"""Convert TTML subtitle files into SRT."""

from ttml2srt.errors import CueError, ParseError
from ttml2srt.processing.ttml_converter import convert

__all__ = ["CueError", "ParseError", "convert"]
