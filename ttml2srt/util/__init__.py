"""File system and SRT helpers."""

from ttml2srt.util.fs_util import FSUtil
from ttml2srt.util.srt_util import SRTEntry, SRTUtil

__all__ = ["FSUtil", "SRTEntry", "SRTUtil"]
