"""Conversion of TTML subtitle documents into SRT."""

from ttml2srt.processing.batch import (
    BatchReport,
    DirectorySink,
    DirectorySource,
    FileResult,
    SinkWriter,
    SourceProvider,
    convert_batch,
    srt_output_name,
)
from ttml2srt.processing.ttml_converter import ConversionResult, Cue, TTMLConverter, convert

__all__ = [
    "BatchReport",
    "ConversionResult",
    "Cue",
    "DirectorySink",
    "DirectorySource",
    "FileResult",
    "SinkWriter",
    "SourceProvider",
    "TTMLConverter",
    "convert",
    "convert_batch",
    "srt_output_name",
]
