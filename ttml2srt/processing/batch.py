"""Batch conversion of TTML documents.

Documents come from a SourceProvider and results go to a SinkWriter.
Each document is converted independently. A failing document is recorded
in the report and the batch moves on to the next one.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from ttml2srt.errors import CueError, ParseError
from ttml2srt.processing.ttml_converter import TTMLConverter
from ttml2srt.util import FSUtil

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".ttml", ".xml")

_SOURCE_EXTENSION = re.compile(r"\.(ttml|xml)$", re.IGNORECASE)


class SourceProvider(Protocol):
    """Supplies the raw text of source documents."""

    def list_documents(self) -> list[str]:
        """Return the names of all documents to convert, in processing order."""
        ...

    def read_document(self, name: str) -> str:
        """Return the raw text of the named document."""
        ...


class SinkWriter(Protocol):
    """Persists converted documents."""

    def write_document(self, name: str, text: str) -> int:
        """Persist a document and return the number of bytes written."""
        ...


class DirectorySource:
    """Read TTML documents from a directory."""

    def __init__(
        self,
        directory: Path,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        recursive: bool = False,
    ) -> None:
        self.directory = directory
        self.extensions = tuple(extensions)
        self.recursive = recursive

    def list_documents(self) -> list[str]:
        """List matching documents as paths relative to the source directory.

        Raises:
            FileNotFoundError: If the directory does not exist.
            NotADirectoryError: If the path is not a directory.
        """
        files = FSUtil.find_files_by_extensions(self.directory, self.extensions, recursive=self.recursive)
        # Skip macOS resource fork files
        files = [f for f in files if not f.name.startswith("._")]
        return [f.relative_to(self.directory).as_posix() for f in files]

    def read_document(self, name: str) -> str:
        return FSUtil.read_text_file(self.directory / name)


class DirectorySink:
    """Write SRT documents into a directory."""

    def __init__(self, directory: Path, overwrite: bool = True) -> None:
        self.directory = directory
        self.overwrite = overwrite

    def write_document(self, name: str, text: str) -> int:
        """Write a document below the sink directory.

        Raises:
            FileExistsError: If the file exists and overwriting is disabled.
            OSError: If the file cannot be written.
        """
        output_path = self.directory / name
        if not self.overwrite and output_path.exists():
            raise FileExistsError(f"Output file already exists: {output_path}")
        return FSUtil.write_text_file(output_path, text, create_parents=True)


@dataclass(frozen=True)
class FileResult:
    """Conversion outcome for a single document.

    Attributes:
        filename: Source document name.
        output_name: Name of the SRT document.
        bytes_written: Size of the written SRT document, None on failure.
        cue_count: Number of SRT blocks written.
        error: Failure reason, None on success.
        cue_errors: Cues skipped while converting the document.
    """

    filename: str
    output_name: str
    bytes_written: int | None = None
    cue_count: int = 0
    error: str | None = None
    cue_errors: list[CueError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class BatchReport:
    """Aggregated results of a batch conversion."""

    results: list[FileResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[FileResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[FileResult]:
        return [r for r in self.results if not r.success]

    @property
    def skipped_cue_count(self) -> int:
        return sum(len(r.cue_errors) for r in self.results)


def srt_output_name(name: str) -> str:
    """Derive the SRT file name for a source document.

    A trailing ``.ttml`` or ``.xml`` (any case) is replaced with ``.srt``.
    Other names get ``.srt`` appended.
    """
    output_name, count = _SOURCE_EXTENSION.subn(".srt", name)
    return output_name if count else f"{name}.srt"


def convert_file(
    name: str,
    source: SourceProvider,
    sink: SinkWriter,
    converter: TTMLConverter,
) -> FileResult:
    """Convert one document from the source and write it to the sink.

    Read, parse and write failures are returned as a failed FileResult.

    Args:
        name: Document name as listed by the source.
        source: Provider of the document text.
        sink: Destination for the SRT text.
        converter: Converter instance.

    Returns:
        FileResult describing the outcome.
    """
    output_name = srt_output_name(name)
    logger.info(f"Processing: {name}")
    try:
        ttml_text = source.read_document(name)
        result = converter.convert_document(ttml_text)
        bytes_written = sink.write_document(output_name, result.srt_text)
    except ParseError as e:
        logger.error(f"Error converting {name}: {e}")
        return FileResult(filename=name, output_name=output_name, error=str(e))
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.error(f"Error processing {name}: {e}")
        return FileResult(filename=name, output_name=output_name, error=str(e))

    logger.info(f"Saved: {output_name} ({result.cue_count} cue(s))")
    return FileResult(
        filename=name,
        output_name=output_name,
        bytes_written=bytes_written,
        cue_count=result.cue_count,
        cue_errors=result.cue_errors,
    )


def convert_batch(
    source: SourceProvider,
    sink: SinkWriter,
    converter: TTMLConverter | None = None,
) -> BatchReport:
    """Convert every document from the source.

    Args:
        source: Provider of TTML documents.
        sink: Destination for SRT documents.
        converter: Converter instance, a default TTMLConverter if omitted.

    Returns:
        BatchReport with one FileResult per listed document.

    Raises:
        FileNotFoundError: If the source cannot list its documents.
        NotADirectoryError: If a directory source points at a file.
    """
    converter = converter or TTMLConverter()
    names = source.list_documents()
    logger.info(f"Starting conversion of {len(names)} file(s)")

    report = BatchReport()
    for name in names:
        report.results.append(convert_file(name, source, sink, converter))

    logger.info(f"Conversion completed: {len(report.succeeded)} succeeded, {len(report.failed)} failed")
    return report
