"""File system utility functions for common operations."""

from collections.abc import Iterable
from pathlib import Path


class FSUtil:
    """Utility class for file system operations."""

    @staticmethod
    def find_files_by_extensions(
        directory: Path,
        extensions: Iterable[str],
        recursive: bool,
    ) -> list[Path]:
        """Find files matching any of the given extensions in a directory.

        Args:
            directory: Directory to search in.
            extensions: File extensions to search for (e.g., ".ttml", "xml").
                Can include or exclude the leading dot. Matching ignores case.
            recursive: If True, search recursively in subdirectories.
                If False, only search in the immediate directory.

        Returns:
            List of Path objects matching the extensions, sorted.

        Raises:
            FileNotFoundError: If the directory does not exist.
            NotADirectoryError: If the path is not a directory.
        """
        if not directory.exists():
            raise FileNotFoundError(f"Directory not found: {directory}")
        if not directory.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {directory}")

        # Normalize extensions (ensure they start with a dot)
        suffixes = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions}

        candidates = directory.rglob("*") if recursive else directory.glob("*")

        # Filter to only files (exclude directories that might match)
        files = [f for f in candidates if f.is_file() and f.suffix.lower() in suffixes]

        return sorted(files)

    @staticmethod
    def read_text_file(file_path: Path) -> str:
        """Read UTF-8 encoded text file.

        A leading byte order mark is removed.

        Args:
            file_path: Path to the text file.

        Returns:
            File contents as a string.

        Raises:
            FileNotFoundError: If the file does not exist.
            UnicodeDecodeError: If the file cannot be decoded as UTF-8.
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        if not file_path.is_file():
            raise ValueError(f"Path is not a file: {file_path}")

        return file_path.read_text(encoding="utf-8-sig")

    @staticmethod
    def write_text_file(file_path: Path, content: str, create_parents: bool) -> int:
        """Write UTF-8 encoded text file.

        Args:
            file_path: Path where the file should be written.
            content: Content to write to the file.
            create_parents: If True, create parent directories if they don't exist.

        Returns:
            Number of bytes written.

        Raises:
            OSError: If the file cannot be written.
        """
        if create_parents:
            file_path.parent.mkdir(parents=True, exist_ok=True)

        data = content.encode("utf-8")
        file_path.write_bytes(data)
        return len(data)
