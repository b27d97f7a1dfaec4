"""TTML to SRT Converter - Main Entry Point.

Usage:
    ttml2srt
    ttml2srt --input-dir subtitles/ --output-dir srt/
    ttml2srt --config config/config.yaml --recursive --check
"""

import argparse
import logging
import sys
from pathlib import Path

import srt
import yaml

from ttml2srt.config import Config, ConversionConfig
from ttml2srt.processing.batch import BatchReport, DirectorySink, DirectorySource, convert_batch
from ttml2srt.util import SRTUtil

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "config.yaml"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Convert a folder of TTML/XML subtitle files to SRT.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to config.yaml (default: {DEFAULT_CONFIG_PATH} if it exists)",
    )
    parser.add_argument("--input-dir", type=Path, default=None, help="Directory with .ttml/.xml files")
    parser.add_argument("--output-dir", type=Path, default=None, help="Directory receiving .srt files")
    parser.add_argument("--recursive", action="store_true", help="Also convert files in subdirectories")
    parser.add_argument("--no-overwrite", action="store_true", help="Keep existing .srt files")
    parser.add_argument("--check", action="store_true", help="Re-read each written .srt file and verify it")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> tuple[Path, Path, ConversionConfig]:
    """Combine command line arguments with the configuration file.

    Command line directories take precedence over the configured paths.

    Returns:
        Tuple of (input_dir, output_dir, conversion_config).

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist.
        KeyError: If a directory is neither given nor configured.
        ValueError: If the configuration is invalid.
    """
    config_path = args.config
    if config_path is None and DEFAULT_CONFIG_PATH.exists():
        config_path = DEFAULT_CONFIG_PATH

    config = Config(config_path) if config_path is not None else None
    if config:
        logger.info(f"Loaded configuration from {config.getConfigPath()}")
    conversion = config.get_conversion_config() if config else ConversionConfig()

    input_dir = args.input_dir or (config.getDataInputDir() if config else None)
    output_dir = args.output_dir or (config.getDataOutputDir() if config else None)
    if input_dir is None or output_dir is None:
        raise KeyError("Input and output directories must be given on the command line or in config.yaml")

    overrides: dict[str, bool] = {}
    if args.recursive:
        overrides["recursive"] = True
    if args.no_overwrite:
        overrides["overwrite"] = False
    if overrides:
        conversion = conversion.model_copy(update=overrides)

    return input_dir, output_dir, conversion


def check_outputs(report: BatchReport, output_dir: Path) -> list[tuple[str, str]]:
    """Re-read written SRT files and verify block count and index sequence.

    Returns:
        List of (filename, problem) tuples, empty if every file checks out.
    """
    problems: list[tuple[str, str]] = []
    for result in report.succeeded:
        try:
            entries = SRTUtil.parse_srt_file(output_dir / result.output_name)
        except (OSError, srt.SRTParseError) as e:
            problems.append((result.output_name, f"unreadable SRT: {e}"))
            continue
        if len(entries) != result.cue_count:
            problems.append((result.output_name, f"expected {result.cue_count} block(s), found {len(entries)}"))
        elif gaps := SRTUtil.find_index_gaps(entries):
            problems.append((result.output_name, f"index out of sequence at block(s) {gaps}"))
    return problems


def print_summary(report: BatchReport, check_problems: list[tuple[str, str]]) -> None:
    """Print processing summary."""
    print("\n" + "=" * 50)
    print("Summary")
    print("=" * 50)
    print(f"Total files: {len(report.results)}")
    print(f"Converted: {len(report.succeeded)}")
    print(f"Failed: {len(report.failed)}")
    print(f"Skipped cues: {report.skipped_cue_count}")

    if report.failed:
        print(f"\nFailed files ({len(report.failed)}):")
        for result in report.failed:
            print(f"  - {result.filename}: {result.error}")

    if check_problems:
        print(f"\nCheck failures ({len(check_problems)}):")
        for filename, problem in check_problems:
            print(f"  - {filename}: {problem}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        0 if all files converted successfully, 1 if any failures.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        input_dir, output_dir, conversion = resolve_settings(args)
    except (FileNotFoundError, KeyError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if not input_dir.is_dir():
        logger.error(f"Input directory not found: {input_dir}")
        return 1

    source = DirectorySource(input_dir, extensions=conversion.extensions, recursive=conversion.recursive)
    sink = DirectorySink(output_dir, overwrite=conversion.overwrite)
    report = convert_batch(source, sink)

    if not report.results:
        logger.warning(f"No {'/'.join(conversion.extensions)} files found in {input_dir}")

    check_problems = check_outputs(report, output_dir) if args.check else []
    print_summary(report, check_problems)

    return 1 if report.failed or check_problems else 0


if __name__ == "__main__":
    sys.exit(main())
