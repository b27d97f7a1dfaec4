"""Configuration loader for the TTML to SRT converter."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ttml2srt.processing.batch import DEFAULT_EXTENSIONS


class PathsConfig(BaseModel):
    """Configuration for input and output directory paths."""

    data_input_dir: str = Field(..., description="Directory containing .ttml/.xml files", min_length=1)
    data_output_dir: str = Field(..., description="Directory receiving .srt files", min_length=1)

    model_config = ConfigDict(frozen=True, extra="forbid")


class ConversionConfig(BaseModel):
    """Configuration for batch conversion behaviour."""

    extensions: tuple[str, ...] = Field(DEFAULT_EXTENSIONS, description="Source file extensions to convert")
    recursive: bool = Field(False, description="Search subdirectories of the input directory")
    overwrite: bool = Field(True, description="Replace existing .srt files")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("extensions")
    @classmethod
    def _check_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("at least one extension is required")
        if any(not ext.strip(".") for ext in value):
            raise ValueError("extensions must not be empty")
        return value


def _format_validation_error(e: ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors())


class Config:
    """Configuration class that loads and provides access to config.yaml."""

    def __init__(self, config_path: str | Path) -> None:
        """Initialize the Config by loading the YAML file.

        Args:
            config_path: Path to the config.yaml file.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            yaml.YAMLError: If the YAML file is invalid.
            KeyError: If required keys are missing from the config.
            ValueError: If a section is invalid or contains empty paths.
        """
        self.config_path = Path(config_path)
        self._load(self.config_path)

        self._paths = self._validate_paths()
        self._conversion = self._validate_conversion()

    def _load(self, config_path: Path) -> None:
        """Load the configuration from a YAML file.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            yaml.YAMLError: If the YAML file is invalid.
            KeyError: If the file is empty.
            ValueError: If the top level is not a mapping.
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, encoding="utf-8") as f:
            self._data = yaml.safe_load(f)

        # Handle empty or None YAML files
        if self._data is None:
            raise KeyError("Missing required key 'paths' in config file")
        if not isinstance(self._data, dict):
            raise ValueError("Config file must contain a mapping at the top level")

    def _validate_paths(self) -> PathsConfig:
        """Validate paths configuration.

        Raises:
            KeyError: If paths section is missing.
            ValueError: If paths configuration is invalid or contains empty paths.
        """
        if "paths" not in self._data:
            raise KeyError("Missing required key 'paths' in config file")

        try:
            return PathsConfig.model_validate(self._data["paths"])
        except ValidationError as e:
            raise ValueError(f"Paths configuration validation failed: {_format_validation_error(e)}") from e

    def _validate_conversion(self) -> ConversionConfig:
        """Validate the optional conversion section, falling back to defaults."""
        if self._data.get("conversion") is None:
            return ConversionConfig()

        try:
            return ConversionConfig.model_validate(self._data["conversion"])
        except ValidationError as e:
            raise ValueError(f"Conversion configuration validation failed: {_format_validation_error(e)}") from e

    def get_conversion_config(self) -> ConversionConfig:
        """Get batch conversion configuration."""
        return self._conversion

    def getConfigPath(self) -> Path:
        """Get the path to config.yaml."""
        return self.config_path

    def getDataInputDir(self) -> Path:
        """Get the data input directory path.

        Returns:
            Path object pointing to the directory with TTML files (relative or absolute).
        """
        return Path(self._paths.data_input_dir)

    def getDataOutputDir(self) -> Path:
        """Get the data output directory path.

        Returns:
            Path object pointing to the directory receiving SRT files (relative or absolute).
        """
        return Path(self._paths.data_output_dir)
