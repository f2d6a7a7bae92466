"""Configuration parsing and validation."""

import os
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from fraudlens.core.exceptions import (
    ConfigError,
    YAMLSizeError,
    ConfigValidationError
)
from fraudlens.core.constants import (
    MAX_YAML_FILE_SIZE,
    MAX_YAML_NESTING_DEPTH,
    MAX_YAML_KEY_COUNT,
    MAX_STRING_LENGTH,
    DEFAULT_CHUNK_SIZE,
    MIN_CHUNK_SIZE,
    MAX_CHUNK_SIZE,
    DEFAULT_FRAUD_FLAG_COLUMN,
    DEFAULT_SESSION_ID_COLUMN,
    DEFAULT_BIN_COUNT,
    MIN_BIN_COUNT,
    MAX_BIN_COUNT,
    DEFAULT_CHART_WIDTH,
    DEFAULT_CHART_HEIGHT,
    DEFAULT_MARGINS,
    DEFAULT_CHART_COLOR,
    DEFAULT_COMPARE_BINS,
    DEFAULT_KDE_POINTS,
    DEFAULT_KDE_BANDWIDTH,
    OUTLIER_IQR_MULTIPLIER,
)

logger = logging.getLogger(__name__)


# Alias kept for callers that think in terms of structure errors
YAMLStructureError = ConfigValidationError


@dataclass
class AnalysisConfig:
    """
    Options recognized by FraudLens.

    Attributes:
        fraud_flag_column: Column holding the 0/1 fraud label
        session_id_column: Row identifier column, excluded from variables
        default_bin_count: Bin count for new charts (3-20)
        chart_width: Chart width in pixels, consumed by the rendering layer
        chart_height: Chart height in pixels, consumed by the rendering layer
        margins: top/right/bottom/left margins in pixels
        default_color: Initial series color for new charts
        compare_bins: Shared bin count for comparison density histograms
        kde_points: Grid size for the kernel density curve
        kde_bandwidth: Fixed Gaussian kernel bandwidth
        iqr_multiplier: Fence width for outlier detection
        chunk_size: Rows per chunk when loading files
    """
    fraud_flag_column: str = DEFAULT_FRAUD_FLAG_COLUMN
    session_id_column: str = DEFAULT_SESSION_ID_COLUMN
    default_bin_count: int = DEFAULT_BIN_COUNT
    chart_width: int = DEFAULT_CHART_WIDTH
    chart_height: int = DEFAULT_CHART_HEIGHT
    margins: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_MARGINS))
    default_color: str = DEFAULT_CHART_COLOR
    compare_bins: int = DEFAULT_COMPARE_BINS
    kde_points: int = DEFAULT_KDE_POINTS
    kde_bandwidth: float = DEFAULT_KDE_BANDWIDTH
    iqr_multiplier: float = OUTLIER_IQR_MULTIPLIER
    chunk_size: int = DEFAULT_CHUNK_SIZE

    # Security limits for YAML files, imported from constants module
    MAX_YAML_FILE_SIZE = MAX_YAML_FILE_SIZE
    MAX_YAML_NESTING_DEPTH = MAX_YAML_NESTING_DEPTH
    MAX_YAML_KEYS = MAX_YAML_KEY_COUNT

    def __post_init__(self):
        self.validate()

    @property
    def reserved_columns(self) -> List[str]:
        """Columns that are never analyzable variables."""
        return [self.fraud_flag_column, self.session_id_column]

    @property
    def inner_width(self) -> int:
        """Plot area width after margins."""
        return self.chart_width - self.margins["left"] - self.margins["right"]

    @property
    def inner_height(self) -> int:
        """Plot area height after margins."""
        return self.chart_height - self.margins["top"] - self.margins["bottom"]

    def validate(self) -> None:
        """
        Check every option against its accepted range.

        Raises:
            ConfigValidationError: If any option is invalid
        """
        for name in ("fraud_flag_column", "session_id_column"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigValidationError(
                    f"{name} must be a non-empty string",
                    field=name, expected="column name", actual=repr(value)
                )
        if self.fraud_flag_column == self.session_id_column:
            raise ConfigValidationError(
                "fraud_flag_column and session_id_column must differ",
                field="session_id_column",
                actual=self.session_id_column
            )

        if not _is_int(self.default_bin_count) or not MIN_BIN_COUNT <= self.default_bin_count <= MAX_BIN_COUNT:
            raise ConfigValidationError(
                f"default_bin_count must be an integer between {MIN_BIN_COUNT} and {MAX_BIN_COUNT}",
                field="default_bin_count",
                expected=f"{MIN_BIN_COUNT}-{MAX_BIN_COUNT}",
                actual=str(self.default_bin_count)
            )

        for name in ("chart_width", "chart_height", "compare_bins", "kde_points"):
            value = getattr(self, name)
            if not _is_int(value) or value <= 0:
                raise ConfigValidationError(
                    f"{name} must be a positive integer",
                    field=name, expected="> 0", actual=str(value)
                )

        if not isinstance(self.margins, dict):
            raise ConfigValidationError("margins must be a mapping", field="margins")
        missing = [side for side in DEFAULT_MARGINS if side not in self.margins]
        if missing:
            raise ConfigValidationError(
                f"margins missing side(s): {', '.join(missing)}",
                field="margins",
                expected="top, right, bottom, left"
            )
        for side, value in self.margins.items():
            if not _is_int(value) or value < 0:
                raise ConfigValidationError(
                    f"margin '{side}' must be a non-negative integer",
                    field=f"margins.{side}", actual=str(value)
                )
        if self.inner_width <= 0 or self.inner_height <= 0:
            raise ConfigValidationError(
                "Margins leave no room for the plot area",
                field="margins",
                actual=f"{self.inner_width}x{self.inner_height}"
            )

        for name in ("kde_bandwidth", "iqr_multiplier"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigValidationError(
                    f"{name} must be a positive number",
                    field=name, expected="> 0", actual=str(value)
                )

        if not _is_int(self.chunk_size) or not MIN_CHUNK_SIZE <= self.chunk_size <= MAX_CHUNK_SIZE:
            raise ConfigValidationError(
                f"chunk_size must be between {MIN_CHUNK_SIZE:,} and {MAX_CHUNK_SIZE:,}",
                field="chunk_size",
                expected=f"{MIN_CHUNK_SIZE}-{MAX_CHUNK_SIZE}",
                actual=str(self.chunk_size)
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]) -> "AnalysisConfig":
        """
        Build configuration from a dictionary.

        Options may sit at the root or under an ``analysis`` key.
        Unknown keys are logged and ignored.

        Args:
            config_dict: Parsed configuration (None gives all defaults)

        Returns:
            AnalysisConfig instance

        Raises:
            ConfigError: If the structure is not a mapping
            ConfigValidationError: If an option is invalid
        """
        if config_dict is None:
            return cls()
        if not isinstance(config_dict, dict):
            raise ConfigError("Configuration must be a mapping of option names to values")

        options = config_dict.get("analysis", config_dict)
        if not isinstance(options, dict):
            raise ConfigError("'analysis' section must be a mapping", field="analysis")

        known = set(cls.__dataclass_fields__)
        kwargs = {}
        for key, value in options.items():
            if key in known:
                kwargs[key] = value
            else:
                logger.warning(f"Ignoring unknown configuration option: {key}")

        if "margins" in kwargs and isinstance(kwargs["margins"], dict):
            # Partial margins override the defaults side by side
            kwargs["margins"] = {**DEFAULT_MARGINS, **kwargs["margins"]}

        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, config_path: str) -> "AnalysisConfig":
        """
        Load configuration from a YAML file with size and structure limits.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            AnalysisConfig instance

        Raises:
            ConfigError: If file not found or invalid
            YAMLSizeError: If file exceeds size limit
            YAMLStructureError: If YAML structure is too complex
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        file_size = os.path.getsize(config_file)
        if file_size > cls.MAX_YAML_FILE_SIZE:
            raise YAMLSizeError(
                f"Configuration file too large: {file_size:,} bytes. "
                f"Maximum allowed: {cls.MAX_YAML_FILE_SIZE:,} bytes",
                file_size=file_size,
                max_size=cls.MAX_YAML_FILE_SIZE
            )

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML file: {str(e)}")
        except UnicodeDecodeError as e:
            raise ConfigError(f"Invalid file encoding (expected UTF-8): {str(e)}")

        if config_dict is not None:
            cls._validate_yaml_structure(config_dict)

        logger.debug(f"Loaded configuration from {config_path}")
        return cls.from_dict(config_dict)

    @classmethod
    def _validate_yaml_structure(cls, obj: Any, current_depth: int = 0, total_keys: List[int] = None) -> None:
        """
        Reject YAML documents that are too deep, too wide or hold huge strings.

        Args:
            obj: Object to validate (dict, list, or primitive)
            current_depth: Current nesting depth
            total_keys: Mutable list with single element tracking total key count

        Raises:
            YAMLStructureError: If structure is too complex
        """
        if total_keys is None:
            total_keys = [0]

        if current_depth > cls.MAX_YAML_NESTING_DEPTH:
            raise YAMLStructureError(
                f"YAML nesting depth exceeds maximum of {cls.MAX_YAML_NESTING_DEPTH} levels."
            )

        if isinstance(obj, dict):
            total_keys[0] += len(obj)
            if total_keys[0] > cls.MAX_YAML_KEYS:
                raise YAMLStructureError(
                    f"YAML structure contains more than {cls.MAX_YAML_KEYS:,} keys/items."
                )
            for value in obj.values():
                cls._validate_yaml_structure(value, current_depth + 1, total_keys)

        elif isinstance(obj, list):
            total_keys[0] += len(obj)
            if total_keys[0] > cls.MAX_YAML_KEYS:
                raise YAMLStructureError(
                    f"YAML structure contains more than {cls.MAX_YAML_KEYS:,} keys/items."
                )
            for item in obj:
                cls._validate_yaml_structure(item, current_depth + 1, total_keys)

        elif isinstance(obj, str):
            if len(obj) > MAX_STRING_LENGTH:
                raise YAMLStructureError(
                    f"YAML contains string exceeding maximum length ({MAX_STRING_LENGTH:,}): '{obj[:50]}...'"
                )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


SAMPLE_CONFIG_YAML = """\
# FraudLens analysis configuration
analysis:
  # Reserved columns
  fraud_flag_column: fraud_combined
  session_id_column: sessionid

  # Bin count for new charts (3-20)
  default_bin_count: 10

  # Chart layout, used by the rendering layer
  chart_width: 800
  chart_height: 500
  margins:
    top: 40
    right: 40
    bottom: 60
    left: 60
  default_color: "#F68D2E"

  # Comparison and outlier settings
  compare_bins: 30
  kde_points: 100
  kde_bandwidth: 0.1
  iqr_multiplier: 1.5

  # Rows per chunk when loading files
  chunk_size: 50000
"""
