"""
FraudLens Constants.

Defaults and limits shared by the loaders, the statistics engine and the
chart layer. Keeping them here gives configuration validation and the
CLI a single place to look up the accepted ranges.
"""

# ============================================================================
# Reserved Columns
# ============================================================================

# Column holding the binary fraud label (1 = fraud, 0 = legitimate)
DEFAULT_FRAUD_FLAG_COLUMN: str = "fraud_combined"

# Row identifier column, never offered as an analyzable variable
DEFAULT_SESSION_ID_COLUMN: str = "sessionid"


# ============================================================================
# File Processing Constants
# ============================================================================

# Rows per chunk when reading CSV / Parquet files
DEFAULT_CHUNK_SIZE: int = 50_000

MIN_CHUNK_SIZE: int = 1_000

MAX_CHUNK_SIZE: int = 1_000_000

# Supported file formats
SUPPORTED_FILE_FORMATS: list = ["csv", "parquet"]

# File extension to format mapping
FILE_EXTENSION_MAP: dict = {
    ".csv": "csv",
    ".txt": "csv",
    ".tsv": "csv",
    ".parquet": "parquet",
    ".pq": "parquet"
}


# ============================================================================
# Configuration Security Limits
# ============================================================================

# Maximum YAML configuration file size (1MB)
MAX_YAML_FILE_SIZE: int = 1024 * 1024

# Maximum YAML nesting depth
MAX_YAML_NESTING_DEPTH: int = 10

# Maximum number of keys in YAML mapping
MAX_YAML_KEY_COUNT: int = 1_000

# Maximum string length inside a YAML config
MAX_STRING_LENGTH: int = 10_000


# ============================================================================
# Binning Constants
# ============================================================================

# Bin-count range offered by the chart controls
MIN_BIN_COUNT: int = 3
MAX_BIN_COUNT: int = 20
DEFAULT_BIN_COUNT: int = 10

# Headroom above the tallest bar / trend end when sizing the y axis
Y_AXIS_HEADROOM: float = 1.1


# ============================================================================
# Comparison Constants
# ============================================================================

# Shared bin count for the two density histograms
DEFAULT_COMPARE_BINS: int = 30

# Evaluation points for the Gaussian kernel density curve
DEFAULT_KDE_POINTS: int = 100

# Fixed kernel bandwidth (not adaptive)
DEFAULT_KDE_BANDWIDTH: float = 0.1


# ============================================================================
# Outlier Constants
# ============================================================================

# Tukey's fence: outliers are < Q1 - 1.5×IQR or > Q3 + 1.5×IQR
OUTLIER_IQR_MULTIPLIER: float = 1.5


# ============================================================================
# Chart Layout Constants
# ============================================================================

DEFAULT_CHART_WIDTH: int = 800
DEFAULT_CHART_HEIGHT: int = 500
DEFAULT_MARGINS: dict = {"top": 40, "right": 40, "bottom": 60, "left": 60}
DEFAULT_CHART_COLOR: str = "#F68D2E"


# ============================================================================
# Logging Constants
# ============================================================================

LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
