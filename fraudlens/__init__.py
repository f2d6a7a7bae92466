"""
FraudLens - fraud-ratio exploration for labeled tabular data.

Load CSV/Parquet transaction files, bin a numeric variable, and compare each
bin's fraud rate with the overall fraud rate. Charts can also compare the
fraud and legitimate populations (Kolmogorov-Smirnov) or flag IQR outliers.
"""

__version__ = "0.1.0"
