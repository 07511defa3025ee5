"""Stop directory adapters - Implementations of StopDirectoryPort.

Available implementations:
- CSVStopDirectory: StopReference table loaded from a CSV file
"""

from .csv_directory import CSVStopDirectory

__all__ = ["CSVStopDirectory"]
