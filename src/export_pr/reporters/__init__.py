from .csv_reporter import CSVReporter

__all__ = [
    "CSVReporter",
]
