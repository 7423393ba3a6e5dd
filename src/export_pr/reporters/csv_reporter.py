import csv
from typing import Iterable, Sequence, TextIO, Union

from export_pr.utils import get_logger
from export_pr.core.models import ExportRow

logger = get_logger(__name__)


class CSVReporter:
    """Writes export rows as CSV lines, flushing after every block."""

    def __init__(self, stream: TextIO, include_repository: bool = True):
        """
        Initialize CSV reporter.

        Args:
            stream: Text stream to write to (normally stdout)
            include_repository: Whether the Repository column is emitted
        """
        self.stream = stream
        self.include_repository = include_repository
        self.writer = csv.writer(stream)

    def write_header(self) -> None:
        """Write the header line."""
        self._write(ExportRow.header(self.include_repository))

    def write_row(self, row: ExportRow) -> None:
        """Write one export row."""
        self._write(row.as_list(self.include_repository))

    def write_block(self, rows: Iterable[ExportRow]) -> int:
        """
        Write a header followed by rows, then flush.

        Returns:
            Number of data rows written
        """
        self.write_header()
        count = 0
        for row in rows:
            self.write_row(row)
            count += 1
        self.stream.flush()
        logger.debug(f"Wrote {count} rows")
        return count

    def _write(self, values: Sequence[Union[str, int]]) -> None:
        self.writer.writerow(values)
