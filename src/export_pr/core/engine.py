"""
Export Engine - Orchestrates fetching and writing pull requests.
"""
import sys
from typing import Optional, TextIO

from export_pr.utils import get_logger
from export_pr.adapters import AdapterFactory, BaseAdapter
from export_pr.reporters import CSVReporter
from .models import RunConfig


logger = get_logger(__name__)


class ExportEngine:
    """
    Main engine for exporting pull requests.

    The engine walks the requested repositories in order, fetches each
    one through a single adapter and streams the rows to a CSV reporter.
    """

    def __init__(
        self,
        config: RunConfig,
        adapter: Optional[BaseAdapter] = None,
        stream: Optional[TextIO] = None
    ):
        """
        Initialize the export engine.

        Args:
            config: Resolved run configuration
            adapter: Adapter to fetch with; created from the config when omitted
            stream: Output stream, stdout by default
        """
        self.config = config
        self.adapter = adapter or AdapterFactory.create_adapter(
            config.provider,
            token=config.token,
            user_filter=config.user_filter,
        )
        self.reporter = CSVReporter(
            stream if stream is not None else sys.stdout,
            include_repository=config.include_repository,
        )

        logger.debug(f"ExportEngine initialized with {self.adapter!r}")

    def run(self) -> int:
        """
        Export every repository of the run.

        Each repository's block (header and rows) is written and flushed
        before the next repository is fetched, so a later failure leaves
        earlier output in place.

        Returns:
            Total number of data rows written

        Raises:
            ExportPRError: On the first fetch or data error
        """
        total = 0
        for repo in self.config.repositories:
            rows = self.adapter.fetch(repo, self.config.state)
            total += self.reporter.write_block(rows)

        logger.info(
            f"Export complete - {len(self.config.repositories)} repositories, "
            f"{total} rows"
        )
        return total
