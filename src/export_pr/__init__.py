"""Export pull/merge requests from GitHub, GitLab and Bitbucket as CSV."""

# Initialize logging when package is imported
from .utils.logger import LoggerSetup

LoggerSetup.setup_logging()

__version__ = "0.1.0"
