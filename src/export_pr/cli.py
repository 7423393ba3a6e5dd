"""
Command-line interface for export-pr.
"""
import locale
import sys

import click
from rich.console import Console
from rich.markup import escape

from export_pr import __version__
from export_pr.config import get_settings, reload_settings
from export_pr.core import (
    PRState,
    RunConfig,
    UserFilter,
    ExportPRError,
    ConfigurationError,
    parse_repositories,
)
from export_pr.core.engine import ExportEngine
from export_pr.adapters import AdapterFactory
from export_pr.utils import get_logger, enable_debug, LoggerSetup

# Standard output is reserved for CSV
console = Console(stderr=True)
logger = get_logger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def _print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print tool and client library versions, then exit."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"export-pr {__version__}")
    for library, version in AdapterFactory.library_versions().items():
        click.echo(f"{library} {version or 'unknown'}")
    ctx.exit()


def _use_user_locale() -> None:
    """Format dates in the user's locale, as %x/%X expect."""
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        logger.debug(f"Keeping C locale for dates: {e}")


def _use_csv_newlines(stream) -> None:
    """Stop the stream translating the \\r\\n line endings csv writes."""
    reconfigure = getattr(stream, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(newline="")


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument("repositories", nargs=-1, required=True)
@click.option(
    "--creator", "-c",
    default="",
    metavar="LIST",
    help="Comma-separated authors to include; prefix with ! to exclude",
)
@click.option(
    "--provider", "-p",
    default=None,
    metavar="NAME",
    help="github, gitlab or bitbucket (default: $EPR_SERVICE or github)",
)
@click.option(
    "--state", "-s",
    type=click.Choice([s.value for s in PRState]),
    default=PRState.OPEN.value,
    show_default=True,
    help="Pull request state",
)
@click.option(
    "--token", "-t",
    default=None,
    help="API token (default: $EPR_TOKEN, then the settings file)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to YAML settings file",
)
@click.option("--debug", is_flag=True, help="Enable debug logging on stderr")
@click.option(
    "--version", "-v",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show version information and exit",
)
def main(repositories, creator, provider, state, token, config_path, debug):
    """Export pull requests of REPOSITORIES (owner/repo) as CSV.

    Examples:
        export-pr pallets/click
        export-pr -s all -c '!dependabot[bot]' owner/repo1 owner/repo2
        export-pr -p gitlab -s merged gitlab-org/gitlab
    """
    try:
        repos = parse_repositories(repositories)

        if config_path:
            reload_settings(config_path)
            LoggerSetup.reconfigure()
        if debug:
            enable_debug()

        settings = get_settings()
        platform = AdapterFactory.resolve_platform(provider or settings.app.provider)
        settings.app.provider = platform.value

        errors = settings.validate()
        if errors:
            raise ConfigurationError("Invalid settings: " + "; ".join(errors))

        run_config = RunConfig(
            provider=platform,
            state=PRState(state),
            token=settings.resolve_token(platform.value, token),
            user_filter=UserFilter.parse(creator),
            repositories=tuple(repos),
        )

        _use_user_locale()
        _use_csv_newlines(sys.stdout)

        engine = ExportEngine(run_config)
        engine.run()

    except ExportPRError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}", soft_wrap=True)
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}", soft_wrap=True)
        logger.exception("Export failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
