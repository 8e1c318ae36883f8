"""
CLI App - Main entry point for the gh2jira command line tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from ..adapters import EnvironmentConfigProvider, GitHubAdapter, JiraAdapter
from ..application import StateStore, SyncOrchestrator
from ..core.domain.events import DomainEvent, EventBus
from ..core.exceptions import ConfigurationError, Gh2JiraError, TrackerError
from ..core.ports.clock import Clock, SystemClock
from ..core.ports.issue_tracker import IssueTrackerPort
from ..core.ports.source_tracker import SourceTrackerPort
from .exit_codes import ExitCode
from .output import Console


logger = logging.getLogger("gh2jira")
audit_logger = logging.getLogger("Events")


def create_parser() -> argparse.ArgumentParser:
    """
    Create the command-line argument parser for gh2jira.

    Every setting except --config, --verbose and --no-color can also come
    from the config file, a .env file or the environment; flags win.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="gh2jira",
        description="Mirror GitHub issues and their comments into a Jira project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview what would change (dry run, the default)
  gh2jira -r owner/repo -U https://company.atlassian.net -P PROJ

  # Apply the changes once
  gh2jira -r owner/repo -U https://company.atlassian.net -P PROJ --confirm --period 0

  # Keep syncing every 30 minutes
  gh2jira --config config-gh2jira.json --confirm --period 30m

Environment Variables:
  GITHUB_TOKEN     GitHub personal access token
  JIRA_URL         Jira instance URL (e.g., https://company.atlassian.net)
  JIRA_USER        Jira user name or email
  JIRA_API_TOKEN   Jira API token
  GH2JIRA_*        Any other setting, e.g. GH2JIRA_REPO_NAME
        """
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to JSON config file (default: ./config-gh2jira.json if present)"
    )

    # Connection settings
    parser.add_argument(
        "--github-token", "-t",
        dest="github_token",
        help="GitHub personal access token"
    )
    parser.add_argument(
        "--jira-user", "-u",
        dest="jira_user",
        help="Jira user name or email"
    )
    parser.add_argument(
        "--jira-token", "-p",
        dest="jira_api_token",
        help="Jira API token or password"
    )
    parser.add_argument(
        "--repo-name", "-r",
        dest="repo_name",
        help="GitHub repository, as owner/repo"
    )
    parser.add_argument(
        "--jira-url", "-U",
        dest="jira_url",
        help="Jira instance URL"
    )
    parser.add_argument(
        "--jira-project", "-P",
        dest="jira_project",
        help="Key of the Jira project to mirror into"
    )

    # Sync behaviour
    parser.add_argument(
        "--since", "-s",
        help="Only sync issues updated after this time (e.g., 2019-04-17T00:00:00+0000)"
    )
    parser.add_argument(
        "--confirm", "-c",
        action="store_true",
        default=None,
        help="Apply changes to Jira (default is a dry run that only logs them)"
    )
    parser.add_argument(
        "--timeout", "-T",
        help="How long to keep retrying a failing request (seconds or e.g. 30s; default 30s)"
    )
    parser.add_argument(
        "--period",
        help="Time between passes (seconds or e.g. 1h; default 1h, 0 for a single pass)"
    )

    # Output
    parser.add_argument(
        "--log-level",
        dest="log_level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging"
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output"
    )

    return parser


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def log_event(event: DomainEvent) -> None:
    """Record every tracker write and pass boundary at DEBUG level."""
    audit_logger.debug(f"{event.event_type}: {event}")


def run_sync(
    args: argparse.Namespace,
    console: Console,
    clock: Optional[Clock] = None,
    source: Optional[SourceTrackerPort] = None,
    tracker: Optional[IssueTrackerPort] = None,
) -> int:
    """
    Run the sync, once or forever depending on the configured period.

    Args:
        args: Parsed command-line arguments.
        console: Console for user-facing output.
        clock: Clock for timestamps and the pause between passes.
        source: GitHub adapter override, mainly for tests.
        tracker: Jira adapter override, mainly for tests.

    Returns:
        Exit code.
    """
    clock = clock or SystemClock()

    # Load configuration
    config_file = Path(args.config) if getattr(args, "config", None) else None
    try:
        config_provider = EnvironmentConfigProvider(
            config_file=config_file,
            cli_overrides=vars(args),
        )
    except ConfigurationError as e:
        console.error(str(e))
        return ExitCode.CONFIG_ERROR

    errors = config_provider.validate()
    if errors:
        console.config_errors(errors)
        return ExitCode.CONFIG_ERROR

    try:
        config = config_provider.load()
    except ConfigurationError as e:
        console.error(str(e))
        return ExitCode.CONFIG_ERROR

    log_level = logging.DEBUG if args.verbose else getattr(logging, config.sync.log_level, logging.INFO)
    setup_logging(level=log_level)

    console.header(config.github.repo_name, config.jira.project_key)
    if config.sync.dry_run:
        console.dry_run_banner()

    # Resume from the last confirmed pass unless told otherwise
    state = StateStore(config.sync.state_file, clock)
    if args.since is None:
        saved = state.load()
        if saved is not None:
            config.sync.since = saved
            logger.info(f"Resuming from saved cutoff {saved.isoformat()}")

    if source is None:
        source = GitHubAdapter(config.github, timeout=config.sync.timeout, clock=clock)
    if tracker is None:
        jira = JiraAdapter(
            config.jira,
            dry_run=config.sync.dry_run,
            timeout=config.sync.timeout,
            clock=clock,
        )
        try:
            jira.validate()
        except ConfigurationError as e:
            console.error(str(e))
            return ExitCode.CONFIG_ERROR
        except TrackerError as e:
            console.error(f"Could not connect to Jira at {config.jira.url}: {e}")
            return ExitCode.SYNC_ERROR
        tracker = jira

    event_bus = EventBus()
    event_bus.subscribe(DomainEvent, log_event)

    orchestrator = SyncOrchestrator(
        source=source,
        tracker=tracker,
        config=config,
        clock=clock,
        event_bus=event_bus,
    )

    exit_code = ExitCode.SUCCESS
    pass_number = 0
    while True:
        started = clock.now()
        pass_number += 1
        console.pass_started(pass_number, config.sync.since)
        try:
            result = orchestrator.run_pass()
            console.sync_result(result)
            exit_code = ExitCode.SUCCESS if result.success else ExitCode.SYNC_ERROR

            if not config.sync.dry_run:
                config.sync.since = state.save(started)
        except Gh2JiraError as e:
            logger.error(f"Sync pass failed: {e}")
            console.error(f"Sync pass failed: {e}")
            exit_code = ExitCode.SYNC_ERROR

        if not config.sync.is_daemon:
            return exit_code

        logger.info(f"Next pass in {config.sync.period:g}s")
        clock.sleep(config.sync.period)


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the gh2jira CLI.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    console = Console(
        color=not args.no_color,
        verbose=args.verbose,
    )

    try:
        return run_sync(args, console)
    except KeyboardInterrupt:
        console.print()
        console.warning("Interrupted by user")
        return ExitCode.SIGINT


def run() -> None:
    """
    Entry point for the console script.

    Calls main() and exits with its return code.
    """
    sys.exit(main())


if __name__ == "__main__":
    run()
