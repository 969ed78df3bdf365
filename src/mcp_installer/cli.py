# CLI interface for mcp-installer
import argparse
import logging
import sys
from pathlib import Path

from mcp_installer import __version__
from mcp_installer.config import load_settings
from mcp_installer.context import OperationContext
from mcp_installer.errors import (
    ApiKeyRequiredError,
    ClientNotSupportedError,
    ConfigInvalidError,
    InputError,
    InstallerError,
)
from mcp_installer.models import ClientType, Operation, Request, ShowResult, Vertical
from mcp_installer.orchestrator import Orchestrator
from mcp_installer.platforms import default_registry

logger = logging.getLogger(__name__)

# ABOUTME: Exit codes
# 0 = success, 1 = operation error, 2 = config/usage error, 3 = fatal
EXIT_SUCCESS = 0
EXIT_OPERATION_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_FATAL = 3

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; WARNING by default, DEBUG with --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def build_request(args: argparse.Namespace) -> Request:
    """Translate parsed arguments into a Request.

    Raises:
        ClientNotSupportedError: If --client names no known tool
    """
    plan_mode: bool | None = None
    if getattr(args, "enable_plan_mode", False):
        plan_mode = True
    elif getattr(args, "disable_plan_mode", False):
        plan_mode = False

    return Request(
        client=ClientType.parse(args.client),
        operation=Operation(args.command),
        vertical=Vertical(args.vertical) if args.vertical else None,
        api_key=getattr(args, "key", None) or "",
        dry_run=getattr(args, "dry_run", False),
        verbose=args.verbose,
        force=getattr(args, "force", False),
        config_path=Path(args.config_path).expanduser() if args.config_path else None,
        plan_mode=plan_mode,
        reuse_api_key=getattr(args, "reuse_key", False),
    )


def cmd_run(args: argparse.Namespace) -> int:
    """Execute install/update/remove/show.

    ABOUTME: Builds the orchestrator from settings and runs one request
    ABOUTME: Maps domain errors to exit codes with actionable messages
    """
    try:
        request = build_request(args)
        settings = load_settings()
        orchestrator = Orchestrator(default_registry(settings), settings)
        result = orchestrator.execute(request, OperationContext(timeout=args.timeout))
    except ApiKeyRequiredError as e:
        print(f"Error: {e}. Provide one with --key", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except (InputError, ConfigInvalidError, ClientNotSupportedError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except InstallerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_OPERATION_ERROR
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        return EXIT_FATAL

    if request.dry_run:
        print("Dry run: no changes made")
    print(result.message)
    if result.backup_path is not None:
        print(f"Backup: {result.backup_path}")
    if isinstance(result, ShowResult) and args.verbose and result.config_path:
        print(f"Config file: {result.config_path}")
    return EXIT_SUCCESS if result.success else EXIT_OPERATION_ERROR


def _add_common_arguments(parser: argparse.ArgumentParser, mutating: bool) -> None:
    parser.add_argument(
        "--client", "-c",
        required=True,
        help=f"Client to target ({', '.join(c.value for c in ClientType)})"
    )
    parser.add_argument(
        "--vertical",
        choices=[v.value for v in Vertical],
        help="Vertical to target"
    )
    parser.add_argument(
        "--config-path",
        help="Custom configuration file path"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Abort the operation after this many seconds"
    )
    if mutating:
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be changed without making changes"
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Proceed even if the client is running"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-installer",
        description="Install the Kirha MCP server into developer tools"
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"mcp-installer v{__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # install command
    install_parser = subparsers.add_parser(
        "install",
        help="Install Kirha MCP server for a client"
    )
    _add_common_arguments(install_parser, mutating=True)
    install_parser.add_argument(
        "--key", "-k",
        help="API key for Kirha MCP server"
    )

    # update command
    update_parser = subparsers.add_parser(
        "update",
        help="Update Kirha MCP server configuration for a client"
    )
    _add_common_arguments(update_parser, mutating=True)
    update_parser.add_argument(
        "--key", "-k",
        help="New API key (optional with --reuse-key)"
    )
    update_parser.add_argument(
        "--reuse-key",
        action="store_true",
        help="Keep the API key stored in the existing registration"
    )
    plan_group = update_parser.add_mutually_exclusive_group()
    plan_group.add_argument(
        "--enable-plan-mode",
        action="store_true",
        help="Enable tool plan mode"
    )
    plan_group.add_argument(
        "--disable-plan-mode",
        action="store_true",
        help="Disable tool plan mode"
    )

    # remove command
    remove_parser = subparsers.add_parser(
        "remove",
        help="Remove Kirha MCP server from a client"
    )
    _add_common_arguments(remove_parser, mutating=True)

    # show command
    show_parser = subparsers.add_parser(
        "show",
        help="Display current MCP server configuration for a client"
    )
    _add_common_arguments(show_parser, mutating=False)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    ABOUTME: Parses args and dispatches to appropriate command
    ABOUTME: Returns exit code for sys.exit()
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        # No command specified, show help
        parser.print_help()
        return EXIT_SUCCESS

    configure_logging(args.verbose)
    return cmd_run(args)


if __name__ == "__main__":
    sys.exit(main())
