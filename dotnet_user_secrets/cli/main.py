"""CLI entrypoint for dotnet-user-secrets."""
import sys
import argparse
import logging
from pathlib import Path

from .validators import validate_manifest_path

VERSION = "0.1.0"

# Prefix for the top-level error message, per command
ERROR_PREFIXES = {
    "open": "Failed to open user secrets",
    "path": "Failed to resolve user secrets",
}

# Configure logging to stderr
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def cmd_version(args):
    """Show version information."""
    print(f"dotnet-user-secrets {VERSION}")


def cmd_open(args):
    """Find or create the UserSecretsId and open secrets.json."""
    from dotnet_user_secrets.secrets.domains.config_loader import load_config
    from dotnet_user_secrets.secrets.domains.editor import open_in_editor
    from dotnet_user_secrets.secrets.workflows.secret_operations import open_user_secrets

    manifest_path = validate_manifest_path(args.manifest)
    config = load_config()
    launch_editor = config["open_in_editor"] and not args.no_edit

    def opener(secrets_path: Path) -> None:
        print(f"Secrets file: {secrets_path}")
        if launch_editor:
            open_in_editor(secrets_path, config["editor"])

    open_user_secrets(manifest_path, opener=opener)


def cmd_path(args):
    """Print the secrets.json path for a manifest without modifying anything."""
    from dotnet_user_secrets.secrets.workflows.secret_operations import resolve_user_secrets

    manifest_path = validate_manifest_path(args.manifest)
    location = resolve_user_secrets(manifest_path)
    print(location.secrets_path)


def cmd_config_set_path(args):
    """Set config file path preference."""
    from dotnet_user_secrets.secrets.domains.preferences import set_preference

    config_path = Path(args.path).resolve()

    if not config_path.exists():
        print(f"Error: Config file does not exist: {config_path}", file=sys.stderr)
        sys.exit(1)

    if not config_path.is_file():
        print(f"Error: Path is not a file: {config_path}", file=sys.stderr)
        sys.exit(1)

    # Store absolute path in preferences
    set_preference("config_path", str(config_path))
    print(f"Config path set to: {config_path}")


def cmd_config_show(args):
    """Show current config file path."""
    from dotnet_user_secrets.secrets.domains.config_loader import default_config_path
    from dotnet_user_secrets.secrets.domains.preferences import get_preference

    config_path_pref = get_preference("config_path")

    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            print(f"Config path: {config_path}")
        else:
            print(f"Config path (from preference, but file not found): {config_path}")
        print("Source: preference")
    else:
        default_config = default_config_path()
        print(f"Config path: {default_config}")
        if default_config.exists():
            print("Source: default")
        else:
            print("Source: default (file not found, using built-in defaults)")


def cmd_config_clear(args):
    """Clear config path preference."""
    from dotnet_user_secrets.secrets.domains.config_loader import default_config_path
    from dotnet_user_secrets.secrets.domains.preferences import clear_preference

    clear_preference("config_path")
    print(f"Config path preference cleared. Will use default: {default_config_path()}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="user-secrets",
        description="Open (and create if needed) the .NET user secrets file for a project",
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (unreadable or malformed manifest, editor failure, etc.)
  2 - Usage error (invalid arguments, manifest path is not a file, etc.)

Environment variables:
  APPDATA         - Windows secrets root (default: ~/AppData/Roaming)
  VISUAL, EDITOR  - Editor used to open secrets.json

Configuration:
  Default location: ~/.config/dotnet-user-secrets/config.yml
  Custom path: Set with 'user-secrets config set-path <path>'
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress information to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # open command
    open_parser = subparsers.add_parser(
        "open",
        help="Open the project's secrets.json",
        description="""
Open the user secrets file for a project.

Behavior:
  1. Reads <UserSecretsId> from the project file
  2. If missing, derives one from the file name and adds it to the project file
  3. Creates secrets.json with an empty JSON object if it does not exist
  4. Prints the path and opens it in your editor
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    open_parser.add_argument(
        "manifest",
        help="Path to the project file (.csproj, .fsproj, .vbproj)"
    )
    open_parser.add_argument(
        "--no-edit",
        action="store_true",
        help="Only print the secrets.json path, do not launch an editor"
    )

    # path command
    path_parser = subparsers.add_parser(
        "path",
        help="Print the secrets.json path",
        description="Print the secrets.json path for a project. Never modifies any file."
    )
    path_parser.add_argument(
        "manifest",
        help="Path to the project file"
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of dotnet-user-secrets"
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Manage dotnet-user-secrets configuration"
    )
    config_subparsers = config_parser.add_subparsers(dest="config_command")

    config_set_path_parser = config_subparsers.add_parser(
        "set-path",
        help="Set config file path",
        description="""
Set the configuration file path preference.

This stores the absolute path to your config file in:
~/.config/dotnet-user-secrets/preferences.json
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    config_set_path_parser.add_argument(
        "path",
        help="Path to config file"
    )
    config_subparsers.add_parser(
        "show",
        help="Show current config path",
    )
    config_subparsers.add_parser(
        "clear",
        help="Clear config path preference",
    )

    return parser


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (IO, malformed manifest, editor failure, etc.)
        2 - Usage errors (invalid arguments, manifest path is not a file, etc.)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    # If no command provided, show help and exit with usage error code
    if not args.command:
        parser.print_help()
        sys.exit(2)

    # Route to command handlers
    try:
        if args.command == "open":
            cmd_open(args)
        elif args.command == "path":
            cmd_path(args)
        elif args.command == "version":
            cmd_version(args)
        elif args.command == "config":
            if args.config_command == "set-path":
                cmd_config_set_path(args)
            elif args.config_command == "show":
                cmd_config_show(args)
            elif args.config_command == "clear":
                cmd_config_clear(args)
            else:
                print("usage: user-secrets config {set-path,show,clear}", file=sys.stderr)
                sys.exit(2)
        else:
            parser.print_help()
            sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        prefix = ERROR_PREFIXES.get(args.command, "Error")
        print(f"{prefix}: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
