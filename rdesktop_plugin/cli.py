"""
Command line interface for the rdesktop plugin.

Useful outside a GUI host: inspect the command line a profile produces,
launch a detached session, or dump the settings schema.
"""

import argparse
import json
import shlex
import sys
from typing import List, Optional

from .arguments import build_arguments, redact_arguments
from .config import PluginConfig
from .exceptions import RdesktopPluginException
from .headless import HeadlessPluginService, HeadlessWidget
from .logging import setup_logging
from .plugin import RdesktopPlugin
from .profile import ConnectionProfile
from .settings import schema_to_dict


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rdesktop-plugin",
        description="rdesktop protocol plugin tools"
    )
    parser.add_argument("--config", help="Plugin configuration file (YAML)")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Override the configured log level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    args_parser = subparsers.add_parser("args", help="Print the rdesktop command line for a profile")
    args_parser.add_argument("profile", help="Connection profile (YAML)")
    args_parser.add_argument("--socket-id", type=int, help="Embedding surface id passed as -X")
    args_parser.add_argument("--show-password", action="store_true", help="Do not mask the password")
    args_parser.add_argument("--defaults", action="store_true", help="Seed unset options with the schema defaults")

    launch_parser = subparsers.add_parser("launch", help="Launch a detached rdesktop session")
    launch_parser.add_argument("profile", help="Connection profile (YAML)")
    launch_parser.add_argument("--defaults", action="store_true", help="Seed unset options with the schema defaults")

    subparsers.add_parser("settings", help="Print the settings schema as JSON")

    return parser


def _load_config(args: argparse.Namespace) -> PluginConfig:
    config = PluginConfig.from_file(args.config) if args.config else PluginConfig.from_environment()
    if args.log_level:
        config.logging.level = args.log_level
    return config


def _print_args(args: argparse.Namespace, config: PluginConfig) -> int:
    profile = ConnectionProfile.from_file(args.profile, apply_defaults=args.defaults)
    # Detached sessions are never bound to an embedding surface
    socket_id = None if profile.get_bool("detached") else args.socket_id
    argv = build_arguments(
        profile,
        socket_id=socket_id,
        client=config.client.executable,
        default_width=config.client.default_width,
        default_height=config.client.default_height
    )
    if not args.show_password:
        argv = redact_arguments(argv)
    print(shlex.join(argv))
    return 0


def _launch(args: argparse.Namespace, config: PluginConfig) -> int:
    profile = ConnectionProfile.from_file(args.profile, apply_defaults=args.defaults)
    # No widget toolkit here, so the client always gets its own window
    widget = HeadlessWidget(profile.with_values(detached=True))

    service = HeadlessPluginService()
    plugin = RdesktopPlugin(service, config=config.client)
    service.register_plugin(plugin)

    plugin.init(widget)
    plugin.open_connection(widget)

    error = service.get_error(widget)
    if error:
        print(error, file=sys.stderr)
        return 1

    print(widget.plugin_data.pid)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``rdesktop-plugin`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args)
        setup_logging(config.logging)

        if args.command == "settings":
            print(json.dumps(schema_to_dict(), indent=2))
            return 0
        if args.command == "args":
            return _print_args(args, config)
        return _launch(args, config)

    except RdesktopPluginException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
