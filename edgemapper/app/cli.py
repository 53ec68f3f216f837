"""
EdgeMapper Command Line Interface

Provides CLI commands for translating device descriptors and checking
mapper configuration.
"""

import argparse
import json
import sys
from typing import Optional

from edgemapper import __version__
from edgemapper.models import dmi
from edgemapper.modules.instance_assembler import InstanceAssembler
from edgemapper.modules.profile_loader import assemble_profile, load_profile
from edgemapper.modules.protocol_resolver import ProtocolResolver
from edgemapper.utils.config import (
    DEFAULT_CONFIG_FILE,
    DevInitMode,
    Settings,
    get_settings,
    load_settings,
    read_device_profile,
)
from edgemapper.utils.error_logging import error_context, init_sentry
from edgemapper.utils.error_logging import flush as flush_errors
from edgemapper.utils.exceptions import EdgeMapperError
from edgemapper.utils.logging import configure_logging, get_logger


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="edgemapper",
        description="Device descriptor translation for edge protocol mappers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  edgemapper parse --device dev1.json --model thermometer.json
  edgemapper profile --file profile.json
  edgemapper --config-file config.yaml check
  edgemapper version

Environment Variables:
  EDGEMAPPER_ENV                        Environment (development/staging/production)
  LOG_LEVEL                             Logging level (DEBUG/INFO/WARNING/ERROR)
  DEVICE_PROFILE                        Device profile when the configmap file is missing
        """,
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )
    parser.add_argument(
        "--config-file",
        type=str,
        metavar="FILE",
        help=f"Mapper configuration file (check defaults to {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument("--mqtt-address", type=str, help="MQTT broker address")
    parser.add_argument("--mqtt-username", type=str, help="MQTT username")
    parser.add_argument("--mqtt-password", type=str, help="MQTT password")
    parser.add_argument("--mqtt-certification", type=str, help="Certification file path")
    parser.add_argument("--mqtt-privatekey", type=str, help="Private key file path")
    parser.add_argument("--metaserver-addr", type=str, help="Edge meta server address")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser(
        "parse",
        help="Assemble a device instance from DMI JSON descriptors",
    )
    parse_parser.add_argument(
        "--device",
        type=str,
        required=True,
        metavar="FILE",
        help="Device descriptor (JSON)",
    )
    parse_parser.add_argument(
        "--model",
        type=str,
        metavar="FILE",
        help="Device model descriptor (JSON)",
    )
    parse_parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject devices declaring more than one protocol",
    )

    # Profile command
    profile_parser = subparsers.add_parser(
        "profile",
        help="Assemble every device of a device profile",
    )
    profile_parser.add_argument(
        "--file",
        type=str,
        metavar="FILE",
        help="Device profile (defaults to the configured configmap profile)",
    )

    # Check command
    subparsers.add_parser(
        "check",
        help="Validate mapper configuration",
    )

    # Version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    return parser


def build_overrides(args: argparse.Namespace) -> dict:
    """Map CLI flags onto configuration sections."""
    return {
        "mqtt": {
            "server": args.mqtt_address,
            "username": args.mqtt_username,
            "password": args.mqtt_password,
            "certification": args.mqtt_certification,
            "privatekey": args.mqtt_privatekey,
        },
        "dev_init": {"metaserver": {"addr": args.metaserver_addr}},
    }


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Settings from the config file when one applies, else from the environment."""
    if args.config_file or args.command == "check":
        return load_settings(args.config_file or DEFAULT_CONFIG_FILE, build_overrides(args))
    return get_settings()


def get_log_level(verbose: int, quiet: bool, settings: Settings) -> str:
    """Determine log level from verbosity flags."""
    if quiet:
        return "ERROR"
    if verbose >= 2:
        return "DEBUG"
    if verbose >= 1:
        return "INFO"
    return settings.log_level


def _read_json(path: str) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()


def cmd_parse(args: argparse.Namespace, settings: Settings) -> int:
    """Run the parse command."""
    device = dmi.Device.model_validate_json(_read_json(args.device))
    model = dmi.DeviceModel.model_validate_json(_read_json(args.model)) if args.model else None

    strict = args.strict or settings.translation.strict_protocol
    assembler = InstanceAssembler(resolver=ProtocolResolver(strict=strict))
    with error_context("parse_device", {"device": device.name}):
        schema = assembler.translate_model(model) if model is not None else None
        instance = assembler.assemble(device, schema)

    print(instance.model_dump_json(indent=2))
    return 0


def cmd_profile(args: argparse.Namespace, settings: Settings) -> int:
    """Run the profile command."""
    if args.file:
        text = _read_json(args.file)
    elif settings.dev_init.mode == DevInitMode.CONFIGMAP:
        # env-only settings never went through load_settings
        text = settings.dev_init.profile or read_device_profile(settings.dev_init.configmap)
    else:
        print(
            f"Error: no device profile (dev init mode is {settings.dev_init.mode.value})",
            file=sys.stderr,
        )
        return 1

    assembler = InstanceAssembler(
        resolver=ProtocolResolver(strict=settings.translation.strict_protocol)
    )
    with error_context("assemble_profile"):
        result = assemble_profile(load_profile(text), assembler)

    print(result.model_dump_json(indent=2))
    return 1 if result.failures else 0


def cmd_check(args: argparse.Namespace, settings: Settings) -> int:
    """Run the check command."""
    print("EdgeMapper Configuration Check")
    print("=" * 40)
    print(f"Environment: {settings.env}")
    print(f"Log Level: {settings.log_level}")
    print()
    print("MQTT:")
    print(f"  Server: {settings.mqtt.server or '[not configured]'}")
    print(f"  TLS: {'enabled' if settings.mqtt.certification else 'disabled'}")
    print(f"HTTP Server: {settings.http_server.host or '[not configured]'}")
    print(f"gRPC Socket: {settings.grpc_server.socket_path or '[not configured]'}")
    print()
    print(f"Device Init Mode: {settings.dev_init.mode.value}")
    if settings.dev_init.mode == DevInitMode.METASERVER:
        print(f"  Meta Server: {settings.dev_init.metaserver.addr}")
        print(f"  Namespace: {settings.dev_init.metaserver.namespace}")
    elif settings.dev_init.mode == DevInitMode.CONFIGMAP:
        profile = load_profile(settings.dev_init.profile)
        print(f"  Device Models: {len(profile.device_models)}")
        print(f"  Devices: {len(profile.devices)}")
    print()
    print("=" * 40)
    print("All checks passed!")
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Run the version command."""
    print(f"EdgeMapper v{__version__}")
    print()
    print("Python:", sys.version.split()[0])
    print("Platform:", sys.platform)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0
    if args.command == "version":
        return cmd_version(args)

    try:
        settings = resolve_settings(args)
    except EdgeMapperError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(
        log_level=get_log_level(args.verbose, args.quiet, settings),
        json_logs=settings.is_production,
        development=settings.is_development,
    )
    init_sentry(settings)
    logger = get_logger("cli")

    try:
        if args.command == "parse":
            return cmd_parse(args, settings)
        elif args.command == "profile":
            return cmd_profile(args, settings)
        elif args.command == "check":
            return cmd_check(args, settings)
        else:
            parser.print_help()
            return 1
    except EdgeMapperError as e:
        logger.debug("Command failed", command=args.command, error=e.code)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        flush_errors()


if __name__ == "__main__":
    sys.exit(main())
