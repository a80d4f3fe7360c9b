"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m proofx_cli build ADDR [ADDR ...] [--out FILE] [--json]
    python -m proofx_cli prove ADDR [ADDR ...] --address ADDR [--out FILE]
    python -m proofx_cli verify --proof-file FILE [--root ROOT]
    python -m proofx_cli registry register ROOT --caller ADDR --list-size N
    python -m proofx_cli config

Environment Variables:
    PROOFX_PLATFORM_FEE          Platform fee in wei
    PROOFX_TREASURY_ADDRESS      Treasury receiving fees
    PROOFX_OWNER_ADDRESS         Address allowed to change the fee
    PROOFX_ALLOW_REREGISTRATION  Allow other callers to re-register removed roots
    PROOFX_STORE_PATH            JSON file backing the registry
    PROOFX_LOG_LEVEL             Log level (default: INFO)
    PROOFX_LOG_FILE              Log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config.runtime import RuntimeConfig
from core.schemas.errors import ProofXException
from proofx_cli import __version__
from proofx_cli.commands import merkle, registry


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / "proofx.yaml",
        Path.home() / ".config" / "proofx" / "config.yaml",
    ]


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from a YAML file and/or environment.

    Environment variables override file settings.
    """
    if config_path is not None:
        return RuntimeConfig.from_yaml(config_path).with_env_overrides()

    for default_path in default_config_paths():
        if default_path.exists():
            return RuntimeConfig.from_yaml(default_path).with_env_overrides()

    return RuntimeConfig.from_env()


def _add_output_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--json", action="store_true", default=False, help="JSON output")
    p.add_argument("--debug", action="store_true", default=False, help="Print tracebacks on error")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="proofx",
        description="ProofX CLI - Build Merkle roots over address lists, prove membership, manage the root registry.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./proofx.yaml or ~/.config/proofx/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a Merkle tree and print its root",
    )
    build_parser.add_argument("addresses", nargs="+", help="Member addresses")
    build_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write every member's proof to this JSON file",
    )
    _add_output_flags(build_parser)
    build_parser.set_defaults(func=merkle.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Export the proof for one address",
    )
    prove_parser.add_argument("addresses", nargs="+", help="Member addresses")
    prove_parser.add_argument("--address", "-a", required=True, help="Address to prove")
    prove_parser.add_argument("--out", "-o", type=str, default=None, help="Output JSON file")
    _add_output_flags(prove_parser)
    prove_parser.set_defaults(func=merkle.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a membership proof offline",
        description="Exit code 0 if the proof is valid, 2 if it is not.",
    )
    verify_parser.add_argument("--proof-file", "-f", type=str, default=None, help="Proof document (JSON)")
    verify_parser.add_argument("--root", "-r", type=str, default=None, help="Root to verify against")
    verify_parser.add_argument("--address", "-a", type=str, default=None, help="Claimed member address")
    verify_parser.add_argument("--proof", "-p", nargs="*", default=None, help="Sibling hashes (0x-hex)")
    _add_output_flags(verify_parser)
    verify_parser.set_defaults(func=merkle.verify_cmd)

    # --- registry command ---
    registry_parser = subparsers.add_parser(
        "registry",
        help="Manage the root registry",
    )
    registry_parser.add_argument("--store", type=str, default=None, help="Registry JSON file (overrides config)")
    reg_sub = registry_parser.add_subparsers(dest="registry_command", help="Registry operation")

    reg_register = reg_sub.add_parser("register", help="Register a root")
    reg_register.add_argument("root", help="Merkle root (0x-hex)")
    reg_register.add_argument("--caller", required=True, help="Registering address")
    reg_register.add_argument("--list-size", type=int, required=True, help="Number of committed addresses")
    reg_register.add_argument("--description", default="", help="Description")
    reg_register.add_argument("--fee", type=int, default=None, help="Fee paid in wei (default: required fee)")
    _add_output_flags(reg_register)
    reg_register.set_defaults(func=registry.register_cmd)

    reg_update = reg_sub.add_parser("update", help="Update a root's description")
    reg_update.add_argument("root", help="Merkle root (0x-hex)")
    reg_update.add_argument("--caller", required=True, help="Creator address")
    reg_update.add_argument("--description", required=True, help="New description")
    _add_output_flags(reg_update)
    reg_update.set_defaults(func=registry.update_cmd)

    reg_remove = reg_sub.add_parser("remove", help="Remove (deactivate) a root")
    reg_remove.add_argument("root", help="Merkle root (0x-hex)")
    reg_remove.add_argument("--caller", required=True, help="Creator address")
    _add_output_flags(reg_remove)
    reg_remove.set_defaults(func=registry.remove_cmd)

    reg_show = reg_sub.add_parser("show", help="Show a root's record")
    reg_show.add_argument("root", help="Merkle root (0x-hex)")
    _add_output_flags(reg_show)
    reg_show.set_defaults(func=registry.show_cmd)

    reg_fee = reg_sub.add_parser("fee", help="Show the platform fee")
    reg_fee.add_argument("--caller", default=None, help="Also show the fee this address would pay")
    _add_output_flags(reg_fee)
    reg_fee.set_defaults(func=registry.fee_cmd)

    reg_set_fee = reg_sub.add_parser("set-fee", help="Change the platform fee (owner only)")
    reg_set_fee.add_argument("amount", type=int, help="New fee in wei")
    reg_set_fee.add_argument("--caller", required=True, help="Registry owner address")
    _add_output_flags(reg_set_fee)
    reg_set_fee.set_defaults(func=registry.set_fee_cmd)

    reg_newcomer = reg_sub.add_parser("newcomer", help="Check whether an address still has its free registration")
    reg_newcomer.add_argument("address", help="Address to check")
    _add_output_flags(reg_newcomer)
    reg_newcomer.set_defaults(func=registry.newcomer_cmd)

    registry_parser.set_defaults(func=lambda args: registry_parser.print_help() or EXIT_SUCCESS)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Show the effective configuration",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    print(json.dumps(args.runtime_config.to_dict(), indent=2))
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ProofXException as e:
        if getattr(args, "json", False):
            print(e.to_error_model().model_dump_json(indent=2))
        else:
            print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
