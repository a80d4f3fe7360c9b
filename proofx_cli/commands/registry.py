"""
CLI Registry Commands

Operate on the tree registry backed by the configured JSON store.

Usage:
    proofx registry register ROOT --caller ADDR --list-size N [--description TEXT] [--fee WEI]
    proofx registry update ROOT --caller ADDR --description TEXT
    proofx registry remove ROOT --caller ADDR
    proofx registry show ROOT
    proofx registry fee [--caller ADDR]
    proofx registry set-fee WEI --caller ADDR
    proofx registry newcomer ADDR
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from core.config.runtime import RuntimeConfig
from core.registry import TreeRegistry
from core.schemas.registry import RegistryEntry


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0


def _registry(args: Namespace) -> TreeRegistry:
    config: RuntimeConfig = args.runtime_config
    if getattr(args, "store", None):
        config.registry.store_path = args.store
    if not config.registry.store_path:
        logger.warning("No registry store configured; state will not persist")
    return TreeRegistry.from_config(config)


def _print_entry(entry: RegistryEntry, as_json: bool) -> None:
    if as_json:
        print(entry.model_dump_json(indent=2))
        return
    print(f"Root:        {entry.root}")
    print(f"Description: {entry.description}")
    print(f"Creator:     {entry.creator}")
    print(f"List size:   {entry.list_size}")
    print(f"Timestamp:   {entry.timestamp}")
    print(f"Active:      {entry.is_active}")


def register_cmd(args: Namespace) -> int:
    registry = _registry(args)
    fee = args.fee if args.fee is not None else registry.required_fee(args.caller)
    key = registry.register(
        args.root,
        args.description,
        args.list_size,
        caller=args.caller,
        fee_paid=fee,
    )
    _print_entry(registry.get_entry(key), args.json)
    return EXIT_SUCCESS


def update_cmd(args: Namespace) -> int:
    registry = _registry(args)
    entry = registry.update_description(args.root, args.description, caller=args.caller)
    _print_entry(entry, args.json)
    return EXIT_SUCCESS


def remove_cmd(args: Namespace) -> int:
    registry = _registry(args)
    entry = registry.remove(args.root, caller=args.caller)
    _print_entry(entry, args.json)
    return EXIT_SUCCESS


def show_cmd(args: Namespace) -> int:
    registry = _registry(args)
    _print_entry(registry.get_entry(args.root), args.json)
    return EXIT_SUCCESS


def fee_cmd(args: Namespace) -> int:
    registry = _registry(args)
    data = {"platform_fee": registry.platform_fee(), "treasury": registry.treasury}
    if args.caller:
        data["required_fee"] = registry.required_fee(args.caller)

    if args.json:
        print(json.dumps(data, indent=2))
    else:
        for key, value in data.items():
            print(f"{key}: {value}")
    return EXIT_SUCCESS


def set_fee_cmd(args: Namespace) -> int:
    registry = _registry(args)
    registry.set_platform_fee(args.amount, caller=args.caller)
    print(f"platform_fee: {registry.platform_fee()}")
    return EXIT_SUCCESS


def newcomer_cmd(args: Namespace) -> int:
    registry = _registry(args)
    newcomer = registry.is_newcomer(args.address)
    if args.json:
        print(json.dumps({"address": args.address.lower(), "is_newcomer": newcomer}))
    else:
        print(f"{args.address.lower()}: {'newcomer' if newcomer else 'has used free registration'}")
    return EXIT_SUCCESS
