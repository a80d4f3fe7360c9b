"""
Tree Registry
Ledger of published Merkle roots with ownership and fee rules.

Usage:
    from core.registry import TreeRegistry, InMemoryRegistryStore

    registry = TreeRegistry(InMemoryRegistryStore(platform_fee=10**15))
    registry.register(tree.root, "phase 1", tree.leaf_count, caller=alice)
"""
from .store import (
    RegistryStore,
    InMemoryRegistryStore,
)
from .file_store import JsonFileRegistryStore
from .fee_sink import (
    FeeSink,
    FeeTransfer,
    NullFeeSink,
    TreasuryFeeSink,
)
from .tree_registry import (
    ZERO_ROOT,
    TreeRegistry,
)

__all__ = [
    "RegistryStore",
    "InMemoryRegistryStore",
    "JsonFileRegistryStore",
    "FeeSink",
    "FeeTransfer",
    "NullFeeSink",
    "TreasuryFeeSink",
    "ZERO_ROOT",
    "TreeRegistry",
]
