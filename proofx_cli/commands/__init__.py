"""
CLI command modules.
"""

from proofx_cli.commands import merkle, registry

__all__ = ["merkle", "registry"]
