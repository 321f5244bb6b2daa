"""
Server module: a relayer stand-in implementing the relay contract.
"""

from .mock_relayer import MockRelayerServer

__all__ = ["MockRelayerServer"]
