"""
Client module for relayer submission.
"""

from .relayer_client import RelayerClient, RELAY_TRANSFER_PATH

__all__ = ["RelayerClient", "RELAY_TRANSFER_PATH"]
