"""
Multiset Hash Package

Commutative, incremental hashing of multisets of byte strings over the
ristretto255 group. The 32-byte digest depends only on which elements were
added and how many times, never on the order or grouping of the calls.
"""

from .errors import InvalidEncoding, MultisetHashError, ProtocolViolation
from .hasher import MultisetHash
from .ristretto import RistrettoPoint
from .digests import CryptographyDigest, available_digests, get_digest_factory
from .config import Settings, get_settings
from .logging_config import setup_logging

__version__ = "0.1.0"
__all__ = [
    "MultisetHash",
    "ProtocolViolation",
    "InvalidEncoding",
    "MultisetHashError",
    "RistrettoPoint",
    "CryptographyDigest",
    "available_digests",
    "get_digest_factory",
    "Settings",
    "get_settings",
    "setup_logging",
]
