"""
Multiset Hash Accumulator

Commutative, incremental hash over multisets of byte strings. Each element is
hashed with a 512-bit digest, mapped to a ristretto255 element, scaled by its
multiplicity and added into a running sum. Since group addition is commutative
and associative, the result does not depend on insertion order or on how an
element's multiplicity is split across calls.
"""

import hashlib
import logging
from typing import Optional

from .config import Settings, get_settings
from .digests import DigestFactory, WideDigest, check_digest_factory, get_digest_factory
from .errors import ProtocolViolation
from .ristretto import ORDER, RistrettoPoint

logger = logging.getLogger(__name__)

MAX_MULTIPLICITY = 2**64 - 1
OUTPUT_SIZE = 32

_BYTES_LIKE = (bytes, bytearray, memoryview)


def _check_data(data) -> None:
    if not isinstance(data, _BYTES_LIKE):
        raise TypeError(f"Element data must be bytes-like, not {type(data).__name__}")


def _check_multiplicity(multiplicity) -> None:
    if not isinstance(multiplicity, int) or isinstance(multiplicity, bool):
        raise TypeError(f"Multiplicity must be an int, not {type(multiplicity).__name__}")
    if multiplicity < 0 or multiplicity > MAX_MULTIPLICITY:
        raise ValueError(f"Multiplicity must be in [0, 2**64 - 1], got {multiplicity}")


class MultisetHash:
    """
    Incremental multiset hash with a 32-byte output.

    Elements are added whole with add(), or in pieces with update() followed
    by end_update(). Two hashers that saw the same multiset finalize to the
    same bytes.

    Example:
        >>> h1 = MultisetHash()
        >>> h1.add(b"cat", 2)
        >>> h2 = MultisetHash()
        >>> h2.add(b"cat")
        >>> h2.update(b"c")
        >>> h2.update(b"at")
        >>> h2.end_update(1)
        >>> assert h1.finalize() == h2.finalize()
    """

    def __init__(self, digest_factory: DigestFactory = hashlib.sha512) -> None:
        """
        Create an empty hasher.

        Args:
            digest_factory: Callable returning a fresh 64-byte WideDigest

        Raises:
            ValueError: If the factory's digests are not 64 bytes wide
        """
        check_digest_factory(digest_factory)
        self._digest_factory = digest_factory
        self._digest: WideDigest = digest_factory()
        self._sum = RistrettoPoint.identity()
        self._pending = False
        self._consumed = False

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "MultisetHash":
        """Create a hasher using the digest named in the settings."""
        settings = settings or get_settings()
        return cls(get_digest_factory(settings.digest))

    @property
    def pending(self) -> bool:
        """True while element bytes fed through update() await end_update()."""
        return self._pending

    @property
    def running_sum(self) -> RistrettoPoint:
        """The uncompressed accumulator value."""
        return self._sum

    def _ensure_usable(self, operation: str, side: str = "this hasher") -> None:
        if self._consumed:
            logger.warning("%s called after finalize() of %s", operation, side)
            raise ProtocolViolation(
                f"{operation}() called after finalize() of {side}; call reset() to reuse"
            )

    def _ensure_idle(self, operation: str, side: str = "this hasher") -> None:
        self._ensure_usable(operation, side)
        if self._pending:
            logger.warning("%s called while %s has an uncommitted element pending", operation, side)
            raise ProtocolViolation(
                f"{operation}() called while {side} has an element fed via update() pending; "
                "call end_update() first"
            )

    def _commit(self, multiplicity: int) -> None:
        digest, self._digest = self._digest, self._digest_factory()
        point = RistrettoPoint.from_uniform_bytes(digest.digest())
        scalar = multiplicity % ORDER  # no-op for 64-bit multiplicities
        self._sum = self._sum + point * scalar
        self._pending = False
        logger.debug("Committed element with multiplicity %d", multiplicity)

    def add(self, data: bytes, multiplicity: int = 1) -> None:
        """
        Add an element with the given multiplicity.

        Args:
            data: Element bytes
            multiplicity: Occurrences to add, 0 <= multiplicity < 2**64

        Raises:
            ProtocolViolation: If an update() element is pending
            TypeError: If data is not bytes-like or multiplicity not an int
            ValueError: If multiplicity is out of range
        """
        self._ensure_idle("add")
        _check_data(data)
        _check_multiplicity(multiplicity)
        self._digest.update(data)
        self._commit(multiplicity)

    def update(self, chunk: bytes) -> None:
        """Feed the next piece of the current element."""
        self._ensure_usable("update")
        _check_data(chunk)
        self._digest.update(chunk)
        self._pending = True

    def end_update(self, multiplicity: int = 1) -> None:
        """
        Commit the element fed through update() since the last commit.

        Without any prior update() this commits the empty byte string.
        """
        self._ensure_usable("end_update")
        _check_multiplicity(multiplicity)
        self._commit(multiplicity)

    def merge(self, other: "MultisetHash") -> None:
        """
        Fold another hasher's running sum into this one.

        The result is the hash of the union (multiplicities added) of both
        multisets. `other` is left untouched.

        Raises:
            ProtocolViolation: If either hasher has a pending element
        """
        if not isinstance(other, MultisetHash):
            raise TypeError(f"Cannot merge {type(other).__name__} into MultisetHash")
        other._ensure_idle("merge", "the other hasher")
        self.merge_sum(other._sum)

    def merge_sum(self, point: RistrettoPoint) -> None:
        """
        Fold a running sum into this hasher.

        Partial sums from other processes or machines can be shipped as
        RistrettoPoint.compress() bytes and restored with decompress().
        Only points built by RistrettoPoint itself (decompress, from_uniform_bytes,
        identity, basepoint, or arithmetic on those) are accepted; raw
        coordinates cannot be wrapped into a point.

        Raises:
            ProtocolViolation: If this hasher has a pending element or was finalized
            TypeError: If point is not a RistrettoPoint
        """
        if not isinstance(point, RistrettoPoint):
            raise TypeError(f"Expected RistrettoPoint, got {type(point).__name__}")
        self._ensure_idle("merge")
        self._sum = self._sum + point
        logger.debug("Merged running sum %s", point)

    def finalize(self) -> bytes:
        """
        Return the 32-byte digest and consume the hasher.

        Raises:
            ProtocolViolation: If an update() element is pending
        """
        self._ensure_idle("finalize")
        output = self._sum.compress()
        self._consumed = True
        logger.debug("Finalized multiset hash %s", output.hex())
        return output

    def finalize_and_reset(self) -> bytes:
        """Return the 32-byte digest and reset the hasher for reuse."""
        self._ensure_idle("finalize_and_reset")
        output = self._sum.compress()
        self.reset()
        return output

    def reset(self) -> None:
        """Return to the state of a freshly constructed hasher."""
        self._digest = self._digest_factory()
        self._sum = RistrettoPoint.identity()
        self._pending = False
        self._consumed = False
        logger.debug("Hasher reset")

    def copy(self) -> "MultisetHash":
        """Independent clone, including any partially fed element."""
        self._ensure_usable("copy")
        clone = MultisetHash.__new__(MultisetHash)
        clone._digest_factory = self._digest_factory
        clone._digest = self._digest.copy()
        clone._sum = self._sum
        clone._pending = self._pending
        clone._consumed = False
        return clone

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else ("accumulating" if self._pending else "idle")
        return f"<MultisetHash {state} sum={self._sum.compress().hex()}>"
