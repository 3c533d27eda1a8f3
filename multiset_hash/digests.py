"""
Wide Digest Functions

The accumulator hashes every element with a 512-bit digest before mapping it
into the group. Any object following the WideDigest protocol works; this
module provides the hashlib and cryptography backed ones and a name registry
used by the configuration layer.
"""

import hashlib
from typing import Callable, Dict, List, Protocol, runtime_checkable

from cryptography.hazmat.primitives import hashes

WIDE_DIGEST_SIZE = 64


@runtime_checkable
class WideDigest(Protocol):
    """Incremental digest with a 64-byte output."""

    digest_size: int

    def update(self, data: bytes) -> None:
        ...

    def digest(self) -> bytes:
        ...

    def copy(self) -> "WideDigest":
        ...


DigestFactory = Callable[[], WideDigest]


class CryptographyDigest:
    """
    WideDigest adapter over ``cryptography.hazmat.primitives.hashes.Hash``.

    The underlying context can only be finalized once; ``digest()`` finalizes
    a copy so the adapter behaves like a hashlib object.
    """

    def __init__(self, algorithm: hashes.HashAlgorithm) -> None:
        if algorithm.digest_size != WIDE_DIGEST_SIZE:
            raise ValueError(
                f"{algorithm.name} produces {algorithm.digest_size} bytes, "
                f"expected {WIDE_DIGEST_SIZE}"
            )
        self.algorithm = algorithm
        self._ctx = hashes.Hash(algorithm)

    @classmethod
    def _from_context(cls, algorithm: hashes.HashAlgorithm, ctx: hashes.Hash) -> "CryptographyDigest":
        clone = cls.__new__(cls)
        clone.algorithm = algorithm
        clone._ctx = ctx
        return clone

    @property
    def digest_size(self) -> int:
        return self.algorithm.digest_size

    @property
    def name(self) -> str:
        return self.algorithm.name

    def update(self, data: bytes) -> None:
        self._ctx.update(bytes(data))

    def digest(self) -> bytes:
        return self._ctx.copy().finalize()

    def copy(self) -> "CryptographyDigest":
        return CryptographyDigest._from_context(self.algorithm, self._ctx.copy())


def blake2b_512() -> WideDigest:
    """hashlib BLAKE2b with the full 64-byte output."""
    return hashlib.blake2b(digest_size=WIDE_DIGEST_SIZE)


_DIGESTS: Dict[str, DigestFactory] = {
    "sha512": hashlib.sha512,
    "sha3_512": hashlib.sha3_512,
    "blake2b": blake2b_512,
    "cryptography-sha512": lambda: CryptographyDigest(hashes.SHA512()),
    "cryptography-sha3_512": lambda: CryptographyDigest(hashes.SHA3_512()),
    "cryptography-blake2b": lambda: CryptographyDigest(hashes.BLAKE2b(WIDE_DIGEST_SIZE)),
}


def available_digests() -> List[str]:
    """Names accepted by get_digest_factory()."""
    return sorted(_DIGESTS)


def get_digest_factory(name: str) -> DigestFactory:
    """
    Look up a digest factory by name.

    Args:
        name: One of available_digests(), case-insensitive

    Returns:
        DigestFactory: Callable returning a fresh WideDigest

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return _DIGESTS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown digest '{name}'. Available: {', '.join(available_digests())}"
        ) from None


def check_digest_factory(factory: DigestFactory) -> None:
    """
    Make sure a factory produces 64-byte incremental digests.

    Raises:
        ValueError: If the produced digest is not 64 bytes wide
        TypeError: If the produced object lacks update/digest/copy
    """
    sample = factory()
    if not isinstance(sample, WideDigest):
        raise TypeError(f"{type(sample).__name__} does not implement update/digest/copy")
    if sample.digest_size != WIDE_DIGEST_SIZE:
        raise ValueError(
            f"Digest size must be {WIDE_DIGEST_SIZE} bytes, got {sample.digest_size}"
        )
