"""
ristretto255 Group Arithmetic

Prime-order group built on top of edwards25519 (RFC 9496). Points are kept
in extended twisted Edwards coordinates (X:Y:Z:T) with x = X/Z, y = Y/Z and
x*y = T/Z. All arithmetic is plain modular integer arithmetic.
"""

from typing import Tuple

from .errors import InvalidEncoding


# Field and group parameters
P = 2**255 - 19
ORDER = 2**252 + 27742317777372353535851937790883648493  # L, the scalar order

D = (-121665 * pow(121666, P - 2, P)) % P

SQRT_M1 = 19681161376707505956807079304988542015446066515923890162744021073123829784752
SQRT_AD_MINUS_ONE = 25063068953384623474111414158702152701244531502492656460079210482610430750235
INVSQRT_A_MINUS_D = 54469307008909316920995813868745141605393597292927456921205312896311721017578
ONE_MINUS_D_SQ = (1 - D * D) % P
D_MINUS_ONE_SQ = ((D - 1) * (D - 1)) % P

ENCODING_LENGTH = 32
UNIFORM_BYTES_LENGTH = 64


def _is_negative(x: int) -> bool:
    """A field element is negative when its canonical encoding is odd."""
    return (x % P) & 1 == 1


def _abs(x: int) -> int:
    x %= P
    return P - x if x & 1 else x


def _inv(x: int) -> int:
    return pow(x, P - 2, P)


def sqrt_ratio_m1(u: int, v: int) -> Tuple[bool, int]:
    """
    Compute the nonnegative square root of u/v, or of SQRT_M1*u/v.

    Returns:
        Tuple[bool, int]: (was_square, r) where r is sqrt(u/v) when u/v is a
        square, sqrt(SQRT_M1*u/v) otherwise, and 0 when u is 0. r is always
        nonnegative.
    """
    u %= P
    v %= P
    v3 = v * v * v % P
    v7 = v3 * v3 * v % P
    r = (u * v3) * pow(u * v7, (P - 5) // 8, P) % P
    check = v * r * r % P

    correct_sign_sqrt = check == u
    flipped_sign_sqrt = check == (-u) % P
    flipped_sign_sqrt_i = check == (-u * SQRT_M1) % P

    if flipped_sign_sqrt or flipped_sign_sqrt_i:
        r = r * SQRT_M1 % P
    r = _abs(r)

    return correct_sign_sqrt or flipped_sign_sqrt, r


def _field_from_bytes(data: bytes) -> int:
    """Little-endian decode of 32 bytes with the top bit masked, reduced mod p."""
    return (int.from_bytes(data, "little") & ((1 << 255) - 1)) % P


def _elligator_map(t: int) -> Tuple[int, int, int, int]:
    """Map a field element to an edwards25519 point in extended coordinates."""
    r = SQRT_M1 * t * t % P
    u = (r + 1) * ONE_MINUS_D_SQ % P
    v = (-1 - r * D) * (r + D) % P

    was_square, s = sqrt_ratio_m1(u, v)
    if was_square:
        c = P - 1
    else:
        s = (-_abs(s * t)) % P
        c = r

    n = (c * (r - 1) * D_MINUS_ONE_SQ - v) % P

    w0 = 2 * s * v % P
    w1 = n * SQRT_AD_MINUS_ONE % P
    w2 = (1 - s * s) % P
    w3 = (1 + s * s) % P

    return w0 * w3 % P, w2 * w1 % P, w1 * w3 % P, w0 * w2 % P


class RistrettoPoint:
    """An element of the ristretto255 group."""

    __slots__ = ("_x", "_y", "_z", "_t")

    def __init__(self, *args, **kwargs) -> None:
        raise TypeError(
            "Build points with identity(), basepoint(), decompress() or from_uniform_bytes()"
        )

    @classmethod
    def _from_extended(cls, x: int, y: int, z: int, t: int) -> "RistrettoPoint":
        """Wrap extended coordinates already known to lie on the curve."""
        point = object.__new__(cls)
        point._x = x % P
        point._y = y % P
        point._z = z % P
        point._t = t % P
        return point

    @classmethod
    def identity(cls) -> "RistrettoPoint":
        """The neutral element."""
        return cls._from_extended(0, 1, 1, 0)

    @classmethod
    def basepoint(cls) -> "RistrettoPoint":
        """The edwards25519 basepoint (y = 4/5, x even) as a ristretto255 element."""
        y = 4 * _inv(5) % P
        yy = y * y % P
        _, x = sqrt_ratio_m1(yy - 1, D * yy + 1)
        return cls._from_extended(x, y, 1, x * y)

    @classmethod
    def from_uniform_bytes(cls, data: bytes) -> "RistrettoPoint":
        """
        Hash 64 uniformly random bytes to a group element.

        Each 32-byte half is mapped with the Elligator-based one-way map and
        the two resulting points are added, giving an output distribution
        indistinguishable from uniform.

        Args:
            data: 64 bytes, typically the output of a 512-bit digest

        Returns:
            RistrettoPoint: The mapped group element

        Raises:
            ValueError: If data is not exactly 64 bytes long
        """
        data = bytes(data)
        if len(data) != UNIFORM_BYTES_LENGTH:
            raise ValueError(
                f"from_uniform_bytes expects {UNIFORM_BYTES_LENGTH} bytes, got {len(data)}"
            )
        p1 = cls._from_extended(*_elligator_map(_field_from_bytes(data[:32])))
        p2 = cls._from_extended(*_elligator_map(_field_from_bytes(data[32:])))
        return p1 + p2

    @classmethod
    def decompress(cls, data: bytes) -> "RistrettoPoint":
        """
        Decode a canonical 32-byte encoding.

        Raises:
            InvalidEncoding: If the bytes are not the canonical encoding of a
                ristretto255 element
        """
        data = bytes(data)
        if len(data) != ENCODING_LENGTH:
            raise InvalidEncoding(f"Encoding must be {ENCODING_LENGTH} bytes, got {len(data)}")

        s = int.from_bytes(data, "little")
        if s >= P:
            raise InvalidEncoding("Non-canonical field element")
        if _is_negative(s):
            raise InvalidEncoding("Negative field element")

        ss = s * s % P
        u1 = (1 - ss) % P
        u2 = (1 + ss) % P
        u2_sqr = u2 * u2 % P
        v = (-(D * u1 * u1) - u2_sqr) % P

        was_square, invsqrt = sqrt_ratio_m1(1, v * u2_sqr)
        den_x = invsqrt * u2 % P
        den_y = invsqrt * den_x * v % P

        x = _abs(2 * s * den_x)
        y = u1 * den_y % P
        t = x * y % P

        if not was_square or _is_negative(t) or y == 0:
            raise InvalidEncoding("Not a valid ristretto255 encoding")

        return cls._from_extended(x, y, 1, t)

    def compress(self) -> bytes:
        """Return the canonical 32-byte encoding of this element."""
        x0, y0, z0, t0 = self._x, self._y, self._z, self._t

        u1 = (z0 + y0) * (z0 - y0) % P
        u2 = x0 * y0 % P
        # Always square for a valid point
        _, invsqrt = sqrt_ratio_m1(1, u1 * u2 * u2)
        den1 = invsqrt * u1 % P
        den2 = invsqrt * u2 % P
        z_inv = den1 * den2 * t0 % P

        if _is_negative(t0 * z_inv):
            x = y0 * SQRT_M1 % P
            y = x0 * SQRT_M1 % P
            den_inv = den1 * INVSQRT_A_MINUS_D % P
        else:
            x, y = x0, y0
            den_inv = den2

        if _is_negative(x * z_inv):
            y = (-y) % P

        s = _abs(den_inv * (z0 - y))
        return s.to_bytes(ENCODING_LENGTH, "little")

    def __add__(self, other: "RistrettoPoint") -> "RistrettoPoint":
        if not isinstance(other, RistrettoPoint):
            return NotImplemented
        # Unified addition for a = -1 (add-2008-hwcd-3), also valid for doubling
        a = (self._y - self._x) * (other._y - other._x) % P
        b = (self._y + self._x) * (other._y + other._x) % P
        c = 2 * D * self._t * other._t % P
        d = 2 * self._z * other._z % P
        e, f, g, h = b - a, d - c, d + c, b + a
        return RistrettoPoint._from_extended(e * f, g * h, f * g, e * h)

    def __neg__(self) -> "RistrettoPoint":
        return RistrettoPoint._from_extended(-self._x, self._y, self._z, -self._t)

    def __sub__(self, other: "RistrettoPoint") -> "RistrettoPoint":
        if not isinstance(other, RistrettoPoint):
            return NotImplemented
        return self + (-other)

    def __mul__(self, scalar: int) -> "RistrettoPoint":
        """
        Scalar multiplication by double-and-add.

        The scalar is reduced modulo the group order first, so the running time
        is logarithmic in the scalar and scalar 0 yields the identity.
        """
        if not isinstance(scalar, int) or isinstance(scalar, bool):
            return NotImplemented
        k = scalar % ORDER
        result = RistrettoPoint.identity()
        addend = self
        while k:
            if k & 1:
                result = result + addend
            addend = addend + addend
            k >>= 1
        return result

    __rmul__ = __mul__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RistrettoPoint):
            return NotImplemented
        return (
            self._x * other._y % P == self._y * other._x % P
            or self._y * other._y % P == self._x * other._x % P
        )

    def __hash__(self) -> int:
        return hash(self.compress())

    def __repr__(self) -> str:
        return f"RistrettoPoint({self.compress().hex()})"
