"""Twisted Edwards curve over F_p and a deterministic hash-to-curve.

Curve: a*x^2 + y^2 = 1 + d*x^2*y^2 with a = -1, d = 3021 (cofactor 4).
Points are kept in affine coordinates; the group law is the unified Edwards
addition, so doubling goes through the same formula.
"""

import hashlib

from core.field import FieldElement, PRIME

EDWARDS_A = FieldElement(-1)
EDWARDS_D = FieldElement(3021)
COFACTOR = 4

# Try-and-increment bound for hash_to_curve. Roughly half of all y values lift
# to a curve point, so running out means something is badly wrong.
MAX_ATTEMPTS = 256

_HALF_PRIME = (PRIME - 1) // 2


class EdwardsPoint:
    """Affine point on the twisted Edwards curve."""

    __slots__ = ('x', 'y')

    def __init__(self, x: FieldElement, y: FieldElement):
        self.x = x
        self.y = y

    @staticmethod
    def identity() -> 'EdwardsPoint':
        return EdwardsPoint(FieldElement.zero(), FieldElement.one())

    @staticmethod
    def from_y_coordinate(y: FieldElement, greatest: bool) -> 'EdwardsPoint | None':
        """Recover the point with the given y, or None if y does not lift.

        x^2 = (y^2 - 1) / (d*y^2 - a); `greatest` selects the root above (p-1)/2.
        """
        y2 = y * y
        denominator = EDWARDS_D * y2 - EDWARDS_A
        if not denominator:
            return None
        x = ((y2 - 1) / denominator).sqrt()
        if x is None:
            return None
        if (x.value > _HALF_PRIME) != greatest:
            x = -x
        return EdwardsPoint(x, y)

    def is_on_curve(self) -> bool:
        x2, y2 = self.x * self.x, self.y * self.y
        return EDWARDS_A * x2 + y2 == 1 + EDWARDS_D * x2 * y2

    def is_identity(self) -> bool:
        return self == EdwardsPoint.identity()

    def __add__(self, other: 'EdwardsPoint') -> 'EdwardsPoint':
        x1y2 = self.x * other.y
        y1x2 = self.y * other.x
        x1x2 = self.x * other.x
        y1y2 = self.y * other.y
        dxy = EDWARDS_D * x1x2 * y1y2
        x3 = (x1y2 + y1x2) / (1 + dxy)
        y3 = (y1y2 - EDWARDS_A * x1x2) / (1 - dxy)
        return EdwardsPoint(x3, y3)

    def __neg__(self) -> 'EdwardsPoint':
        return EdwardsPoint(-self.x, self.y)

    def double(self) -> 'EdwardsPoint':
        return self + self

    def scalar_mul(self, scalar: int) -> 'EdwardsPoint':
        """Double-and-add, most-significant bit first."""
        if scalar < 0:
            return (-self).scalar_mul(-scalar)
        result = EdwardsPoint.identity()
        for i in reversed(range(scalar.bit_length())):
            result = result.double()
            if (scalar >> i) & 1:
                result = result + self
        return result

    def mul_by_cofactor(self) -> 'EdwardsPoint':
        return self.double().double()

    def __eq__(self, other):
        if not isinstance(other, EdwardsPoint):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x.value, self.y.value))

    def __repr__(self):
        return f"EdwardsPoint(x={self.x.value:#x}, y={self.y.value:#x})"


def _digest(message: str, attempt: int) -> bytes:
    h = hashlib.blake2b(digest_size=64, person=b"HashToCurve")
    h.update(attempt.to_bytes(4, 'little'))
    h.update(message.encode('utf-8'))
    return h.digest()


def hash_to_curve(message: str) -> tuple[EdwardsPoint, int, bool]:
    """Map message to a prime-order-subgroup point by try-and-increment.

    Returns (point, attempt, greatest): the point, the counter value that
    produced it, and the sign choice made for its pre-cofactor x-coordinate.
    """
    for attempt in range(MAX_ATTEMPTS):
        digest = _digest(message, attempt)
        y = FieldElement.from_bytes_le_mod_order(digest)
        greatest = bool(digest[-1] >> 7)
        point = EdwardsPoint.from_y_coordinate(y, greatest)
        if point is None:
            continue
        point = point.mul_by_cofactor()
        if point.is_identity():
            continue
        return point, attempt, greatest
    raise RuntimeError(f"hash_to_curve found no point for {message!r} "
                       f"after {MAX_ATTEMPTS} attempts")
