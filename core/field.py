"""Finite field arithmetic over F_p where p is the BLS12-377 scalar field order."""

from core import rng

PRIME = 0x12ab655e9a2ca55660b44d1e5c37b00159aa76fed00000010a11800000000001

SIZE_IN_BITS = PRIME.bit_length()  # 253
CAPACITY = SIZE_IN_BITS - 1  # every CAPACITY-bit integer is a canonical element

SIZE_IN_BYTES = (SIZE_IN_BITS + 7) // 8


class FieldElement:
    """Element of the finite field F_p."""

    __slots__ = ('value',)

    def __init__(self, value: int):
        self.value = value % PRIME

    def __add__(self, other):
        if isinstance(other, int):
            other = FieldElement(other)
        return FieldElement((self.value + other.value) % PRIME)

    def __radd__(self, other):
        if isinstance(other, int):
            return FieldElement((other + self.value) % PRIME)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, int):
            other = FieldElement(other)
        return FieldElement((self.value - other.value) % PRIME)

    def __rsub__(self, other):
        if isinstance(other, int):
            return FieldElement((other - self.value) % PRIME)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, int):
            other = FieldElement(other)
        return FieldElement((self.value * other.value) % PRIME)

    def __rmul__(self, other):
        if isinstance(other, int):
            return FieldElement((other * self.value) % PRIME)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, int):
            other = FieldElement(other)
        return self * other.inverse()

    def __neg__(self):
        return FieldElement((-self.value) % PRIME)

    def __pow__(self, exp):
        if isinstance(exp, FieldElement):
            exp = exp.value
        return FieldElement(pow(self.value, exp, PRIME))

    def __eq__(self, other):
        if isinstance(other, int):
            return self.value == (other % PRIME)
        if isinstance(other, FieldElement):
            return self.value == other.value
        return NotImplemented

    def __hash__(self):
        return hash(self.value)

    def __repr__(self):
        return f"F({self.value})"

    def __bool__(self):
        return self.value != 0

    def inverse(self):
        """Multiplicative inverse via Fermat's little theorem: a^{p-2} mod p."""
        if self.value == 0:
            raise ZeroDivisionError("Cannot invert zero")
        return FieldElement(pow(self.value, PRIME - 2, PRIME))

    def to_int(self):
        return self.value

    def to_bits_le(self) -> list[bool]:
        """Exactly SIZE_IN_BITS bits, least-significant first."""
        return [bool((self.value >> i) & 1) for i in range(SIZE_IN_BITS)]

    def to_bytes_le(self) -> bytes:
        return self.value.to_bytes(SIZE_IN_BYTES, 'little')

    def is_square(self) -> bool:
        """Euler's criterion. Zero counts as a square."""
        if self.value == 0:
            return True
        return pow(self.value, (PRIME - 1) // 2, PRIME) == 1

    def sqrt(self):
        """Square root via Tonelli-Shanks, or None if self is not a square.

        Of the two roots, the one returned is whichever the algorithm lands on;
        callers that need a canonical root pick it themselves.
        """
        if self.value == 0:
            return FieldElement.zero()
        if not self.is_square():
            return None

        m, c = _TONELLI_S, _TONELLI_Z
        t = pow(self.value, _TONELLI_Q, PRIME)
        r = pow(self.value, (_TONELLI_Q + 1) // 2, PRIME)
        while t != 1:
            # Least i with t^(2^i) == 1
            i, t2i = 0, t
            while t2i != 1:
                t2i = t2i * t2i % PRIME
                i += 1
            b = pow(c, 1 << (m - i - 1), PRIME)
            m = i
            c = b * b % PRIME
            t = t * c % PRIME
            r = r * b % PRIME
        return FieldElement(r)

    @staticmethod
    def from_bits_le(bits) -> 'FieldElement':
        """Pack bits (least-significant first) into an element."""
        bits = list(bits)
        if len(bits) > SIZE_IN_BITS:
            raise ValueError(f"Expected at most {SIZE_IN_BITS} bits, got {len(bits)}")
        value = 0
        for i, bit in enumerate(bits):
            if bit:
                value |= 1 << i
        return FieldElement(value)

    @staticmethod
    def from_bytes_le_mod_order(data: bytes) -> 'FieldElement':
        """Interpret data as a little-endian integer and reduce it mod p."""
        return FieldElement(int.from_bytes(data, 'little'))

    @staticmethod
    def random():
        """Return a random non-zero field element."""
        return FieldElement(rng.randbelow(PRIME - 1) + 1)

    @staticmethod
    def random_including_zero():
        """Return a random field element (may be zero)."""
        return FieldElement(rng.randbelow(PRIME))

    @staticmethod
    def zero():
        return FieldElement(0)

    @staticmethod
    def one():
        return FieldElement(1)


def _two_adic_split(n: int) -> tuple[int, int]:
    s = 0
    while n % 2 == 0:
        n //= 2
        s += 1
    return n, s


def _find_non_residue() -> int:
    z = 2
    while pow(z, (PRIME - 1) // 2, PRIME) != PRIME - 1:
        z += 1
    return z


# Tonelli-Shanks constants: p - 1 = Q * 2^S with Q odd, and c = z^Q for a non-residue z.
_TONELLI_Q, _TONELLI_S = _two_adic_split(PRIME - 1)
_TONELLI_Z = pow(_find_non_residue(), _TONELLI_Q, PRIME)
