"""Native backend: evaluates gadgets directly on FieldElement and bool values."""

from core.errors import MalformedEncodingError, UnsatisfiedConstraintError
from core.field import FieldElement


class NativeArithmetic:
    """Field and boolean operations on concrete values.

    Stateless, so a single instance may be shared freely. Gadgets written
    against this interface run unchanged on a ConstraintSystem.
    """

    def constant(self, value) -> FieldElement:
        if isinstance(value, FieldElement):
            return value
        return FieldElement(value)

    def witness(self, value, public: bool = False) -> FieldElement:
        return self.constant(value)

    def boolean(self, value: bool) -> bool:
        return bool(value)

    def witness_boolean(self, value: bool, public: bool = False) -> bool:
        return bool(value)

    def add(self, a: FieldElement, b: FieldElement) -> FieldElement:
        return a + b

    def sub(self, a: FieldElement, b: FieldElement) -> FieldElement:
        return a - b

    def scalar_mul(self, constant: FieldElement, a: FieldElement) -> FieldElement:
        return constant * a

    def mul(self, a: FieldElement, b: FieldElement) -> FieldElement:
        return a * b

    def to_bits_le(self, a: FieldElement) -> list[bool]:
        return a.to_bits_le()

    def from_bits_le(self, bits) -> FieldElement:
        return FieldElement.from_bits_le(bits)

    def eject(self, value):
        return value

    def assert_equal(self, a: FieldElement, b: FieldElement, msg: str = "values differ"):
        if a != b:
            raise UnsatisfiedConstraintError(msg)

    def halt(self, msg: str):
        raise MalformedEncodingError(msg)


NATIVE = NativeArithmetic()
