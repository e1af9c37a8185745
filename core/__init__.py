"""Core primitives: field arithmetic, Edwards curve, deterministic RNG."""

from core.field import FieldElement, PRIME, SIZE_IN_BITS, CAPACITY
from core.curve import EdwardsPoint, hash_to_curve
from core.errors import MalformedEncodingError, UnsatisfiedConstraintError
from core import rng
