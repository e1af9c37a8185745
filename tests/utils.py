"""Test utilities: message generators, witness helpers."""

from core import rng
from core.field import FieldElement
from circuits.ecies import ECIESPoseidonEncryption

SETUP_MESSAGE = "aleo.encryption.test"


def make_ecies(seed=42):
    rng.set_seed(seed)
    return ECIESPoseidonEncryption.setup(SETUP_MESSAGE)


def random_message_bits(num_bytes):
    """Byte-aligned random bitstring (LSB first within each byte)."""
    return rng.random_bits(8 * num_bytes)


def random_elements(count):
    return [FieldElement.random_including_zero() for _ in range(count)]


def witness_bits(cs, bits):
    return [cs.witness_boolean(bit) for bit in bits]


def witness_elements(cs, elements, public=False):
    return [cs.witness(e, public=public) for e in elements]


def eject_all(cs, values):
    return [cs.eject(v) for v in values]
