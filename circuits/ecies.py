"""ECIES-style symmetric encryption with a Poseidon keystream.

Messages are bitstrings packed into field elements behind a terminator bit;
encryption adds a Poseidon keystream element-wise, decryption subtracts it.
Every operation takes the arithmetic backend to evaluate on, so the same
code produces native ciphertexts and the constraints that prove them.
"""

from dataclasses import dataclass

from backends.native import NATIVE
from core.bits import bits_to_bytes_le, bytes_to_bits_le
from core.curve import EdwardsPoint, hash_to_curve
from core.field import FieldElement, CAPACITY
from circuits.poseidon import Poseidon

SYMMETRIC_KEY_COMMITMENT_TAG = b"AleoSymmetricKeyCommitment0"
SYMMETRIC_ENCRYPTION_TAG = b"AleoSymmetricEncryption0"


@dataclass(frozen=True)
class DomainParameters:
    """Public parameters fixed by the setup message."""
    generator: EdwardsPoint
    symmetric_key_commitment_domain: FieldElement
    symmetric_encryption_domain: FieldElement


class ECIESPoseidonEncryption:
    """Symmetric encryption over field elements, keyed by a single field element."""

    def __init__(self, params: DomainParameters, poseidon: Poseidon | None = None):
        self.params = params
        self.poseidon = poseidon or Poseidon()

    @classmethod
    def setup(cls, message: str) -> 'ECIESPoseidonEncryption':
        """Initialize a new instance from the given setup message."""
        generator, _, _ = hash_to_curve(message)
        params = DomainParameters(
            generator=generator,
            symmetric_key_commitment_domain=FieldElement.from_bytes_le_mod_order(
                SYMMETRIC_KEY_COMMITMENT_TAG),
            symmetric_encryption_domain=FieldElement.from_bytes_le_mod_order(
                SYMMETRIC_ENCRYPTION_TAG),
        )
        return cls(params)

    @property
    def generator(self) -> EdwardsPoint:
        return self.params.generator

    # --- Message codec ---

    def encode_message(self, message: list, env=NATIVE) -> list:
        """Pack bits (LSB first) into field elements of CAPACITY bits each.

        A final `true` bit marks where the message ends, so the result is never
        empty and the last element is never zero.
        """
        bits = list(message)
        bits.append(env.boolean(True))
        return [env.from_bits_le(bits[i:i + CAPACITY])
                for i in range(0, len(bits), CAPACITY)]

    def decode_message(self, encoded_message: list, env=NATIVE) -> list:
        """Unpack field elements into the bits given to encode_message.

        Raises MalformedEncodingError (through env.halt) if the elements carry
        no terminator, use bits beyond CAPACITY, or leave a message whose
        length is not a whole number of bytes.
        """
        if not encoded_message:
            env.halt("Cannot decode an empty sequence of field elements.")

        bits = []
        for element in encoded_message:
            element_bits = env.to_bits_le(element)
            high_bits = element_bits[CAPACITY:]
            if any(env.eject(bit) for bit in high_bits):
                env.halt("A packed field element exceeds the encoding capacity.")
            # Zero high bits also pin the low CAPACITY bits, since 2^CAPACITY < PRIME
            for bit in high_bits:
                env.assert_equal(bit, env.constant(0), "encoding capacity")
            bits.extend(element_bits[:CAPACITY])

        # Drop the trailing zeros and the terminating `true` bit. The scan
        # reads witness values, so it runs natively on both backends.
        while bits:
            if env.eject(bits.pop()):
                break
        else:
            env.halt("The packed field elements contain no terminator bit.")

        if len(bits) % 8 != 0:
            env.halt("The number of bits in the packed field elements is not a multiple of 8.")
        return bits

    def encode_bytes(self, data: bytes, env=NATIVE) -> list:
        bits = [env.witness_boolean(bit) for bit in bytes_to_bits_le(data)]
        return self.encode_message(bits, env)

    def decode_bytes(self, encoded_message: list, env=NATIVE) -> bytes:
        bits = self.decode_message(encoded_message, env)
        return bits_to_bytes_le(env.eject(bit) for bit in bits)

    # --- Stream cipher ---

    def _keystream(self, symmetric_key, length: int, env) -> list:
        domain = env.constant(self.params.symmetric_encryption_domain)
        return self.poseidon.hash_many(env, [domain, symmetric_key], length)

    def encrypt(self, symmetric_key, message: list, env=NATIVE) -> list:
        """Symmetrically encrypt field elements under the given key."""
        if not message:
            return []
        randomizers = self._keystream(symmetric_key, len(message), env)
        return [env.add(plaintext, randomizer)
                for plaintext, randomizer in zip(message, randomizers, strict=True)]

    def decrypt(self, symmetric_key, ciphertext: list, env=NATIVE) -> list:
        """Decrypt field elements produced by encrypt under the same key."""
        if not ciphertext:
            return []
        randomizers = self._keystream(symmetric_key, len(ciphertext), env)
        return [env.sub(element, randomizer)
                for element, randomizer in zip(ciphertext, randomizers, strict=True)]

    def symmetric_key_commitment(self, symmetric_key, env=NATIVE):
        """Hiding commitment to the key, domain-separated from the keystream."""
        domain = env.constant(self.params.symmetric_key_commitment_domain)
        return self.poseidon.hash(env, [domain, symmetric_key])
