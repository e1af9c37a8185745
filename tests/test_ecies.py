"""Tests for the ECIES message codec and stream cipher (native backend)."""

import dataclasses
import math

import pytest

from circuits.ecies import ECIESPoseidonEncryption
from core import rng
from core.errors import MalformedEncodingError
from core.field import FieldElement, CAPACITY
from tests.utils import make_ecies, random_message_bits, random_elements, SETUP_MESSAGE


# --- Setup ---

def test_setup_deterministic():
    a = ECIESPoseidonEncryption.setup(SETUP_MESSAGE)
    b = ECIESPoseidonEncryption.setup(SETUP_MESSAGE)
    assert a.params == b.params


def test_setup_generator_depends_on_message():
    a = ECIESPoseidonEncryption.setup("first")
    b = ECIESPoseidonEncryption.setup("second")
    assert a.generator != b.generator
    assert a.generator.is_on_curve()


def test_domain_tags():
    params = make_ecies().params
    assert params.symmetric_encryption_domain == \
        int.from_bytes(b"AleoSymmetricEncryption0", "little")
    assert params.symmetric_key_commitment_domain == \
        int.from_bytes(b"AleoSymmetricKeyCommitment0", "little")
    assert params.symmetric_encryption_domain != params.symmetric_key_commitment_domain


def test_domain_parameters_immutable():
    params = make_ecies().params
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.symmetric_encryption_domain = FieldElement(0)


# --- Codec ---

def test_encode_example_byte():
    ecies = make_ecies()
    encoded = ecies.encode_message([True, False, True, False, False, False, False, False])
    # [1,0,1,0,0,0,0,0] plus the terminator at bit 8
    assert encoded == [FieldElement(0b100000101)]
    assert ecies.decode_message(encoded) == [True, False, True, False, False, False, False, False]


def test_encode_empty():
    ecies = make_ecies()
    encoded = ecies.encode_message([])
    assert encoded == [FieldElement(1)]
    assert ecies.decode_message(encoded) == []


@pytest.mark.parametrize("num_bytes", [1, 2, 31, 32, 33, 63, 64, 100])
def test_encode_length(num_bytes):
    ecies = make_ecies()
    bits = random_message_bits(num_bytes)
    encoded = ecies.encode_message(bits)
    assert len(encoded) == math.ceil((len(bits) + 1) / CAPACITY)


@pytest.mark.parametrize("num_bytes", [0, 1, 5, 31, 32, 63, 64, 200])
def test_codec_round_trip(num_bytes):
    ecies = make_ecies(seed=num_bytes)
    bits = random_message_bits(num_bytes)
    assert ecies.decode_message(ecies.encode_message(bits)) == bits


def test_codec_round_trip_trailing_zero_bytes():
    ecies = make_ecies()
    bits = [True] + [False] * 31
    assert ecies.decode_message(ecies.encode_message(bits)) == bits


def test_codec_boundary_full_element():
    # 248 message bits + terminator fit in one element; 256 bits spill into a second
    ecies = make_ecies()
    assert len(ecies.encode_message([False] * 248)) == 1
    assert len(ecies.encode_message([False] * 256)) == 2
    assert ecies.decode_message(ecies.encode_message([False] * 256)) == [False] * 256


def test_bytes_round_trip():
    ecies = make_ecies()
    data = b"The quick brown fox jumps over the lazy dog"
    assert ecies.decode_bytes(ecies.encode_bytes(data)) == data


def test_decode_not_byte_aligned():
    ecies = make_ecies()
    # Seven payload bits, then the terminator
    forged = FieldElement.from_bits_le([True] * 7 + [True])
    with pytest.raises(MalformedEncodingError):
        ecies.decode_message([forged])


def test_decode_empty():
    with pytest.raises(MalformedEncodingError):
        make_ecies().decode_message([])


def test_decode_no_terminator():
    with pytest.raises(MalformedEncodingError):
        make_ecies().decode_message([FieldElement.zero(), FieldElement.zero()])


def test_decode_capacity_mismatch():
    # An element using bit CAPACITY cannot come from encode_message
    with pytest.raises(MalformedEncodingError):
        make_ecies().decode_message([FieldElement(1 << CAPACITY)])


# --- Cipher ---

@pytest.mark.parametrize("length", [1, 2, 3, 10])
def test_encrypt_decrypt_round_trip(length):
    ecies = make_ecies(seed=length)
    key = FieldElement.random()
    message = random_elements(length)
    ciphertext = ecies.encrypt(key, message)
    assert len(ciphertext) == length
    assert ecies.decrypt(key, ciphertext) == message


def test_encrypt_empty():
    ecies = make_ecies()
    assert ecies.encrypt(FieldElement(7), []) == []
    assert ecies.decrypt(FieldElement(7), []) == []


def test_encrypt_deterministic():
    ecies = make_ecies()
    key = FieldElement.random()
    message = random_elements(4)
    assert ecies.encrypt(key, message) == ecies.encrypt(key, message)


def test_encrypt_changes_message():
    ecies = make_ecies()
    message = random_elements(3)
    ciphertext = ecies.encrypt(FieldElement.random(), message)
    assert all(c != m for c, m in zip(ciphertext, message))


def test_encrypt_key_sensitive():
    ecies = make_ecies()
    message = random_elements(3)
    assert ecies.encrypt(FieldElement(1), message) != ecies.encrypt(FieldElement(2), message)


def test_keystream_is_prefix_stable():
    # The i-th keystream element does not depend on the message length
    ecies = make_ecies()
    key = FieldElement.random()
    zeros = [FieldElement.zero()] * 5
    assert ecies.encrypt(key, zeros[:2]) == ecies.encrypt(key, zeros)[:2]


def test_full_pipeline():
    ecies = make_ecies()
    rng.set_seed(7)
    key = FieldElement.random()
    bits = random_message_bits(70)
    ciphertext = ecies.encrypt(key, ecies.encode_message(bits))
    assert ecies.decode_message(ecies.decrypt(key, ciphertext)) == bits


# --- Key commitment ---

def test_symmetric_key_commitment():
    ecies = make_ecies()
    key = FieldElement.random()
    commitment = ecies.symmetric_key_commitment(key)
    assert commitment == ecies.symmetric_key_commitment(key)
    assert commitment != ecies.symmetric_key_commitment(key + 1)


def test_commitment_separated_from_keystream():
    ecies = make_ecies()
    key = FieldElement.random()
    keystream = ecies.encrypt(key, [FieldElement.zero()])[0]
    assert ecies.symmetric_key_commitment(key) != keystream
