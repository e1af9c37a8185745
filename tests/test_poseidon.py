"""Tests for the Poseidon permutation and sponge."""

from backends import NATIVE, ConstraintSystem
from circuits.poseidon import Poseidon, default_parameters
from core.field import FieldElement
from tests.utils import random_elements, witness_elements


def test_parameters_shape():
    params = default_parameters()
    assert params.width == 3
    assert len(params.ark) == params.full_rounds + params.partial_rounds
    assert all(len(row) == params.width for row in params.ark)
    assert len(params.mds) == params.width


def test_parameters_cached():
    assert default_parameters() is default_parameters()


def test_hash_many_length():
    poseidon = Poseidon()
    inputs = [FieldElement(1), FieldElement(2)]
    for n in (1, 2, 3, 7):
        assert len(poseidon.hash_many(NATIVE, inputs, n)) == n


def test_hash_many_prefix_consistent():
    poseidon = Poseidon()
    inputs = [FieldElement(1), FieldElement(2)]
    assert poseidon.hash_many(NATIVE, inputs, 5)[:3] == poseidon.hash_many(NATIVE, inputs, 3)


def test_hash_deterministic():
    poseidon = Poseidon()
    inputs = [FieldElement(3), FieldElement(4), FieldElement(5)]
    assert poseidon.hash(NATIVE, inputs) == Poseidon().hash(NATIVE, inputs)


def test_hash_input_sensitive():
    poseidon = Poseidon()
    assert poseidon.hash(NATIVE, [FieldElement(1), FieldElement(2)]) != \
        poseidon.hash(NATIVE, [FieldElement(2), FieldElement(1)])
    assert poseidon.hash(NATIVE, [FieldElement(1)]) != \
        poseidon.hash(NATIVE, [FieldElement(2)])


def test_outputs_distinct():
    outputs = Poseidon().hash_many(NATIVE, [FieldElement(9)], 6)
    assert len(set(outputs)) == 6


def test_circuit_matches_native():
    poseidon = Poseidon()
    inputs = random_elements(3)
    expected = poseidon.hash_many(NATIVE, inputs, 4)

    cs = ConstraintSystem()
    outputs = poseidon.hash_many(cs, witness_elements(cs, inputs), 4)
    assert [cs.eject(o) for o in outputs] == expected
    assert cs.num_constraints > 0
    assert cs.is_satisfied()


def test_circuit_constant_inputs_need_no_constraints():
    poseidon = Poseidon()
    cs = ConstraintSystem()
    out = poseidon.hash(cs, [cs.constant(1), cs.constant(2)])
    assert cs.eject(out) == poseidon.hash(NATIVE, [FieldElement(1), FieldElement(2)])
    assert cs.num_constraints == 0
