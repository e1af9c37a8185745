"""Poseidon permutation and duplex sponge, written once for both backends.

The permutation alternates full rounds (S-box on every lane) and partial
rounds (S-box on the first lane only), each preceded by round-constant
addition and followed by an MDS mix. The S-box is x^alpha.
"""

import hashlib
from dataclasses import dataclass
from functools import lru_cache

from core.field import FieldElement, SIZE_IN_BYTES

RATE = 2
CAPACITY_LANES = 1
ALPHA = 17
FULL_ROUNDS = 8
PARTIAL_ROUNDS = 31

CONSTANTS_SEED = b"PoseidonRoundConstants"


@dataclass(frozen=True)
class PoseidonParameters:
    rate: int
    capacity: int
    alpha: int
    full_rounds: int
    partial_rounds: int
    ark: tuple[tuple[FieldElement, ...], ...]  # one row of `width` constants per round
    mds: tuple[tuple[FieldElement, ...], ...]

    @property
    def width(self) -> int:
        return self.rate + self.capacity


def _round_constants(width: int, num_rounds: int) -> tuple[tuple[FieldElement, ...], ...]:
    """Expand CONSTANTS_SEED with SHAKE-256; 16 spare bytes per constant before reduction."""
    chunk = SIZE_IN_BYTES + 16
    stream = hashlib.shake_256(CONSTANTS_SEED + bytes([width, num_rounds])).digest(
        chunk * width * num_rounds)
    constants = [FieldElement.from_bytes_le_mod_order(stream[i:i + chunk])
                 for i in range(0, len(stream), chunk)]
    return tuple(tuple(constants[r * width:(r + 1) * width]) for r in range(num_rounds))


def _cauchy_mds(width: int) -> tuple[tuple[FieldElement, ...], ...]:
    """M[i][j] = 1 / (x_i + y_j) with x_i = i, y_j = width + j."""
    return tuple(
        tuple(FieldElement(i + width + j).inverse() for j in range(width))
        for i in range(width)
    )


@lru_cache(maxsize=None)
def default_parameters(rate: int = RATE) -> PoseidonParameters:
    width = rate + CAPACITY_LANES
    num_rounds = FULL_ROUNDS + PARTIAL_ROUNDS
    return PoseidonParameters(
        rate=rate,
        capacity=CAPACITY_LANES,
        alpha=ALPHA,
        full_rounds=FULL_ROUNDS,
        partial_rounds=PARTIAL_ROUNDS,
        ark=_round_constants(width, num_rounds),
        mds=_cauchy_mds(width),
    )


class Poseidon:
    """Poseidon hash over an arithmetic backend (native or circuit)."""

    def __init__(self, parameters: PoseidonParameters | None = None):
        self.parameters = parameters or default_parameters()
        # Capacity lane starts at "Poseidon{rate}" so different rates never collide
        self.domain = FieldElement.from_bytes_le_mod_order(
            f"Poseidon{self.parameters.rate}".encode())

    def hash(self, env, inputs: list):
        return self.hash_many(env, inputs, 1)[0]

    def hash_many(self, env, inputs: list, num_outputs: int) -> list:
        """Absorb inputs, then squeeze num_outputs field elements."""
        params = self.parameters
        state = [env.constant(self.domain)] + \
            [env.constant(0) for _ in range(params.rate)]

        # Absorb: add into rate lanes, permuting whenever they fill up
        position = 0
        for element in inputs:
            if position == params.rate:
                state = self.permute(env, state)
                position = 0
            lane = params.capacity + position
            state[lane] = env.add(state[lane], element)
            position += 1

        # Squeeze: permute, emit the rate lanes, repeat
        outputs = []
        while len(outputs) < num_outputs:
            state = self.permute(env, state)
            outputs.extend(state[params.capacity:])
        return outputs[:num_outputs]

    def permute(self, env, state: list) -> list:
        params = self.parameters
        half_full = params.full_rounds // 2
        total = params.full_rounds + params.partial_rounds
        state = list(state)
        for round_index in range(total):
            state = [env.add(lane, env.constant(c))
                     for lane, c in zip(state, params.ark[round_index])]
            is_full = round_index < half_full or round_index >= total - half_full
            if is_full:
                state = [self._sbox(env, lane) for lane in state]
            else:
                state[0] = self._sbox(env, state[0])
            state = self._mix(env, state)
        return state

    def _sbox(self, env, x):
        """x^alpha by square-and-multiply."""
        result = None
        power = x
        exp = self.parameters.alpha
        while exp:
            if exp & 1:
                result = power if result is None else env.mul(result, power)
            exp >>= 1
            if exp:
                power = env.mul(power, power)
        return result

    def _mix(self, env, state: list) -> list:
        mixed = []
        for row in self.parameters.mds:
            acc = env.scalar_mul(row[0], state[0])
            for coeff, lane in zip(row[1:], state[1:]):
                acc = env.add(acc, env.scalar_mul(coeff, lane))
            mixed.append(acc)
        return mixed
