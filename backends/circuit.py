"""Circuit backend: builds a rank-1 constraint system while evaluating.

Every value is a linear combination of witness variables plus a constant, and
carries its witness value alongside. Additions and scalings are free; each
product of two non-constant values allocates a variable and one constraint
a * b = c. The witness values let gadgets be evaluated exactly as on the
native backend, and is_satisfied() re-checks every constraint afterwards.
"""

from core.errors import MalformedEncodingError
from core.field import FieldElement, SIZE_IN_BITS
from backends.metrics import Metrics


class LinearCombination:
    """sum(coeff * w_i) + constant over the variables of one ConstraintSystem."""

    __slots__ = ('system', 'terms', 'constant', 'value')

    def __init__(self, system: 'ConstraintSystem', terms: dict[int, FieldElement],
                 constant: FieldElement, value: FieldElement):
        self.system = system
        self.terms = terms
        self.constant = constant
        self.value = value

    def is_constant(self) -> bool:
        return not self.terms

    def __repr__(self):
        kind = "Constant" if self.is_constant() else "Variable"
        return f"{kind}({self.value.value})"


class Boolean(LinearCombination):
    """A linear combination whose value is known to be 0 or 1."""

    __slots__ = ()

    def __repr__(self):
        kind = "Constant" if self.is_constant() else "Variable"
        return f"{kind}Boolean({bool(self.value)})"


class ConstraintSystem:
    """Constraint-emitting field and boolean operations.

    Holds per-circuit state; use one instance per synthesized circuit.
    """

    def __init__(self):
        self._values: list[FieldElement] = []
        self._public: set[int] = set()
        self._constraints: list[tuple[LinearCombination, LinearCombination,
                                      LinearCombination, str]] = []
        self.metrics = Metrics()

    # --- Allocation ---

    def constant(self, value) -> LinearCombination:
        if not isinstance(value, FieldElement):
            value = FieldElement(value)
        self.metrics.constants += 1
        return LinearCombination(self, {}, value, value)

    def witness(self, value, public: bool = False) -> LinearCombination:
        if not isinstance(value, FieldElement):
            value = FieldElement(value)
        index = len(self._values)
        self._values.append(value)
        if public:
            self._public.add(index)
            self.metrics.public += 1
        else:
            self.metrics.private += 1
        return LinearCombination(self, {index: FieldElement.one()},
                                 FieldElement.zero(), value)

    def boolean(self, value: bool) -> Boolean:
        element = FieldElement(int(bool(value)))
        self.metrics.constants += 1
        return Boolean(self, {}, element, element)

    def witness_boolean(self, value: bool, public: bool = False) -> Boolean:
        var = self.witness(int(bool(value)), public)
        bit = Boolean(self, var.terms, var.constant, var.value)
        # b * (1 - b) = 0
        self.enforce(bit, self.sub(self.constant(1), bit), self.constant(0),
                     "booleanity")
        return bit

    # --- Linear operations (no constraints) ---

    def add(self, a: LinearCombination, b: LinearCombination) -> LinearCombination:
        self._check(a, b)
        terms = dict(a.terms)
        for index, coeff in b.terms.items():
            terms[index] = terms.get(index, FieldElement.zero()) + coeff
        terms = {i: c for i, c in terms.items() if c}
        return LinearCombination(self, terms, a.constant + b.constant,
                                 a.value + b.value)

    def sub(self, a: LinearCombination, b: LinearCombination) -> LinearCombination:
        return self.add(a, self.scalar_mul(FieldElement(-1), b))

    def scalar_mul(self, constant, a: LinearCombination) -> LinearCombination:
        if isinstance(constant, LinearCombination):
            assert constant.is_constant(), "scalar_mul needs a constant multiplier"
            constant = constant.constant
        self._check(a)
        if not constant:
            return LinearCombination(self, {}, FieldElement.zero(), FieldElement.zero())
        terms = {i: constant * c for i, c in a.terms.items()}
        return LinearCombination(self, terms, constant * a.constant,
                                 constant * a.value)

    # --- Non-linear operations ---

    def mul(self, a: LinearCombination, b: LinearCombination) -> LinearCombination:
        self._check(a, b)
        if a.is_constant():
            return self.scalar_mul(a.constant, b)
        if b.is_constant():
            return self.scalar_mul(b.constant, a)
        product = self.witness(a.value * b.value)
        self.enforce(a, b, product, "multiplication")
        return product

    def to_bits_le(self, a: LinearCombination) -> list[Boolean]:
        """Decompose into SIZE_IN_BITS boolean variables, least-significant first.

        Constrains the bits to recompose to `a`.
        """
        # TODO: enforce that the bits encode an integer below PRIME, so the
        # decomposition is unique for values in [PRIME, 2^SIZE_IN_BITS).
        self._check(a)
        if a.is_constant():
            return [self.boolean(bit) for bit in a.constant.to_bits_le()]
        bits = [self.witness_boolean(bit) for bit in a.value.to_bits_le()]
        self.enforce(self.from_bits_le(bits), self.constant(1), a,
                     "bit decomposition")
        return bits

    def from_bits_le(self, bits) -> LinearCombination:
        bits = list(bits)
        if len(bits) > SIZE_IN_BITS:
            raise ValueError(f"Expected at most {SIZE_IN_BITS} bits, got {len(bits)}")
        result = LinearCombination(self, {}, FieldElement.zero(), FieldElement.zero())
        for i, bit in enumerate(bits):
            result = self.add(result, self.scalar_mul(FieldElement(1 << i), bit))
        return result

    # --- Assertions ---

    def enforce(self, a: LinearCombination, b: LinearCombination,
                c: LinearCombination, msg: str = "constraint"):
        """Record the constraint a * b = c."""
        self._check(a, b, c)
        self._constraints.append((a, b, c, msg))
        self.metrics.constraints += 1

    def assert_equal(self, a: LinearCombination, b: LinearCombination,
                     msg: str = "values differ"):
        self.enforce(self.sub(a, b), self.constant(1), self.constant(0), msg)

    def halt(self, msg: str):
        """Record an unsatisfiable constraint and abort synthesis."""
        self.enforce(self.constant(0), self.constant(0), self.constant(1), msg)
        raise MalformedEncodingError(msg)

    def eject(self, value):
        if isinstance(value, Boolean):
            return bool(value.value)
        if isinstance(value, LinearCombination):
            return value.value
        return value

    # --- Inspection ---

    @property
    def num_constraints(self) -> int:
        return len(self._constraints)

    @property
    def num_variables(self) -> int:
        return len(self._values)

    def public_inputs(self) -> list[FieldElement]:
        return [self._values[i] for i in sorted(self._public)]

    def unsatisfied(self) -> list[str]:
        """Messages of every constraint the current witness violates."""
        failing = []
        for a, b, c, msg in self._constraints:
            if self._evaluate(a) * self._evaluate(b) != self._evaluate(c):
                failing.append(msg)
        return failing

    def is_satisfied(self) -> bool:
        return not self.unsatisfied()

    def _evaluate(self, lc: LinearCombination) -> FieldElement:
        total = lc.constant
        for index, coeff in lc.terms.items():
            total = total + coeff * self._values[index]
        return total

    def _check(self, *values):
        for value in values:
            assert isinstance(value, LinearCombination), \
                f"Expected a circuit value, got {type(value).__name__}"
            assert value.system is self, "Circuit value belongs to a different ConstraintSystem"
