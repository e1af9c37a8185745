"""Arithmetic backends: native evaluation and constraint-system synthesis."""

from backends.native import NativeArithmetic, NATIVE
from backends.circuit import ConstraintSystem, LinearCombination, Boolean
from backends.metrics import Metrics
