"""Failure types shared by the field backends and the encryption gadget."""


class MalformedEncodingError(RuntimeError):
    """Field elements were not produced by a matching message encoder."""


class UnsatisfiedConstraintError(AssertionError):
    """An equality asserted during evaluation does not hold."""
