"""
data_complexity.exceptions
==========================
Error types raised by the measure routines.

Measure entry points catch these, log them and return
:data:`~data_complexity.config.MEASURE_ERROR`, so a batch over many
datasets keeps going.
"""

__all__ = [
    "ComplexityError",
    "EmptyClassError",
    "SingularMatrixError",
    "TwoClassOnlyError",
]


class ComplexityError(Exception):
    """Base class for all data_complexity errors."""


class TwoClassOnlyError(ComplexityError, ValueError):
    """A two-class-only measure was applied to a dataset with m != 2 classes."""

    def __init__(self, measure: str, n_classes: int):
        self.measure = measure
        self.n_classes = n_classes
        super().__init__(
            f"[{measure}] can only be applied to two-class data sets "
            f"(this one has {n_classes} classes)."
        )


class EmptyClassError(ComplexityError, ValueError):
    """A class has no examples, so it cannot be sampled."""

    def __init__(self, class_index: int):
        self.class_index = class_index
        super().__init__(f"Class {class_index} has 0 examples.")


class SingularMatrixError(ComplexityError, ArithmeticError):
    """Gauss-Jordan elimination found no usable pivot."""
