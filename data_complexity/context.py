"""
data_complexity.context
=======================
The per-call context handed to every measure: a logger and a seeded
random number generator.  Passing it explicitly keeps measures free of
global state, so two runs with the same seed give the same values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np


__all__ = ["MeasureContext", "resolve_context"]


@dataclass
class MeasureContext:
    """Logger and random source shared by the measures of one run.

    Parameters
    ----------
    logger : logging.Logger, optional
        Destination of progress, warning and error messages.  Defaults to
        the ``data_complexity`` logger.
    rng : numpy.random.Generator, optional
        Random source for the interpolation sampler and the SMO trainer.
    """

    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("data_complexity")
    )
    rng: np.random.Generator = field(default_factory=np.random.default_rng)

    @classmethod
    def from_seed(cls, seed: int | None = None,
                  logger: logging.Logger | None = None) -> "MeasureContext":
        """Build a context whose generator is seeded with ``seed``."""
        if logger is None:
            logger = logging.getLogger("data_complexity")
        return cls(logger=logger, rng=np.random.default_rng(seed))


def resolve_context(context: MeasureContext | None) -> MeasureContext:
    """Return ``context`` or a fresh unseeded one."""
    if context is None:
        return MeasureContext()
    return context
