"""Activation functions available to brain neurons."""

from __future__ import annotations

import math
from enum import Enum

LEAKY_SLOPE = 0.01


def _logistic(x: float) -> float:
    if x >= 0:
        z = math.exp(-x)
        return 1.0 / (1.0 + z)
    z = math.exp(x)
    return z / (1.0 + z)


def _gaussian(x: float) -> float:
    # exp underflows to 0.0 for large |x|; x * x may overflow to inf, which is fine.
    return math.exp(-(x * x))


class ActivationFunction(str, Enum):
    """Closed set of activation functions a neuron may use."""

    STEP01 = "step01"
    STEP_NEG_POS = "step_neg_pos"
    LINEAR = "linear"
    LOGISTIC = "logistic"
    TANH = "tanh"
    RELU = "relu"
    LEAKY_RELU = "leaky_relu"
    GAUSSIAN = "gaussian"

    @classmethod
    def coerce(cls, value: ActivationFunction | str) -> ActivationFunction:
        """Coerce a string or ActivationFunction into an ActivationFunction."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            msg = f"Unsupported activation value: {value!r}"
            raise TypeError(msg)
        try:
            return cls(value.strip().lower())
        except ValueError as error:
            valid = ", ".join(member.value for member in cls)
            msg = f"Invalid activation {value!r}. Expected one of: {valid}"
            raise ValueError(msg) from error

    def apply(self, x: float) -> float:
        return _FUNCTIONS[self](x)

    @property
    def glyph(self) -> str:
        """Single-character label used by graph exports."""
        return _GLYPHS.get(self, "?")


_FUNCTIONS = {
    ActivationFunction.STEP01: lambda x: 1.0 if x > 0.0 else 0.0,
    ActivationFunction.STEP_NEG_POS: lambda x: 1.0 if x > 0.0 else -1.0,
    ActivationFunction.LINEAR: lambda x: x,
    ActivationFunction.LOGISTIC: _logistic,
    ActivationFunction.TANH: math.tanh,
    ActivationFunction.RELU: lambda x: x if x > 0.0 else 0.0,
    ActivationFunction.LEAKY_RELU: lambda x: x if x > 0.0 else x * LEAKY_SLOPE,
    ActivationFunction.GAUSSIAN: _gaussian,
}

_GLYPHS = {
    ActivationFunction.GAUSSIAN: "I",
    ActivationFunction.LINEAR: "/",
    ActivationFunction.LOGISTIC: "S",
    ActivationFunction.STEP01: "L",
    ActivationFunction.RELU: "v",
}

MUTATION_CANDIDATES: tuple[ActivationFunction, ...] = (
    ActivationFunction.LINEAR,
    ActivationFunction.STEP01,
    ActivationFunction.GAUSSIAN,
    ActivationFunction.RELU,
    ActivationFunction.LOGISTIC,
)


__all__ = ["ActivationFunction", "LEAKY_SLOPE", "MUTATION_CANDIDATES"]
