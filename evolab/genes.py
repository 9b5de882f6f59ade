"""Neuron primitive used to build brain layers."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from .activations import ActivationFunction

UNCONNECTED = 0.0
BARELY_CONNECTED = 0.001


@dataclass(frozen=True, slots=True)
class Neuron:
    """Weighted sum of inputs passed through an activation function.

    The last weight multiplies the implicit bias input, which is always 1.0.
    """

    weights: tuple[float, ...]
    activation: ActivationFunction = ActivationFunction.LINEAR

    def __post_init__(self) -> None:
        try:
            weights = tuple(float(weight) for weight in self.weights)
        except (TypeError, ValueError) as error:
            msg = f"weights must be convertible to floats, got {self.weights!r}"
            raise ValueError(msg) from error
        if not weights:
            msg = "A neuron needs at least the bias weight."
            raise ValueError(msg)
        if not all(math.isfinite(weight) for weight in weights):
            msg = "weights must be finite numbers."
            raise ValueError(msg)
        object.__setattr__(self, "weights", weights)
        object.__setattr__(
            self, "activation", ActivationFunction.coerce(self.activation)
        )

    @classmethod
    def unconnected(cls, synapse_count: int) -> Neuron:
        """Inert neuron: every weight, bias included, is zero."""
        return cls(weights=(UNCONNECTED,) * (synapse_count + 1))

    @classmethod
    def barely_connected(cls, synapse_count: int) -> Neuron:
        """Neuron that does as little as possible while staying fully connected."""
        return cls(weights=(BARELY_CONNECTED,) * (synapse_count + 1))

    @property
    def synapse_count(self) -> int:
        """Number of inputs, not counting the bias."""
        return len(self.weights) - 1

    def feed(self, inputs: Sequence[float]) -> float:
        """Return the activation of the weighted sum. ``inputs`` must include the bias."""
        if len(inputs) != len(self.weights):
            msg = (
                f"Expected {len(self.weights)} inputs (bias included) "
                f"but received {len(inputs)}."
            )
            raise ValueError(msg)
        total = 0.0
        for value, weight in zip(inputs, self.weights, strict=True):
            total += value * weight
        return self.activation.apply(total)

    def copy(
        self,
        *,
        weights: Sequence[float] | None = None,
        activation: ActivationFunction | None = None,
    ) -> Neuron:
        """Return a copy with optional field overrides."""
        return Neuron(
            weights=self.weights if weights is None else tuple(weights),
            activation=self.activation if activation is None else activation,
        )


__all__ = ["BARELY_CONNECTED", "Neuron", "UNCONNECTED"]
