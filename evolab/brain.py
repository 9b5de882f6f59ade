"""Two-layer feed-forward brain and its mutation/crossover operators."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from random import Random

from .activations import MUTATION_CANDIDATES, ActivationFunction
from .genes import BARELY_CONNECTED, Neuron
from .sensors import (
    INPUT_COUNT,
    OUTPUT_COUNT,
    MotorOutputs,
    SensorInputs,
    decode_outputs,
    normalize_inputs,
)

BIAS_INPUT = 1.0


class ShapeMismatchError(ValueError):
    """Raised when two brains with different layer shapes are crossed over."""


@dataclass(frozen=True, slots=True)
class MutationConfig:
    """Per-gene rates of the mutation operator.

    Every rate is multiplied by the mutation strength before being used as
    the probability of an independent Bernoulli trial.
    """

    weight_deviation: float = 0.5
    weight_rate: float = 1.0
    connect_rate: float = 0.15
    disconnect_rate: float = 0.25
    activation_rate: float = 0.4
    activation_options: tuple[ActivationFunction, ...] = MUTATION_CANDIDATES

    def __post_init__(self) -> None:
        if self.weight_deviation <= 0.0:
            msg = "weight_deviation must be positive."
            raise ValueError(msg)
        for label, value in (
            ("weight_rate", self.weight_rate),
            ("connect_rate", self.connect_rate),
            ("disconnect_rate", self.disconnect_rate),
            ("activation_rate", self.activation_rate),
        ):
            if value < 0.0:
                msg = f"{label} must be >= 0."
                raise ValueError(msg)
        options = tuple(
            ActivationFunction.coerce(option) for option in self.activation_options
        )
        if not options:
            msg = "activation_options must not be empty."
            raise ValueError(msg)
        object.__setattr__(self, "activation_options", options)


def _probability(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _process_layer(neurons: Sequence[Neuron], inputs: Sequence[float]) -> list[float]:
    """Evaluate a fully connected layer, appending the bias input first."""
    biased = [*inputs, BIAS_INPUT]
    return [neuron.feed(biased) for neuron in neurons]


def _dumb_hidden_layer(
    hidden_count: int,
    input_count: int,
    output_count: int,
) -> tuple[Neuron, ...]:
    connected = [Neuron.barely_connected(input_count) for _ in range(output_count)]
    inert = [
        Neuron.unconnected(input_count) for _ in range(output_count, hidden_count)
    ]
    return tuple(connected + inert)


def _dumb_output_layer(output_count: int, hidden_count: int) -> tuple[Neuron, ...]:
    neurons = []
    for index in range(output_count):
        # Only the hidden neuron directly "above" is connected; overflow stays inert.
        weights = list(Neuron.unconnected(hidden_count).weights)
        weights[index] = BARELY_CONNECTED
        neurons.append(Neuron(weights=tuple(weights)))
    return tuple(neurons)


@dataclass(frozen=True, slots=True)
class Brain:
    """Genotype controlling an agent: one hidden layer and one output layer.

    Brains are immutable values. Mutation and crossover return new brains,
    so a brain handed to a live agent never changes underneath it. Equality
    is structural over the layers; ``mutations`` only tracks lineage depth.
    """

    hidden_layer: tuple[Neuron, ...]
    output_layer: tuple[Neuron, ...]
    mutations: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        hidden = tuple(self.hidden_layer)
        output = tuple(self.output_layer)
        if not hidden or not output:
            msg = "Brain layers must contain at least one neuron each."
            raise ValueError(msg)
        input_count = hidden[0].synapse_count
        for neuron in hidden:
            if neuron.synapse_count != input_count:
                msg = (
                    "Hidden neurons must share one weight count; got "
                    f"{len(neuron.weights)} and {input_count + 1}."
                )
                raise ValueError(msg)
        for neuron in output:
            if neuron.synapse_count != len(hidden):
                msg = (
                    f"Output neurons need {len(hidden) + 1} weights, "
                    f"got {len(neuron.weights)}."
                )
                raise ValueError(msg)
        object.__setattr__(self, "hidden_layer", hidden)
        object.__setattr__(self, "output_layer", output)

    @classmethod
    def new_dumb(
        cls,
        hidden_count: int,
        *,
        input_count: int = INPUT_COUNT,
        output_count: int = OUTPUT_COUNT,
    ) -> Brain:
        """Build a nearly inert brain that passes a damped signal through."""
        if hidden_count < output_count:
            msg = f"hidden_count must be >= output_count ({output_count})."
            raise ValueError(msg)
        return cls(
            hidden_layer=_dumb_hidden_layer(hidden_count, input_count, output_count),
            output_layer=_dumb_output_layer(output_count, hidden_count),
        )

    @classmethod
    def randomized(
        cls,
        hidden_count: int,
        rng: Random,
        *,
        weight_range: float = 1.0,
        input_count: int = INPUT_COUNT,
        output_count: int = OUTPUT_COUNT,
    ) -> Brain:
        """Build a brain with uniform random weights in ``[-range, range]``."""
        if weight_range <= 0.0:
            msg = "weight_range must be positive."
            raise ValueError(msg)

        def layer(count: int, synapses: int) -> tuple[Neuron, ...]:
            return tuple(
                Neuron(
                    weights=tuple(
                        rng.uniform(-weight_range, weight_range)
                        for _ in range(synapses + 1)
                    )
                )
                for _ in range(count)
            )

        return cls(
            hidden_layer=layer(hidden_count, input_count),
            output_layer=layer(output_count, hidden_count),
        )

    @property
    def input_count(self) -> int:
        return self.hidden_layer[0].synapse_count

    @property
    def hidden_count(self) -> int:
        return len(self.hidden_layer)

    @property
    def output_count(self) -> int:
        return len(self.output_layer)

    def shape(self) -> tuple[tuple[int, ...], tuple[int, ...]]:
        """Weight counts of every neuron, per layer."""
        return (
            tuple(len(neuron.weights) for neuron in self.hidden_layer),
            tuple(len(neuron.weights) for neuron in self.output_layer),
        )

    def copy(self) -> Brain:
        return Brain(
            hidden_layer=self.hidden_layer,
            output_layer=self.output_layer,
            mutations=self.mutations,
        )

    def process_raw(self, values: Sequence[float]) -> list[float]:
        """Run a forward pass over an already normalised input vector."""
        if len(values) != self.input_count:
            msg = f"Expected {self.input_count} inputs but received {len(values)}."
            raise ValueError(msg)
        hidden = _process_layer(self.hidden_layer, values)
        return _process_layer(self.output_layer, hidden)

    def process(self, inputs: SensorInputs, *, arena_size: float = 1.0) -> MotorOutputs:
        """Turn sensor readings into motor commands."""
        values = normalize_inputs(inputs, arena_size=arena_size)
        return decode_outputs(self.process_raw(values))

    def mutate(
        self,
        strength: float,
        rng: Random,
        config: MutationConfig | None = None,
    ) -> Brain:
        """Return a randomly altered copy. ``self`` is left untouched."""
        if config is None:
            config = MutationConfig()
        connect_p = _probability(strength * config.connect_rate)
        disconnect_p = _probability(strength * config.disconnect_rate)
        weight_p = _probability(strength * config.weight_rate)
        activation_p = _probability(strength * config.activation_rate)

        def mutate_neuron(neuron: Neuron) -> Neuron:
            weights: list[float] = []
            for weight in neuron.weights:
                if weight == 0.0:
                    if rng.random() < connect_p:
                        weight = rng.gauss(0.0, config.weight_deviation)
                elif rng.random() < disconnect_p:
                    weight = 0.0
                elif rng.random() < weight_p:
                    weight += rng.gauss(0.0, config.weight_deviation)
                weights.append(weight)
            activation = neuron.activation
            if rng.random() < activation_p:
                activation = rng.choice(config.activation_options)
            return neuron.copy(weights=weights, activation=activation)

        return Brain(
            hidden_layer=tuple(mutate_neuron(n) for n in self.hidden_layer),
            output_layer=tuple(mutate_neuron(n) for n in self.output_layer),
            mutations=self.mutations + 1,
        )

    def mutate_times(
        self,
        times: int,
        strength: float,
        rng: Random,
        config: MutationConfig | None = None,
    ) -> Brain:
        """Apply ``mutate`` repeatedly."""
        if times < 0:
            msg = "times must be >= 0."
            raise ValueError(msg)
        brain = self
        for _ in range(times):
            brain = brain.mutate(strength, rng, config)
        return brain

    def mix_with(self, other: Brain, rng: Random) -> Brain:
        """Uniform crossover: each gene comes from one parent, chosen by coin flip."""
        if self.shape() != other.shape():
            msg = f"Cannot mix brains of shapes {self.shape()} and {other.shape()}."
            raise ShapeMismatchError(msg)

        def mix_neuron(first: Neuron, second: Neuron) -> Neuron:
            weights = tuple(
                w0 if rng.random() < 0.5 else w1
                for w0, w1 in zip(first.weights, second.weights, strict=True)
            )
            activation = first.activation if rng.random() < 0.5 else second.activation
            return Neuron(weights=weights, activation=activation)

        def mix_layer(
            first: Sequence[Neuron],
            second: Sequence[Neuron],
        ) -> tuple[Neuron, ...]:
            return tuple(
                mix_neuron(n0, n1) for n0, n1 in zip(first, second, strict=True)
            )

        return Brain(
            hidden_layer=mix_layer(self.hidden_layer, other.hidden_layer),
            output_layer=mix_layer(self.output_layer, other.output_layer),
            mutations=self.mutations + other.mutations,
        )


Genotype = Brain


__all__ = [
    "BIAS_INPUT",
    "Brain",
    "Genotype",
    "MutationConfig",
    "ShapeMismatchError",
]
