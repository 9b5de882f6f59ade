"""Inspection helpers: flat records, text dumps, Graphviz graphs and signal traces."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TextIO

from .activations import ActivationFunction
from .brain import BIAS_INPUT, Brain
from .genes import Neuron
from .sensors import SensorInputs, normalize_inputs


def _layer_record(layer: Sequence[Neuron]) -> list[dict[str, Any]]:
    return [
        {"activation": neuron.activation.value, "weights": list(neuron.weights)}
        for neuron in layer
    ]


def _layer_from_record(data: Any, label: str) -> tuple[Neuron, ...]:
    if not isinstance(data, Sequence) or isinstance(data, str):
        msg = f"Expected a list of neurons for {label!r}."
        raise ValueError(msg)
    neurons = []
    for item in data:
        if not isinstance(item, Mapping):
            msg = f"Expected a mapping per neuron in {label!r}, got {item!r}."
            raise ValueError(msg)
        neurons.append(
            Neuron(
                weights=tuple(item["weights"]),
                activation=ActivationFunction.coerce(item["activation"]),
            )
        )
    return tuple(neurons)


def to_record(brain: Brain) -> dict[str, Any]:
    """Flatten a brain into plain lists and strings (YAML/JSON friendly)."""
    return {
        "mutations": brain.mutations,
        "hidden_layer": _layer_record(brain.hidden_layer),
        "output_layer": _layer_record(brain.output_layer),
    }


def from_record(record: Mapping[str, Any]) -> Brain:
    """Rebuild a brain from ``to_record`` output."""
    try:
        hidden = _layer_from_record(record["hidden_layer"], "hidden_layer")
        output = _layer_from_record(record["output_layer"], "output_layer")
    except KeyError as error:
        msg = f"Brain record is missing {error.args[0]!r}"
        raise ValueError(msg) from error
    return Brain(
        hidden_layer=hidden,
        output_layer=output,
        mutations=int(record.get("mutations", 0)),
    )


def pretty_print(brain: Brain) -> str:
    lines = [f"Mut {brain.mutations}"]
    for title, layer in (("Hidden", brain.hidden_layer), ("Out", brain.output_layer)):
        lines.append(title)
        for neuron in layer:
            weights = " ".join(f"{weight:.3f}" for weight in neuron.weights)
            lines.append(f"    {neuron.activation.value}: {weights}")
    return "\n".join(lines) + "\n"


def _rank(names: Sequence[str]) -> str:
    return "    { rank=same " + " ".join(names) + " }"


def write_dot(brain: Brain, handle: TextIO, *, name: str = "Brain") -> None:
    """Write the network as a Graphviz digraph, one edge per weight."""
    handle.write(f"digraph {name} {{\n")
    layers = (
        ("I", brain.input_count),
        ("H", brain.hidden_count),
        ("O", brain.output_count - 1),
    )
    for prefix, count in layers:
        handle.write(_rank([f"{prefix}{index}" for index in range(count + 1)]) + "\n")
    for prefix, source, layer in (
        ("H", "I", brain.hidden_layer),
        ("O", "H", brain.output_layer),
    ):
        for index, neuron in enumerate(layer):
            node = f"{prefix}{index}"
            handle.write(f'    {node} [label="{node}\\n{neuron.activation.glyph}"]\n')
            for synapse, weight in enumerate(neuron.weights):
                handle.write(
                    f'    {source}{synapse} -> {node} [label="{weight:.3f}"]\n'
                )
    handle.write("}\n")


@dataclass(frozen=True, slots=True)
class InputSignal:
    node: int
    value: float


@dataclass(frozen=True, slots=True)
class SynapseSignal:
    source: int
    target: int
    value: float


@dataclass(frozen=True, slots=True)
class NeuronSignal:
    node: int
    raw_value: float
    activation_value: float


Signal = InputSignal | SynapseSignal | NeuronSignal


def _layer_signals(
    layer: Sequence[Neuron],
    inputs: Sequence[float],
    input_offset: int,
    node_offset: int,
) -> tuple[list[Signal], list[float]]:
    signals: list[Signal] = []
    outputs: list[float] = []
    for index, neuron in enumerate(layer):
        node = node_offset + index
        raw_value = 0.0
        for synapse, (value, weight) in enumerate(
            zip(inputs, neuron.weights, strict=True)
        ):
            product = value * weight
            raw_value += product
            if weight != 0.0:
                signals.append(
                    SynapseSignal(
                        source=input_offset + synapse,
                        target=node,
                        value=product,
                    )
                )
        activation_value = neuron.activation.apply(raw_value)
        signals.append(
            NeuronSignal(
                node=node,
                raw_value=raw_value,
                activation_value=activation_value,
            )
        )
        outputs.append(activation_value)
    return signals, outputs


def find_signals(
    brain: Brain,
    inputs: SensorInputs,
    *,
    arena_size: float = 1.0,
) -> list[Signal]:
    """Trace every value flowing through the network for live viewers.

    Node ids are numbered across layers: inputs (bias last), hidden neurons
    (bias last), then outputs. Disconnected synapses are omitted.
    """
    values = [*normalize_inputs(inputs, arena_size=arena_size), BIAS_INPUT]
    signals: list[Signal] = [
        InputSignal(node=index, value=value) for index, value in enumerate(values)
    ]
    hidden_offset = len(values)
    hidden_signals, hidden = _layer_signals(
        brain.hidden_layer, values, 0, hidden_offset
    )
    hidden.append(BIAS_INPUT)
    output_offset = hidden_offset + len(hidden)
    output_signals, _outputs = _layer_signals(
        brain.output_layer, hidden, hidden_offset, output_offset
    )
    return signals + hidden_signals + output_signals


__all__ = [
    "InputSignal",
    "NeuronSignal",
    "Signal",
    "SynapseSignal",
    "find_signals",
    "from_record",
    "pretty_print",
    "to_record",
    "write_dot",
]
