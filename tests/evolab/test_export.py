from __future__ import annotations

import io
import math
from random import Random

import pytest
from evolab.brain import Brain
from evolab.export import (
    InputSignal,
    NeuronSignal,
    SynapseSignal,
    find_signals,
    from_record,
    pretty_print,
    to_record,
    write_dot,
)
from evolab.sensors import SensorInputs


def test_record_restores_brain() -> None:
    brain = Brain.randomized(4, Random(3)).mutate_times(2, 0.5, Random(4))
    record = to_record(brain)
    assert record["mutations"] == 2
    assert isinstance(record["hidden_layer"][0]["activation"], str)

    restored = from_record(record)
    assert restored == brain
    assert restored.mutations == 2


def test_from_record_rejects_incomplete_records() -> None:
    record = to_record(Brain.new_dumb(3))
    del record["output_layer"]
    with pytest.raises(ValueError, match="output_layer"):
        from_record(record)
    with pytest.raises(ValueError):
        from_record({"hidden_layer": "oops", "output_layer": []})


def test_pretty_print_lists_layers() -> None:
    text = pretty_print(Brain.new_dumb(3))
    lines = text.splitlines()
    assert lines[0] == "Mut 0"
    assert lines[1] == "Hidden"
    assert lines[2] == "    linear: 0.001 0.001 0.001 0.001"
    assert "Out" in lines
    assert lines[-1] == "    linear: 0.000 0.000 0.001 0.000"


def test_write_dot_emits_one_edge_per_weight() -> None:
    brain = Brain.new_dumb(3)
    handle = io.StringIO()
    write_dot(brain, handle, name="Champion")
    dot = handle.getvalue()

    assert dot.startswith("digraph Champion {\n")
    assert dot.endswith("}\n")
    assert "{ rank=same I0 I1 I2 I3 }" in dot
    assert "{ rank=same H0 H1 H2 H3 }" in dot
    assert "{ rank=same O0 O1 O2 }" in dot
    assert 'I0 -> H0 [label="0.001"]' in dot
    assert 'H3 -> O2 [label="0.000"]' in dot
    assert dot.count("->") == 3 * 4 + 3 * 4


def test_find_signals_traces_forward_pass() -> None:
    brain = Brain.new_dumb(3)
    inputs = SensorInputs(target_angle=math.pi / 2, target_distance=50.0, time_survived=2.0)
    signals = find_signals(brain, inputs, arena_size=100.0)

    input_signals = [s for s in signals if isinstance(s, InputSignal)]
    synapses = [s for s in signals if isinstance(s, SynapseSignal)]
    neurons = [s for s in signals if isinstance(s, NeuronSignal)]

    assert [s.node for s in input_signals] == [0, 1, 2, 3]
    assert [s.value for s in input_signals] == pytest.approx([0.5, 0.5, 2.0, 1.0])
    # Disconnected synapses are left out: the output bias and off-diagonal weights.
    assert len(synapses) == 12 + 3
    assert [s.node for s in neurons] == [4, 5, 6, 8, 9, 10]

    first_hidden = sum(s.value for s in synapses if s.target == 4)
    assert first_hidden == pytest.approx(0.004)

    expected = brain.process_raw([0.5, 0.5, 2.0])
    outputs = [s.activation_value for s in neurons[-3:]]
    assert outputs == pytest.approx(expected)
