from __future__ import annotations

from random import Random

from evolab.brain import Brain
from evolab.controller import AgentController
from evolab.genepool import GenePool
from evolab.sensors import MotorOutputs, SensorInputs


class _FakeHost:
    arena_size = 100.0

    def __init__(self) -> None:
        self.inputs = SensorInputs(target_angle=0.4, target_distance=30.0, time_survived=1.5)
        self.commands: list[tuple[int, MotorOutputs]] = []

    def sense(self, agent_id: int) -> SensorInputs:
        return self.inputs

    def actuate(self, agent_id: int, outputs: MotorOutputs) -> None:
        self.commands.append((agent_id, outputs))


def test_tick_runs_brain_against_host() -> None:
    brain = Brain.randomized(4, Random(7))
    host = _FakeHost()
    controller = AgentController(agent_id=3, brain=brain)

    outputs = controller.tick(host)

    assert outputs == brain.process(host.inputs, arena_size=host.arena_size)
    assert host.commands == [(3, outputs)]
    assert controller.ticks == 1
    assert controller.last_inputs == host.inputs
    assert controller.last_outputs == outputs


def test_brain_is_fixed_for_the_agent_life() -> None:
    brain = Brain.randomized(4, Random(7))
    host = _FakeHost()
    controller = AgentController(agent_id=0, brain=brain)
    for _ in range(5):
        controller.tick(host)
    assert controller.brain is brain
    assert controller.ticks == 5
    assert len({outputs for _, outputs in host.commands}) == 1


def test_retire_preserves_brain_in_pool() -> None:
    pool = GenePool.new_eden(rng=Random(0))
    brain = Brain.randomized(3, Random(2))
    controller = AgentController(agent_id=0, brain=brain)

    entry = controller.retire(pool, 12.0)

    assert entry.genotype == brain
    assert entry.fitness == 12.0
    assert pool.find(brain) is entry
