"""Per-tick glue between a live agent's brain and the host world."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from .brain import Brain
from .sensors import MotorOutputs, SensorInputs

if TYPE_CHECKING:
    from .genepool import GenePool, PoolEntry


class AgentHost(Protocol):
    """What the world must offer for agents to be controlled."""

    @property
    def arena_size(self) -> float: ...

    def sense(self, agent_id: int) -> SensorInputs: ...

    def actuate(self, agent_id: int, outputs: MotorOutputs) -> None: ...


@dataclass(slots=True)
class AgentController:
    """Owns a live agent's brain for the duration of its life."""

    agent_id: int
    brain: Brain
    ticks: int = 0
    last_inputs: SensorInputs | None = None
    last_outputs: MotorOutputs | None = None

    def think(self, inputs: SensorInputs, *, arena_size: float = 1.0) -> MotorOutputs:
        outputs = self.brain.process(inputs, arena_size=arena_size)
        self.last_inputs = inputs
        self.last_outputs = outputs
        self.ticks += 1
        return outputs

    def tick(self, host: AgentHost) -> MotorOutputs:
        """Read the world, run the brain and hand the commands back."""
        inputs = host.sense(self.agent_id)
        outputs = self.think(inputs, arena_size=host.arena_size)
        host.actuate(self.agent_id, outputs)
        return outputs

    def retire(self, pool: GenePool, fitness: float) -> PoolEntry:
        """Hand the brain back to the pool once the agent died."""
        return pool.preserve(self.brain, fitness)


__all__ = ["AgentController", "AgentHost"]
