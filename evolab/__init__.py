"""Neuroevolution primitives for arena agents: brains, gene pool and round FSM."""

from __future__ import annotations

from .activations import MUTATION_CANDIDATES, ActivationFunction
from .brain import Brain, Genotype, MutationConfig, ShapeMismatchError
from .config import EvolutionConfig, RunConfig, load_evolution_config, load_run_config
from .controller import AgentController, AgentHost
from .export import find_signals, from_record, pretty_print, to_record, write_dot
from .genepool import GenePool, GenePoolConfig, PoolEntry
from .genes import Neuron
from .metrics import MetricsWriter, RoundMetrics
from .persistence import PoolCheckpoint, load_checkpoint, save_checkpoint
from .reporters import EventLogger
from .sensors import (
    INPUT_COUNT,
    OUTPUT_COUNT,
    MotorOutputs,
    SensorInputs,
    decode_outputs,
    normalize_inputs,
)
from .state import Phase, RoundStateMachine, StateGroup

__all__ = [
    "ActivationFunction",
    "MUTATION_CANDIDATES",
    "Neuron",
    "Brain",
    "Genotype",
    "MutationConfig",
    "ShapeMismatchError",
    "SensorInputs",
    "MotorOutputs",
    "INPUT_COUNT",
    "OUTPUT_COUNT",
    "normalize_inputs",
    "decode_outputs",
    "GenePool",
    "GenePoolConfig",
    "PoolEntry",
    "RoundStateMachine",
    "StateGroup",
    "Phase",
    "AgentController",
    "AgentHost",
    "to_record",
    "from_record",
    "pretty_print",
    "write_dot",
    "find_signals",
    "EvolutionConfig",
    "RunConfig",
    "load_evolution_config",
    "load_run_config",
    "EventLogger",
    "MetricsWriter",
    "RoundMetrics",
    "PoolCheckpoint",
    "save_checkpoint",
    "load_checkpoint",
]
