"""Game states driving arena rounds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from evolab.state import StateGroup


class Mode(str, Enum):
    """Who controls the hero in the arena."""

    AI = "ai"
    PLAYER = "player"


class Stage(str, Enum):
    BEGIN = "begin"
    MAIN_MENU = "main_menu"
    MANAGER = "manager"
    ARENA = "arena"
    ARENA_PAUSE = "arena_pause"
    # Round summary: the world still runs but the action is finished.
    ARENA_OVER = "arena_over"
    # Helper to clean up the arena between rounds.
    BETWEEN_ROUNDS = "between_rounds"


_ARENA_STAGES = (Stage.ARENA, Stage.ARENA_PAUSE, Stage.ARENA_OVER)


@dataclass(frozen=True, slots=True)
class GameState:
    """A stage, plus the control mode for the arena stages."""

    stage: Stage
    mode: Mode | None = None

    def __post_init__(self) -> None:
        needs_mode = self.stage in _ARENA_STAGES
        if needs_mode and self.mode is None:
            msg = f"{self.stage.value} requires a mode."
            raise ValueError(msg)
        if not needs_mode and self.mode is not None:
            msg = f"{self.stage.value} does not take a mode."
            raise ValueError(msg)

    @classmethod
    def arena(cls, mode: Mode = Mode.AI) -> GameState:
        return cls(Stage.ARENA, mode)

    @classmethod
    def arena_pause(cls, mode: Mode = Mode.AI) -> GameState:
        return cls(Stage.ARENA_PAUSE, mode)

    @classmethod
    def arena_over(cls, mode: Mode = Mode.AI) -> GameState:
        return cls(Stage.ARENA_OVER, mode)

    def is_live_arena(self) -> bool:
        """Play is not over yet."""
        return self.stage in (Stage.ARENA, Stage.ARENA_PAUSE)

    def is_arena(self) -> bool:
        return self.arena_mode() is not None

    def arena_mode(self) -> Mode | None:
        return self.mode if self.stage in _ARENA_STAGES else None


BEGIN = GameState(Stage.BEGIN)
MAIN_MENU = GameState(Stage.MAIN_MENU)
MANAGER = GameState(Stage.MANAGER)
BETWEEN_ROUNDS = GameState(Stage.BETWEEN_ROUNDS)

ALL_STATES: tuple[GameState, ...] = (
    BEGIN,
    MAIN_MENU,
    MANAGER,
    BETWEEN_ROUNDS,
    *(
        GameState(stage, mode)
        for stage in _ARENA_STAGES
        for mode in Mode
    ),
)

ARENA_GROUP: StateGroup[GameState] = StateGroup.matching(
    GameState.is_arena, ALL_STATES
)
LIVE_ARENA_GROUP: StateGroup[GameState] = StateGroup.matching(
    GameState.is_live_arena, ALL_STATES
)


__all__ = [
    "ALL_STATES",
    "ARENA_GROUP",
    "BEGIN",
    "BETWEEN_ROUNDS",
    "GameState",
    "LIVE_ARENA_GROUP",
    "MAIN_MENU",
    "MANAGER",
    "Mode",
    "Stage",
]
