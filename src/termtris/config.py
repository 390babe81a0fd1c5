"""Tunable game settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from .board import HEIGHT, WIDTH


# Points per lock indexed by the number of rows cleared, before the level
# multiplier.  Four rows pay more than four singles.
LINE_SCORES: Tuple[int, ...] = (0, 100, 300, 500, 800)


@dataclass(frozen=True)
class GameConfig:
    """Board size, scoring, fall speed and file locations for a game."""

    width: int = WIDTH
    height: int = HEIGHT
    line_scores: Tuple[int, ...] = LINE_SCORES
    lines_per_level: int = 10
    base_gravity_ms: float = 1000.0
    gravity_decay: float = 0.85
    min_gravity_ms: float = 100.0
    save_path: Path = Path("tetris_save.json")
    high_score_path: Path = Path("highscore.txt")

    def __post_init__(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ValueError("Board must be at least 4x4 to fit every tetromino")
        if len(self.line_scores) != 5:
            raise ValueError("line_scores needs an entry for 0 to 4 cleared rows")
        if any(b <= a for a, b in zip(self.line_scores, self.line_scores[1:])):
            raise ValueError("line_scores must be strictly increasing")
        if self.lines_per_level <= 0:
            raise ValueError("lines_per_level must be positive")
        if self.min_gravity_ms <= 0 or self.base_gravity_ms < self.min_gravity_ms:
            raise ValueError("Gravity intervals must be positive and base >= min")
        if not 0 < self.gravity_decay <= 1:
            raise ValueError("gravity_decay must be in (0, 1]")
        object.__setattr__(self, "save_path", Path(self.save_path))
        object.__setattr__(self, "high_score_path", Path(self.high_score_path))


DEFAULT_CONFIG = GameConfig()
