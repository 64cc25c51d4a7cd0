"""Score-driven speed progression shared by every moving object in a round."""

from __future__ import annotations

from dataclasses import dataclass, field

BASE_BULLET_SPEED = 600.0
BASE_ENEMY_SPEED = 120.0
BASE_PLAYER_SPEED = 150.0

BULLET_SPEED_STEP = 80.0
ENEMY_SPEED_STEP = 30.0
PLAYER_SPEED_STEP = 20.0

MAX_BULLET_SPEED = 1500.0
MAX_ENEMY_SPEED = 400.0
MAX_PLAYER_SPEED = 500.0

POINTS_PER_LEVEL = 10


@dataclass
class SpeedManager:
    """Tracks the score of a round and the speeds that follow from it.

    Every ``POINTS_PER_LEVEL`` points the bullet, enemy and player speeds
    rise by a fixed step per level, each up to its own ceiling.
    """

    base_bullet_speed: float = BASE_BULLET_SPEED
    base_enemy_speed: float = BASE_ENEMY_SPEED
    base_player_speed: float = BASE_PLAYER_SPEED
    bullet_speed: float = field(init=False)
    enemy_speed: float = field(init=False)
    player_speed: float = field(init=False)
    score: int = field(init=False, default=0)
    last_speed_update: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.reset_game()

    def update_speeds(self) -> None:
        """Raise the speeds when the score has reached a new level."""
        # Truncating division, as integer division does for negative scores too.
        level = int(self.score / POINTS_PER_LEVEL)
        if level <= self.last_speed_update:
            return
        self.last_speed_update = level
        self.bullet_speed = min(
            self.base_bullet_speed + BULLET_SPEED_STEP * level, MAX_BULLET_SPEED
        )
        self.enemy_speed = min(
            self.base_enemy_speed + ENEMY_SPEED_STEP * level, MAX_ENEMY_SPEED
        )
        self.player_speed = min(
            self.base_player_speed + PLAYER_SPEED_STEP * level, MAX_PLAYER_SPEED
        )

    def add_score(self, points: int) -> None:
        """Add points to the score and adjust the speeds."""
        self.score += points
        self.update_speeds()

    def reset_game(self) -> None:
        """Clear the score and return every speed to its base value."""
        self.score = 0
        self.last_speed_update = 0
        self.bullet_speed = self.base_bullet_speed
        self.enemy_speed = self.base_enemy_speed
        self.player_speed = self.base_player_speed