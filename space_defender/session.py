"""Rules of a round: menu flow, input, spawning, collisions, lives and highscore."""

from __future__ import annotations

import logging
import random
import re
import time
from collections.abc import Callable, Sequence
from enum import Enum, IntEnum, auto
from pathlib import Path
from typing import Any

from .entities import SCREEN_HEIGHT, SCREEN_WIDTH, Bullet, Enemy, Heart, Player
from .speed import SpeedManager

logger = logging.getLogger(__name__)

START_LIVES = 7
MAX_LIVES = 10
ENEMY_SPAWN_DELAY = 800
HIT_ANIMATION_MS = 200
HIGHSCORE_FILE = "highscore.txt"

PLAYER_WIDTH = 31
PLAYER_HEIGHT = 40
BULLET_WIDTH = 4
BULLET_HEIGHT = 10
ENEMY_WIDTH = 40
ENEMY_HEIGHT = 20
ENEMY_SPAWN_Y = 50
HEART_SIZE = 30
HEART_SPAWN_Y = -50
HEART_SPEED_FACTOR = 0.6

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class GameState(Enum):
    """The screen the game is showing."""

    MENU = auto()
    PLAYER_SELECTION = auto()
    PLAYING = auto()
    GAME_OVER = auto()


class PlayerChoice(IntEnum):
    """The selectable characters, in selection order."""

    TRUMP = 0
    CARLOS = 1
    BLUEY = 2


class Key(Enum):
    """Keys the game reacts to; everything else is OTHER."""

    LEFT = auto()
    RIGHT = auto()
    UP = auto()
    DOWN = auto()
    SPACE = auto()
    RETURN = auto()
    F11 = auto()
    OTHER = auto()


class Sound(Enum):
    """Sound effects requested by the game rules."""

    HIT = auto()
    MISS = auto()
    GAME_OVER = auto()
    LASER = auto()


def _default_clock() -> Callable[[], int]:
    origin = time.monotonic_ns()
    return lambda: (time.monotonic_ns() - origin) // 1_000_000


def update_player_movement(
    player: Player, left: bool, right: bool, up: bool, down: bool, speed: int
) -> None:
    """Move the player in the direction of the held keys."""
    dx = (speed if right else 0) - (speed if left else 0)
    dy = (speed if down else 0) - (speed if up else 0)
    if dx or dy:
        player.move(dx, dy)


def handle_bullet_enemy_collisions(
    bullets: list[Bullet], enemies: list[Enemy], manager: SpeedManager
) -> int:
    """Remove each bullet with the first enemy it hits; return the number of hits.

    Every hit adds one point to ``manager``.
    """
    hits = 0
    remaining: list[Bullet] = []
    for bullet in bullets:
        target = next(
            (enemy for enemy in enemies if bullet.rect.intersects(enemy.rect)), None
        )
        if target is None:
            remaining.append(bullet)
            continue
        enemies.remove(target)
        manager.add_score(1)
        hits += 1
    bullets[:] = remaining
    return hits


def handle_player_enemy_collisions(player: Player, enemies: list[Enemy]) -> int:
    """Remove every enemy touching the player; return how many there were."""
    survivors = [enemy for enemy in enemies if not player.rect.intersects(enemy.rect)]
    collisions = len(enemies) - len(survivors)
    enemies[:] = survivors
    return collisions


class GameSession:
    """State and rules of the game, independent of any window or audio device."""

    def __init__(
        self,
        highscore_path: str | Path = HIGHSCORE_FILE,
        manager: SpeedManager | None = None,
        clock: Callable[[], int] | None = None,
        rng: random.Random | None = None,
        choices: int = len(PlayerChoice),
        pickups_enabled: bool = True,
    ):
        if not 0 <= choices <= len(PlayerChoice):
            raise ValueError(f"choices must be between 0 and {len(PlayerChoice)}")
        self.highscore_path = Path(highscore_path)
        self.manager = manager if manager is not None else SpeedManager()
        self.clock = clock if clock is not None else _default_clock()
        self.rng = rng if rng is not None else random.Random()
        self.choices = choices
        self.pickups_enabled = pickups_enabled
        self.heart_texture: Any = None
        self.enemy_textures: Sequence[Any] = ()

        self.state = GameState.MENU
        self.game_over = False
        self.selected_player = PlayerChoice.TRUMP
        self.selection_index = 0
        self.holding = {Key.LEFT: False, Key.RIGHT: False, Key.UP: False, Key.DOWN: False}
        self.lives = START_LIVES
        self.hit_animation_active = False
        self.hit_animation_start = 0
        self.score = 0
        self.highscore = 0
        self.last_enemy_spawn_time = 0
        self.last_heart_spawn_score = -1

        self.bullets: list[Bullet] = []
        self.enemies: list[Enemy] = []
        self.hearts: list[Heart] = []
        self._sounds: list[Sound] = []

        self.player = Player(
            SCREEN_WIDTH // 2 - PLAYER_WIDTH // 2,
            SCREEN_HEIGHT - PLAYER_HEIGHT,
            PLAYER_WIDTH,
            PLAYER_HEIGHT,
            self.manager,
        )

    def _start_round(self) -> None:
        self.score = 0
        self.lives = START_LIVES
        self.enemies.clear()
        self.bullets.clear()
        self.hearts.clear()
        self.last_heart_spawn_score = -1
        self.player.move(
            SCREEN_WIDTH // 2 - PLAYER_WIDTH // 2 - self.player.rect.x,
            SCREEN_HEIGHT - PLAYER_HEIGHT - self.player.rect.y,
        )
        self.last_enemy_spawn_time = self.clock()
        self.manager.reset_game()

    def key_down(self, key: Key) -> None:
        """React to a key being pressed in the current state."""
        if self.state is GameState.MENU:
            self.state = GameState.PLAYER_SELECTION
        elif self.state is GameState.PLAYER_SELECTION:
            if key is Key.LEFT and self.choices:
                self.selection_index = (self.selection_index - 1) % self.choices
            elif key is Key.RIGHT and self.choices:
                self.selection_index = (self.selection_index + 1) % self.choices
            elif key in (Key.RETURN, Key.SPACE):
                self.selected_player = PlayerChoice(self.selection_index)
                self.state = GameState.PLAYING
                self._start_round()
        elif self.state is GameState.GAME_OVER:
            if key is Key.RETURN:
                self.state = GameState.PLAYER_SELECTION
                self.game_over = False
                self._start_round()
        elif self.state is GameState.PLAYING:
            if key in self.holding:
                self.holding[key] = True
            elif key is Key.SPACE:
                self._fire()

    def key_up(self, key: Key) -> None:
        """React to a key being released."""
        if self.state is GameState.PLAYING and key in self.holding:
            self.holding[key] = False

    def _fire(self) -> None:
        rect = self.player.rect
        self.bullets.append(
            Bullet(
                rect.x + rect.w // 2 - 2,
                rect.y,
                BULLET_WIDTH,
                BULLET_HEIGHT,
                int(self.manager.bullet_speed / 60.0),
                self.manager,
            )
        )
        self._sounds.append(Sound.LASER)

    def update(self, dt: float) -> None:
        """Advance a running round by ``dt`` seconds."""
        if self.state is not GameState.PLAYING:
            return
        now = self.clock()

        if self.hit_animation_active and now - self.hit_animation_start > HIT_ANIMATION_MS:
            self.hit_animation_active = False

        if (
            self.score % 10 == 5
            and 5 <= self.score <= 45
            and self.score != self.last_heart_spawn_score
            and not self.hearts
        ):
            self._spawn_heart()
            self.last_heart_spawn_score = self.score

        player_speed = self.manager.player_speed
        enemy_speed = self.manager.enemy_speed

        update_player_movement(
            self.player,
            self.holding[Key.LEFT],
            self.holding[Key.RIGHT],
            self.holding[Key.UP],
            self.holding[Key.DOWN],
            int(player_speed * dt),
        )

        for bullet in self.bullets:
            bullet.update(dt)
        self.bullets = [b for b in self.bullets if b.rect.y + b.rect.h >= 0]

        remaining: list[Enemy] = []
        for enemy in self.enemies:
            enemy.update(dt)
            if enemy.rect.y > SCREEN_HEIGHT:
                self.lose_life()
            else:
                remaining.append(enemy)
        self.enemies = remaining

        collisions = handle_player_enemy_collisions(self.player, self.enemies)
        if collisions:
            self.lives -= collisions
            self.hit_animation_active = True
            self.hit_animation_start = self.clock()
            self._sounds.extend([Sound.HIT] * collisions)

        kept_hearts: list[Heart] = []
        for heart in self.hearts:
            heart.update(dt)
            if heart.rect.y > SCREEN_HEIGHT:
                continue
            if self.player.rect.intersects(heart.rect):
                self.gain_life()
                continue
            kept_hearts.append(heart)
        self.hearts = kept_hearts

        hits = handle_bullet_enemy_collisions(self.bullets, self.enemies, self.manager)
        self.score += hits
        self._sounds.extend([Sound.HIT] * hits)

        if self.lives <= 0:
            self._sounds.append(Sound.GAME_OVER)
            self.state = GameState.GAME_OVER
            self.game_over = True
            self.save_highscore()
            return

        speed_level = self.manager.score // 10 + 1
        if len(self.enemies) < 5 + speed_level:
            self._spawn_enemy(int(enemy_speed))

    def _spawn_enemy(self, enemy_speed: int) -> None:
        now = self.clock()
        if now - self.last_enemy_spawn_time <= ENEMY_SPAWN_DELAY:
            return
        x = self.rng.randrange(SCREEN_WIDTH - ENEMY_WIDTH)
        self.enemies.append(
            Enemy(
                x,
                ENEMY_SPAWN_Y,
                ENEMY_WIDTH,
                ENEMY_HEIGHT,
                enemy_speed,
                self.manager,
                self.enemy_textures,
            )
        )
        self.last_enemy_spawn_time = self.clock()

    def _spawn_heart(self) -> None:
        if not self.pickups_enabled or self.hearts:
            return
        x = self.rng.randrange(SCREEN_WIDTH - HEART_SIZE)
        speed = int(self.manager.enemy_speed * HEART_SPEED_FACTOR)
        self.hearts.append(
            Heart(x, HEART_SPAWN_Y, HEART_SIZE, HEART_SIZE, 1, speed, self.heart_texture)
        )
        logger.info("Extra heart on screen")

    def lose_life(self) -> None:
        """Take a life for an enemy that got past the player."""
        self.lives -= 1
        self._sounds.append(Sound.MISS)
        self.hit_animation_active = True
        self.hit_animation_start = self.clock()
        logger.info("Life lost, %d remaining", self.lives)

    def gain_life(self) -> None:
        """Add a life unless the maximum has been reached."""
        if self.lives < MAX_LIVES:
            self.lives += 1
            logger.info("Extra life, %d remaining", self.lives)
        else:
            logger.info("Extra life wasted, maximum reached")

    def load_highscore(self) -> int:
        """Read the highscore from its file; a missing or unreadable file gives 0."""
        try:
            text = self.highscore_path.read_text()
        except OSError:
            logger.warning("No highscore file found, highscore set to 0")
            self.highscore = 0
            return self.highscore
        match = _LEADING_INT.match(text)
        self.highscore = int(match.group(1)) if match else 0
        return self.highscore

    def save_highscore(self) -> bool:
        """Store the round's score if it beats the highscore; report whether it did."""
        if self.score <= self.highscore:
            return False
        self.highscore = self.score
        try:
            self.highscore_path.write_text(str(self.highscore))
        except OSError:
            logger.error("Unable to open highscore file for writing")
        else:
            logger.info("New highscore: %d", self.highscore)
        return True

    def drain_sounds(self) -> list[Sound]:
        """Return the sounds requested since the last call and forget them."""
        sounds, self._sounds = self._sounds, []
        return sounds