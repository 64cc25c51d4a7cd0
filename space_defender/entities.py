"""Moving objects of the playfield: bullets, enemies, heart pickups and the player."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .speed import SpeedManager

SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600
FRAME_TIME = 0.016


@dataclass
class Vec2D:
    """A point or direction in the plane."""

    x: float = 0.0
    y: float = 0.0


@dataclass
class Rect:
    """An axis-aligned integer rectangle."""

    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0

    def intersects(self, other: Rect) -> bool:
        """Whether the two rectangles share any area; empty ones never do."""
        if self.w <= 0 or self.h <= 0 or other.w <= 0 or other.h <= 0:
            return False
        horizontal = max(self.x, other.x) < min(self.x + self.w, other.x + other.w)
        vertical = max(self.y, other.y) < min(self.y + self.h, other.y + other.h)
        return horizontal and vertical


@dataclass
class _Entity(ABC):
    position: Vec2D = field(default_factory=Vec2D)
    velocity: Vec2D = field(default_factory=Vec2D)
    rect: Rect = field(default_factory=Rect)

    @abstractmethod
    def update(self, dt: float) -> None:
        """Advance the object by ``dt`` seconds."""


class Bullet(_Entity):
    """A shot travelling up the screen at the current bullet speed."""

    def __init__(self, x: int, y: int, w: int, h: int, speed: int, manager: SpeedManager):
        super().__init__(rect=Rect(x, y, w, h))
        self.base_speed = speed
        self.manager = manager
        self.current_speed = manager.bullet_speed

    def update(self, dt: float) -> None:
        self.current_speed = self.manager.bullet_speed
        self.rect.y -= int(self.current_speed * dt)


class Enemy(_Entity):
    """A foe falling down the screen at the current enemy speed."""

    def __init__(
        self,
        x: int,
        y: int,
        w: int,
        h: int,
        speed: int,
        manager: SpeedManager,
        textures: Sequence[Any] = (),
    ):
        super().__init__(rect=Rect(x, y, w, h))
        self.base_speed = speed
        self.manager = manager
        self.textures = textures
        self.texture_index = 0
        self.destroyed = False
        self.current_speed = manager.enemy_speed

    def update(self, dt: float) -> None:
        self.current_speed = self.manager.enemy_speed
        self.rect.y += int(self.current_speed * dt)
        if self.rect.y > SCREEN_HEIGHT:
            self.destroyed = True

    def destroy(self) -> None:
        """Mark the enemy as gone."""
        self.destroyed = True


class Heart(_Entity):
    """A falling pickup that restores lives."""

    def __init__(
        self,
        x: int,
        y: int,
        w: int,
        h: int,
        health: int,
        speed: int,
        texture: Any = None,
    ):
        super().__init__(position=Vec2D(x, y), rect=Rect(x, y, w, h))
        self.health = health
        self.speed = speed
        self.texture = texture

    def update(self, dt: float) -> None:
        self.position.y += self.speed * dt
        self.rect.y = int(self.position.y)


class Player(_Entity):
    """The ship steered by the player, kept inside the screen."""

    def __init__(
        self,
        x: int,
        y: int,
        w: int,
        h: int,
        manager: SpeedManager,
        texture: Any = None,
    ):
        super().__init__(rect=Rect(x, y, w, h))
        self.manager = manager
        self.texture = texture
        self.speed = manager.player_speed

    def move(self, dx: int, dy: int) -> None:
        """Shift by a direction scaled with the current player speed, then clamp."""
        self.speed = self.manager.player_speed
        rect = self.rect
        rect.x += int(dx * self.speed * FRAME_TIME)
        rect.y += int(dy * self.speed * FRAME_TIME)
        if rect.x < 0:
            rect.x = 0
        if rect.y < 0:
            rect.y = 0
        if rect.x + rect.w > SCREEN_WIDTH:
            rect.x = SCREEN_WIDTH - rect.w
        if rect.y + rect.h > SCREEN_HEIGHT:
            rect.y = SCREEN_HEIGHT - rect.h

    def update(self, dt: float) -> None:
        self.speed = self.manager.player_speed