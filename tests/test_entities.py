import pytest

from space_defender.entities import (
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    Bullet,
    Enemy,
    Heart,
    Player,
    Rect,
    Vec2D,
)
from space_defender.speed import SpeedManager


@pytest.fixture
def manager():
    return SpeedManager()


def test_vec2d_defaults_to_origin():
    assert Vec2D() == Vec2D(0.0, 0.0)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (Rect(0, 0, 10, 10), Rect(5, 5, 10, 10), True),
        (Rect(0, 0, 10, 10), Rect(10, 0, 10, 10), False),
        (Rect(0, 0, 10, 10), Rect(0, 10, 10, 10), False),
        (Rect(0, 0, 10, 10), Rect(2, 2, 3, 3), True),
        (Rect(0, 0, 0, 10), Rect(0, 0, 10, 10), False),
        (Rect(0, 0, 10, 10), Rect(50, 50, 10, 10), False),
    ],
)
def test_rect_intersects(a, b, expected):
    assert a.intersects(b) is expected
    assert b.intersects(a) is expected


def test_bullet_moves_up(manager):
    bullet = Bullet(100, 500, 4, 10, 10, manager)
    bullet.update(0.1)
    assert bullet.rect.y < 500
    assert bullet.rect.x == 100


def test_bullet_zero_dt_does_not_move(manager):
    bullet = Bullet(100, 500, 4, 10, 10, manager)
    bullet.update(0.0)
    assert bullet.rect == Rect(100, 500, 4, 10)


def test_bullet_follows_manager_speed(manager):
    bullet = Bullet(0, 0, 4, 10, 10, manager)
    assert bullet.current_speed == manager.bullet_speed
    manager.add_score(30)
    bullet.update(0.0)
    assert bullet.current_speed == manager.bullet_speed
    assert bullet.base_speed == 10


def test_faster_bullet_travels_further():
    slow, fast = SpeedManager(), SpeedManager()
    fast.add_score(50)
    slow_bullet = Bullet(0, 1000, 4, 10, 10, slow)
    fast_bullet = Bullet(0, 1000, 4, 10, 10, fast)
    slow_bullet.update(0.1)
    fast_bullet.update(0.1)
    assert fast_bullet.rect.y < slow_bullet.rect.y


def test_enemy_moves_down_and_survives_on_screen(manager):
    enemy = Enemy(10, 50, 40, 20, 2, manager)
    enemy.update(0.1)
    assert enemy.rect.y > 50
    assert enemy.destroyed is False


def test_enemy_destroyed_below_screen(manager):
    enemy = Enemy(10, SCREEN_HEIGHT, 40, 20, 2, manager)
    enemy.update(0.1)
    assert enemy.rect.y > SCREEN_HEIGHT
    assert enemy.destroyed is True


def test_enemy_at_bottom_edge_is_not_destroyed(manager):
    enemy = Enemy(10, SCREEN_HEIGHT, 40, 20, 2, manager)
    enemy.update(0.0)
    assert enemy.destroyed is False


def test_enemy_destroy(manager):
    enemy = Enemy(10, 50, 40, 20, 2, manager, ["a", "b"])
    enemy.destroy()
    assert enemy.destroyed is True
    assert enemy.textures == ["a", "b"]
    assert enemy.texture_index == 0


def test_heart_keeps_fractional_position():
    split = Heart(0, -50, 30, 30, 1, 72, texture="t")
    whole = Heart(0, -50, 30, 30, 1, 72, texture="t")
    split.update(0.25)
    split.update(0.25)
    whole.update(0.5)
    assert split.position.y == pytest.approx(whole.position.y)
    assert split.rect.y == int(split.position.y)
    assert split.rect.y > -50


def test_heart_keeps_health_and_size():
    heart = Heart(5, 6, 30, 31, 1, 10)
    assert heart.health == 1
    assert (heart.rect.w, heart.rect.h) == (30, 31)
    assert heart.position == Vec2D(5, 6)
    assert heart.texture is None


def test_player_zero_move_keeps_position(manager):
    player = Player(384, 560, 31, 40, manager)
    player.move(0, 0)
    assert (player.rect.x, player.rect.y) == (384, 560)


def test_player_clamped_at_top_left(manager):
    player = Player(100, 100, 31, 40, manager)
    player.move(-10**6, -10**6)
    assert (player.rect.x, player.rect.y) == (0, 0)


def test_player_clamped_at_bottom_right(manager):
    player = Player(100, 100, 31, 40, manager)
    player.move(10**6, 10**6)
    assert player.rect.x == SCREEN_WIDTH - player.rect.w
    assert player.rect.y == SCREEN_HEIGHT - player.rect.h


def test_player_moves_in_requested_direction(manager):
    player = Player(300, 300, 31, 40, manager)
    player.move(5, -5)
    assert player.rect.x > 300
    assert player.rect.y < 300


def test_player_speed_tracks_manager(manager):
    player = Player(300, 300, 31, 40, manager)
    manager.add_score(20)
    player.update(0.016)
    assert player.speed == manager.player_speed
    assert player.speed > 150.0