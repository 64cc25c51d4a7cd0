import os
import shutil
import wave
from pathlib import Path

import pygame
import pytest

from space_defender.app import (
    GameApp,
    compute_scale,
    heart_slots,
    load_assets,
    main,
)
from space_defender.entities import SCREEN_HEIGHT, SCREEN_WIDTH
from space_defender.session import GameState, PlayerChoice, Sound

RED = (255, 0, 0)


def _write_wav(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as out:
        out.setnchannels(1)
        out.setsampwidth(2)
        out.setframerate(22050)
        out.writeframes(b"\x00\x00" * 64)


def _write_png(path: Path, color) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    surface = pygame.Surface((8, 8))
    surface.fill(color)
    pygame.image.save(surface, str(path))


def _make_assets(root: Path, with_images: bool = True) -> Path:
    fonts = root / "fonts"
    fonts.mkdir(parents=True)
    default_font = Path(os.path.dirname(pygame.__file__)) / pygame.font.get_default_font()
    shutil.copy(default_font, fonts / "arial.ttf")
    sounds = root / "sounds"
    for name in ("bomba_32.wav", "hit.wav", "miss.wav", "gameover.wav", "laser.wav"):
        _write_wav(sounds / name)
    _write_wav(sounds / "musica1.wav")
    if with_images:
        images = root / "images"
        for n in range(1, 4):
            _write_png(images / f"player{n}.png", (0, 0, 255))
            _write_png(images / f"background{n}.png", RED)
            _write_png(images / f"player{n}.1.png", (0, 0, 255))
        _write_png(images / "inimigo3.png", (0, 255, 255))
        _write_png(images / "inimigo3.1.png", (0, 255, 255))
    return root


@pytest.fixture
def headless(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")


@pytest.fixture
def app(tmp_path, headless):
    assets = load_assets(_make_assets(tmp_path / "assets"))
    game = GameApp(assets, tmp_path / "highscore.txt")
    yield game
    game.close()


def _press(key):
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=key))


def test_compute_scale_identity():
    assert compute_scale(SCREEN_WIDTH, SCREEN_HEIGHT, SCREEN_WIDTH, SCREEN_HEIGHT) == (1.0, 0, 0)


@pytest.mark.parametrize("size", [(1920, 1080), (1000, 600), (800, 900), (1280, 1024)])
def test_compute_scale_fits_and_centres(size):
    width, height = size
    scale, offset_x, offset_y = compute_scale(width, height, SCREEN_WIDTH, SCREEN_HEIGHT)
    scaled_w = int(SCREEN_WIDTH * scale)
    scaled_h = int(SCREEN_HEIGHT * scale)
    assert scaled_w <= width and scaled_h <= height
    assert scaled_w == width or scaled_h == height
    assert abs(2 * offset_x + scaled_w - width) <= 1
    assert abs(2 * offset_y + scaled_h - height) <= 1


def test_compute_scale_rejects_empty_original():
    with pytest.raises(ValueError):
        compute_scale(800, 600, 0, 600)


def test_heart_slots_count_and_layout():
    slots = heart_slots(7)
    assert len(slots) == 7
    assert all(slot.y == 10 for slot in slots)
    assert slots[-1].x + slots[-1].w == SCREEN_WIDTH - 10
    assert all(not a.intersects(b) for a, b in zip(slots, slots[1:]))


def test_heart_slots_extra_lives_extend_same_row():
    assert heart_slots(10)[:7] == heart_slots(7)


@pytest.mark.parametrize("lives", [0, -3])
def test_heart_slots_none_without_lives(lives):
    assert heart_slots(lives) == []


def test_load_assets_missing_required_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_assets(tmp_path)


def test_load_assets_skips_missing_images(tmp_path):
    assets = load_assets(_make_assets(tmp_path / "assets", with_images=False))
    assert assets.backgrounds == []
    assert assets.enemies == [[], [], []]
    assert assets.musics == [tmp_path / "assets" / "sounds" / "musica1.wav"]
    assert set(assets.sound_files) == set(Sound)


def test_load_assets_reads_images(tmp_path):
    assets = load_assets(_make_assets(tmp_path / "assets"))
    assert len(assets.player_selection) == 3
    assert len(assets.backgrounds) == 3
    assert [len(group) for group in assets.enemies] == [0, 0, 2]
    assert assets.backgrounds[0].get_at((0, 0))[:3] == RED


def test_any_key_leaves_menu(app):
    assert app.session.state is GameState.MENU
    _press(pygame.K_a)
    app.handle_events()
    assert app.session.state is GameState.PLAYER_SELECTION


def test_selection_and_start(app):
    _press(pygame.K_a)
    _press(pygame.K_RIGHT)
    _press(pygame.K_RIGHT)
    _press(pygame.K_RETURN)
    app.handle_events()
    assert app.session.state is GameState.PLAYING
    assert app.session.selected_player is PlayerChoice.BLUEY
    assert len(app.session.enemy_textures) == 2


def test_quit_stops_running(app):
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    app.handle_events()
    assert app.running is False


def test_render_menu_is_black_behind_text(app):
    app.render()
    assert app.screen.get_at((0, 0))[:3] == (0, 0, 0)


def test_render_playing_shows_background(app):
    _press(pygame.K_a)
    _press(pygame.K_RETURN)
    app.handle_events()
    app.render()
    assert app.screen.get_at((SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2))[:3] == RED


def test_main_reports_missing_assets(tmp_path):
    assert main(["--assets", str(tmp_path), "--highscore", str(tmp_path / "hs.txt")]) == 1