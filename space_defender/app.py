"""Window, assets, drawing and main loop of the game."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pygame

from .entities import SCREEN_HEIGHT, SCREEN_WIDTH, Rect
from .session import (
    HIGHSCORE_FILE,
    START_LIVES,
    GameSession,
    GameState,
    Key,
    Sound,
)

logger = logging.getLogger(__name__)

TITLE = "Space Defender"
FRAME_DELAY_MS = 16
HEART_ICON_SIZE = 30
HEART_ICON_GAP = 5
HUD_MARGIN = 10
SELECTION_SIZE = 100
SELECTION_GAP = 50
SELECTION_Y = 200
MENU_WRAP_WIDTH = 700

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
GREEN = (0, 255, 0)
RED = (255, 0, 0)
YELLOW = (255, 255, 0)

_KEYMAP = {
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_UP: Key.UP,
    pygame.K_DOWN: Key.DOWN,
    pygame.K_SPACE: Key.SPACE,
    pygame.K_RETURN: Key.RETURN,
    pygame.K_F11: Key.F11,
}

_SOUND_FILES = {
    Sound.LASER: "laser.wav",
    Sound.HIT: "hit.wav",
    Sound.MISS: "miss.wav",
    Sound.GAME_OVER: "gameover.wav",
}
_REQUIRED_SOUNDS = (Sound.HIT, Sound.MISS, Sound.GAME_OVER)


def compute_scale(
    window_width: int, window_height: int, original_width: int, original_height: int
) -> tuple[float, int, int]:
    """Return the uniform scale and the offsets that centre the scaled picture."""
    if original_width <= 0 or original_height <= 0:
        raise ValueError("original size must be positive")
    scale = min(window_width / original_width, window_height / original_height)
    scaled_width = int(original_width * scale)
    scaled_height = int(original_height * scale)
    offset_x = int((window_width - scaled_width) / 2)
    offset_y = int((window_height - scaled_height) / 2)
    return scale, offset_x, offset_y


def heart_slots(lives: int) -> list[Rect]:
    """Screen rectangles of the life icons, right-aligned at the top."""
    total_width = HEART_ICON_SIZE * START_LIVES + HEART_ICON_GAP * (START_LIVES - 1)
    start_x = SCREEN_WIDTH - total_width - HUD_MARGIN
    step = HEART_ICON_SIZE + HEART_ICON_GAP
    return [
        Rect(start_x + i * step, HUD_MARGIN, HEART_ICON_SIZE, HEART_ICON_SIZE)
        for i in range(max(lives, 0))
    ]


@dataclass
class Assets:
    """Images loaded from disk and the paths of fonts, music and sounds."""

    base_dir: Path
    font_path: Path
    menu_music: Path
    player_selection: list[Any] = field(default_factory=list)
    backgrounds: list[Any] = field(default_factory=list)
    player_base: list[Any] = field(default_factory=list)
    player_hit: list[Any] = field(default_factory=list)
    hearts: list[Any] = field(default_factory=list)
    enemies: list[list[Any]] = field(default_factory=list)
    musics: list[Path] = field(default_factory=list)
    sound_files: dict[Sound, Path] = field(default_factory=dict)


def _load_images(paths: list[Path]) -> list[Any]:
    images = []
    for path in paths:
        try:
            images.append(pygame.image.load(str(path)))
        except (pygame.error, OSError) as exc:
            logger.error("Failed to load image %s: %s", path, exc)
    return images


def load_assets(base_dir: str | Path) -> Assets:
    """Load the game's assets from ``base_dir``.

    Missing images and music are skipped; a missing font, menu music or
    required sound effect raises ``FileNotFoundError``.
    """
    base = Path(base_dir)
    images = base / "images"
    sounds = base / "sounds"

    font_path = base / "fonts" / "arial.ttf"
    menu_music = sounds / "bomba_32.wav"
    sound_files = {sound: sounds / name for sound, name in _SOUND_FILES.items()}

    required = [font_path, menu_music] + [sound_files[s] for s in _REQUIRED_SOUNDS]
    missing = [str(path) for path in required if not path.is_file()]
    if missing:
        raise FileNotFoundError(f"missing assets: {', '.join(missing)}")

    if not sound_files[Sound.LASER].is_file():
        logger.error("Failed to load laser sound %s", sound_files[Sound.LASER])
        del sound_files[Sound.LASER]

    musics = []
    for n in range(1, 4):
        path = sounds / f"musica{n}.wav"
        if path.is_file():
            musics.append(path)
        else:
            logger.error("Failed to load music %s", path)

    enemy_files = [
        ["inimigo1.png"],
        ["inimigo2.png"],
        ["inimigo3.png", "inimigo3.1.png"],
    ]
    return Assets(
        base_dir=base,
        font_path=font_path,
        menu_music=menu_music,
        player_selection=_load_images([images / f"player{n}.png" for n in range(1, 4)]),
        backgrounds=_load_images([images / f"background{n}.png" for n in range(1, 4)]),
        player_base=_load_images([images / f"player{n}.1.png" for n in range(1, 4)]),
        player_hit=_load_images([images / f"player{n}.2.png" for n in range(1, 4)]),
        hearts=_load_images([images / f"heart{n}.png" for n in range(1, 4)]),
        enemies=[_load_images([images / name for name in names]) for names in enemy_files],
        musics=musics,
        sound_files=sound_files,
    )


def _open_font(path: Path, size: int) -> pygame.font.Font:
    try:
        return pygame.font.Font(str(path), size)
    except (OSError, pygame.error) as exc:
        logger.error("Failed to load font %s: %s", path, exc)
        return pygame.font.Font(None, size)


def _wrap_lines(font: pygame.font.Font, text: str, width: int) -> list[str]:
    lines: list[str] = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            if current and font.size(candidate)[0] > width:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current)
    return lines


def _render_wrapped(font: pygame.font.Font, text: str, width: int) -> pygame.Surface:
    lines = [font.render(line, True, WHITE) for line in _wrap_lines(font, text, width)]
    height = font.get_linesize() * len(lines)
    surface = pygame.Surface((max(line.get_width() for line in lines), height), pygame.SRCALPHA)
    for index, line in enumerate(lines):
        surface.blit(line, (0, index * font.get_linesize()))
    return surface


def _pick(items: list[Any], index: int) -> Any:
    return items[index] if 0 <= index < len(items) else None


class GameApp:
    """A window running a game session with sound and drawing."""

    def __init__(
        self,
        assets: Assets,
        highscore_path: str | Path = HIGHSCORE_FILE,
        title: str = TITLE,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
    ):
        pygame.init()
        self.assets = assets
        self.audio = self._init_audio()
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(title)
        self.canvas = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT))
        self.scale, self.offset_x, self.offset_y = compute_scale(
            width, height, SCREEN_WIDTH, SCREEN_HEIGHT
        )

        self.font = _open_font(assets.font_path, 24)
        self.large_font = _open_font(assets.font_path, 72)
        self.sounds = self._load_sounds()

        self.background = _pick(assets.backgrounds, 0)
        self.heart_texture = _pick(assets.hearts, 0)

        self.session = GameSession(
            highscore_path,
            clock=pygame.time.get_ticks,
            choices=len(assets.player_selection),
        )
        self._apply_heart_texture()
        self.session.load_highscore()
        self.session.manager.reset_game()
        self._play_music(assets.menu_music)
        self.running = True

    def _init_audio(self) -> bool:
        try:
            pygame.mixer.init(44100, -16, 2, 2048)
        except pygame.error as exc:
            logger.error("Audio could not initialize: %s", exc)
            return False
        return True

    def _load_sounds(self) -> dict[Sound, Any]:
        if not self.audio:
            return {}
        sounds = {}
        for sound, path in self.assets.sound_files.items():
            try:
                sounds[sound] = pygame.mixer.Sound(str(path))
            except (pygame.error, OSError) as exc:
                logger.error("Failed to load sound %s: %s", path, exc)
        return sounds

    def _play_music(self, path: Path | None) -> None:
        if not self.audio or path is None:
            return
        try:
            pygame.mixer.music.load(str(path))
            pygame.mixer.music.play(-1)
        except pygame.error as exc:
            logger.error("Failed to play music %s: %s", path, exc)

    def _halt_music(self) -> None:
        if self.audio:
            pygame.mixer.music.stop()

    def _play_pending_sounds(self) -> None:
        for sound in self.session.drain_sounds():
            effect = self.sounds.get(sound)
            if effect is not None:
                effect.play()

    def _apply_heart_texture(self) -> None:
        self.session.heart_texture = self.heart_texture
        self.session.pickups_enabled = self.heart_texture is not None

    def _setup_selected_player(self) -> None:
        index = int(self.session.selected_player)
        assets = self.assets

        base = _pick(assets.player_base, index)
        if base is not None:
            self.session.player.texture = base
        else:
            logger.error("Base texture of the selected player is not available")

        background = _pick(assets.backgrounds, index)
        if background is not None:
            self.background = background
        else:
            logger.error("Selected background texture is not available")

        heart = _pick(assets.hearts, index)
        if heart is not None:
            self.heart_texture = heart
            self._apply_heart_texture()
        else:
            logger.error("Selected heart texture is not available")

        enemies = _pick(assets.enemies, index)
        if enemies:
            self.session.enemy_textures = enemies
        else:
            logger.error("Selected enemy textures are not available")

        music = _pick(assets.musics, index)
        if music is not None:
            self._play_music(music)
        else:
            logger.error("Selected game music is not available")

    def _toggle_fullscreen(self) -> None:
        try:
            pygame.display.toggle_fullscreen()
        except pygame.error as exc:
            logger.error("Could not toggle fullscreen: %s", exc)
        self._calculate_scale()

    def _calculate_scale(self) -> None:
        width, height = self.screen.get_size()
        self.scale, self.offset_x, self.offset_y = compute_scale(
            width, height, SCREEN_WIDTH, SCREEN_HEIGHT
        )

    def handle_events(self) -> None:
        """Process pending window and keyboard events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._key_down(_KEYMAP.get(event.key, Key.OTHER))
            elif event.type == pygame.KEYUP:
                self.session.key_up(_KEYMAP.get(event.key, Key.OTHER))
        self._play_pending_sounds()

    def _key_down(self, key: Key) -> None:
        before = self.session.state
        self.session.key_down(key)
        after = self.session.state
        if before is GameState.MENU and after is GameState.PLAYER_SELECTION:
            self._halt_music()
        elif before is GameState.PLAYER_SELECTION and after is GameState.PLAYING:
            self._setup_selected_player()
        elif before is GameState.GAME_OVER and after is GameState.PLAYER_SELECTION:
            self._halt_music()
        elif before is GameState.PLAYING and key is Key.F11:
            self._toggle_fullscreen()

    def step(self, dt: float) -> None:
        """Advance the session by ``dt`` seconds and play what it asks for."""
        before = self.session.state
        self.session.update(dt)
        self._play_pending_sounds()
        if before is GameState.PLAYING and self.session.state is GameState.GAME_OVER:
            self._halt_music()

    def _blit_centered(self, surface: pygame.Surface, y: int) -> None:
        self.canvas.blit(surface, ((SCREEN_WIDTH - surface.get_width()) // 2, y))

    def _blit_scaled(self, texture: Any, rect: Rect) -> None:
        image = pygame.transform.scale(texture, (max(rect.w, 0), max(rect.h, 0)))
        self.canvas.blit(image, (rect.x, rect.y))

    def _fill(self, color: tuple[int, int, int], rect: Rect) -> None:
        self.canvas.fill(color, pygame.Rect(rect.x, rect.y, rect.w, rect.h))

    def render(self) -> None:
        """Draw the current screen and show it in the window."""
        state = self.session.state
        self.canvas.fill(BLACK)
        if state is not GameState.MENU and self.background is not None:
            self.canvas.blit(
                pygame.transform.scale(self.background, (SCREEN_WIDTH, SCREEN_HEIGHT)), (0, 0)
            )

        if state is GameState.MENU:
            self._render_menu()
        elif state is GameState.PLAYER_SELECTION:
            self._render_selection()
        elif state is GameState.GAME_OVER:
            self._render_game_over()
        else:
            self._render_playing()

        self._calculate_scale()
        self.screen.fill(BLACK)
        size = (int(SCREEN_WIDTH * self.scale), int(SCREEN_HEIGHT * self.scale))
        self.screen.blit(pygame.transform.scale(self.canvas, size), (self.offset_x, self.offset_y))
        pygame.display.flip()

    def _render_menu(self) -> None:
        text = (
            "SPACE DEFENDER\n\n"
            f"Highscore: {self.session.highscore}\n\n"
            "Pressione qualquer tecla para iniciar o jogo"
        )
        menu = _render_wrapped(self.font, text, MENU_WRAP_WIDTH)
        self.canvas.blit(
            menu,
            ((SCREEN_WIDTH - menu.get_width()) // 2, (SCREEN_HEIGHT - menu.get_height()) // 2),
        )

    def _render_selection(self) -> None:
        self._blit_centered(self.font.render("Escolha o seu Jogador!", False, WHITE), 50)
        count = 3
        start_x = (SCREEN_WIDTH - (count * SELECTION_SIZE + (count - 1) * SELECTION_GAP)) // 2
        for index, texture in enumerate(self.assets.player_selection):
            rect = Rect(
                start_x + index * (SELECTION_SIZE + SELECTION_GAP),
                SELECTION_Y,
                SELECTION_SIZE,
                SELECTION_SIZE,
            )
            if index == self.session.selection_index:
                pygame.draw.rect(
                    self.canvas, GREEN, pygame.Rect(rect.x, rect.y, rect.w, rect.h), 1
                )
            self._blit_scaled(texture, rect)
        confirm = self.font.render(
            "Use SETAS para escolher e ENTER para confirmar!", False, WHITE
        )
        self._blit_centered(confirm, SCREEN_HEIGHT - 50)

    def _render_game_over(self) -> None:
        title = self.large_font.render("GAME OVER", False, WHITE)
        self._blit_centered(title, (SCREEN_HEIGHT - title.get_height()) // 2 - 100)
        round_score = self.font.render(
            f"Pontuacao da Ronda: {self.session.score}", False, WHITE
        )
        self._blit_centered(round_score, SCREEN_HEIGHT // 2 + 10)
        best = self.font.render(f"Highscore: {self.session.highscore}", False, WHITE)
        self._blit_centered(best, SCREEN_HEIGHT // 2 + 50)
        replay = self.font.render("Pressione ENTER para jogar de novo", False, WHITE)
        self._blit_centered(replay, (SCREEN_HEIGHT - replay.get_height()) // 2 + 90)

    def _render_playing(self) -> None:
        session = self.session
        index = int(session.selected_player)
        player = session.player
        frames = self.assets.player_hit if session.hit_animation_active else self.assets.player_base
        texture = _pick(frames, index)
        if texture is None:
            texture = player.texture
        if texture is not None:
            self._blit_scaled(texture, player.rect)
        else:
            self._fill(GREEN, player.rect)

        for enemy in session.enemies:
            if enemy.destroyed:
                continue
            if enemy.textures:
                self._blit_scaled(
                    enemy.textures[enemy.texture_index % len(enemy.textures)], enemy.rect
                )
            else:
                self._fill(RED, enemy.rect)

        for bullet in session.bullets:
            self._fill(YELLOW, bullet.rect)

        for heart in session.hearts:
            if heart.texture is not None:
                self._blit_scaled(heart.texture, heart.rect)
            else:
                self._fill(GREEN, heart.rect)

        score = self.font.render(f"Score: {session.score}", False, WHITE)
        self._blit_scaled(score, Rect(HUD_MARGIN, HUD_MARGIN, 150, 40))
        best = self.font.render(f"Highscore: {session.highscore}", False, WHITE)
        self.canvas.blit(best, (HUD_MARGIN, HUD_MARGIN + 40 + 5))

        if self.heart_texture is not None:
            for slot in heart_slots(session.lives):
                self._blit_scaled(self.heart_texture, slot)

    def run(self) -> None:
        """Run the main loop until the window is closed."""
        last = pygame.time.get_ticks()
        while self.running:
            now = pygame.time.get_ticks()
            dt = (now - last) / 1000.0
            last = now
            self.handle_events()
            self.step(dt)
            self.render()
            pygame.time.delay(FRAME_DELAY_MS)

    def close(self) -> None:
        """Release audio and the window."""
        if self.audio:
            pygame.mixer.music.stop()
            pygame.mixer.quit()
            self.audio = False
        pygame.quit()

    def __enter__(self) -> GameApp:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def main(argv: list[str] | None = None) -> int:
    """Start the game."""
    parser = argparse.ArgumentParser(prog="space-defender", description=TITLE)
    parser.add_argument("--assets", default="assets", help="directory holding the assets")
    parser.add_argument("--highscore", default=HIGHSCORE_FILE, help="highscore file")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        assets = load_assets(args.assets)
        app = GameApp(assets, args.highscore)
    except (FileNotFoundError, pygame.error) as exc:
        logger.error("%s", exc)
        pygame.quit()
        return 1
    with app:
        app.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())