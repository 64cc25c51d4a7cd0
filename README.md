# space_defender

This is a small top-down arcade shooter. You pick one of three heroes and move
around the screen. Enemies fall from the top, and you shoot them. Each hit
scores a point.

You lose a life in two cases:

- an enemy falls past the bottom of the screen
- an enemy touches you

Hearts fall now and then. Catching one gives you back a life.

## Installing

```
pip install .
```

This installs `pygame`, which the game uses for its window, drawing and sound.

## Playing

```
space-defender [--assets DIR] [--highscore FILE]
```

| Option        | Default         | Meaning                                           |
|---------------|-----------------|---------------------------------------------------|
| `--assets`    | `assets`        | directory that holds `images/`, `sounds/` and `fonts/` |
| `--highscore` | `highscore.txt` | file where the best score is read and stored      |

### Assets the game needs

These files must be present. If any is missing, the command logs the missing
paths and exits with status 1.

- `fonts/arial.ttf`
- `sounds/bomba_32.wav`, the menu music
- `sounds/hit.wav`
- `sounds/miss.wav`
- `sounds/gameover.wav`

### Assets the game can do without

These files are optional. Each missing one is logged and skipped.

- `sounds/laser.wav`
- `sounds/musica1.wav` to `sounds/musica3.wav`, the music for each hero
- `images/player1.png` to `images/player3.png`, the selection portraits
- `images/player1.1.png` to `images/player3.1.png`, the normal frame of each hero
- `images/player1.2.png` to `images/player3.2.png`, the frame shown when a hero is hit
- `images/background1.png` to `images/background3.png`
- `images/heart1.png` to `images/heart3.png`
- `images/inimigo1.png`, `images/inimigo2.png`, `images/inimigo3.png` and `images/inimigo3.1.png`, the enemies

When an image is missing, the game draws a plain coloured rectangle in its place:

- the player is green
- enemies are red
- bullets are always yellow

No hearts fall while no heart image is loaded.

The number of heroes you can choose from is the number of selection portraits
that loaded.

### Controls

| Screen           | Key                 | Action                   |
|------------------|---------------------|--------------------------|
| Title            | any key             | go to player selection   |
| Player selection | Left / Right arrows | choose a hero            |
| Player selection | Enter or Space      | start the round          |
| Playing          | Arrow keys          | move                     |
| Playing          | Space               | fire                     |
| Playing          | F11                 | toggle fullscreen        |
| Game over        | Enter               | back to player selection |

### Rules

- You start each round with 7 lives. Catching hearts can take you up to 10 lives.
- The speed level goes up by one every 10 points. The speeds change as follows:

  | Object  | Starting speed | Increase per level | Highest speed |
  |---------|----------------|--------------------|---------------|
  | Bullets | 600            | +80                | 1500          |
  | Enemies | 120            | +30                | 400           |
  | Player  | 150            | +20                | 500           |

- The number of enemies allowed on screen is `5 + level`, where the level starts at 1.
- A new enemy appears at most once every 800 ms.
- A heart drops when your score reaches 5, 15, 25, 35 or 45, provided no other heart is on screen at that moment.
- Hearts fall at 60% of the enemy speed.
- When the round ends, the score is written to the highscore file if it beats the stored best.

## Using it as a library

The game rules do not depend on pygame. You can drive and test them without a window.

- `space_defender.speed.SpeedManager` keeps the score and the current speeds. Its methods are `add_score`, `update_speeds` and `reset_game`.
- `space_defender.entities` holds `Vec2D` and `Rect` (with `Rect.intersects`). It also holds the moving objects `Bullet`, `Enemy`, `Heart` and `Player`.
- `space_defender.session` holds the game's states and its collision helpers:
  - `GameState`, `PlayerChoice`, `Key` and `Sound`
  - `update_player_movement`
  - `handle_bullet_enemy_collisions`
  - `handle_player_enemy_collisions`
- `space_defender.session.GameSession` runs one game.
  - Feed it input with `key_down(key)` and `key_up(key)`.
  - Advance it with `update(dt)`.
  - Collect the sound effects it requested with `drain_sounds()`.
  - Use `load_highscore()` and `save_highscore()` to read and write the highscore file.
  - You can inject the clock, the random generator and the `SpeedManager` it uses.

```python
from space_defender.session import GameSession, GameState, Key

session = GameSession("highscore.txt")
session.key_down(Key.RETURN)   # title -> player selection
session.key_down(Key.RETURN)   # start a round with the first hero
assert session.state is GameState.PLAYING
session.key_down(Key.SPACE)    # fire
session.update(0.016)
print(session.score, session.lives, session.drain_sounds())
```

`space_defender.app` holds the pygame front end:

- `load_assets` and `Assets`
- `GameApp`, with `handle_events`, `step`, `render`, `run` and `close`. It can also be used as a context manager.
- `compute_scale`, which fits the 800×600 picture into the window
- `heart_slots`, which places the life icons
- `main`, which the `space-defender` command runs

## Running the tests

```
pip install ".[test]"
pytest
```