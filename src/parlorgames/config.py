"""Games configuration loader."""

import yaml
from dataclasses import dataclass, field
from pathlib import Path


class ConfigError(ValueError):
    """The YAML config file is malformed."""


@dataclass
class GameConfig:
    storage_key: str
    legacy_key: str | None = None


def _default_games() -> dict[str, GameConfig]:
    return {
        "tictactoe": GameConfig("ticTacToeStats", "ticTacToeScores"),
        "connectfour": GameConfig("connect4Stats", "connect4Scores"),
    }


@dataclass
class GamesConfig:
    history_capacity: int = 8
    resolve_delay_ms: int = 500  # matches the drop animation
    storage_path: Path | None = None
    games: dict[str, GameConfig] = field(default_factory=_default_games)

    def game(self, name: str) -> GameConfig:
        try:
            return self.games[name]
        except KeyError:
            raise ConfigError(f"Unknown game: {name!r}") from None


def load_config(path: Path) -> GamesConfig:
    """Load games config from YAML file. Missing keys take defaults."""
    with open(path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    games_raw = raw.get("games") or {}
    if not isinstance(games_raw, dict):
        raise ConfigError(f"{path}: games must be a mapping")

    games = _default_games()
    for name, g in games_raw.items():
        if not isinstance(g, dict):
            raise ConfigError(f"{path}: games.{name} must be a mapping")
        default = games.get(name)
        storage_key = g.get("storage_key", default.storage_key if default else None)
        if not storage_key:
            raise ConfigError(f"{path}: games.{name}.storage_key is required")
        games[name] = GameConfig(
            storage_key=storage_key,
            legacy_key=g.get("legacy_key", default.legacy_key if default else None),
        )

    capacity = raw.get("history_capacity", 8)
    if not isinstance(capacity, int) or capacity < 1:
        raise ConfigError(f"{path}: history_capacity must be a positive integer")

    delay = raw.get("resolve_delay_ms", 500)
    if not isinstance(delay, int) or delay < 0:
        raise ConfigError(f"{path}: resolve_delay_ms must be a non-negative integer")

    storage_path = raw.get("storage_path")
    return GamesConfig(
        history_capacity=capacity,
        resolve_delay_ms=delay,
        storage_path=Path(storage_path) if storage_path else None,
        games=games,
    )
