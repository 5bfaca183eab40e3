from pathlib import Path
from typing import Callable, Any

from arcade.domain.models.presets import (
    GomokuDifficulty,
    Match3Config,
    MinesweeperDifficulty,
)

LOAD_MAP: dict[str, Callable[[Any], Any]] = {
    "minesweeper_difficulties": MinesweeperDifficulty.from_raw,
    "gomoku_difficulties": GomokuDifficulty.from_raw,
    "match3": Match3Config.from_raw,
}

BASE_FILES = {k: f"{k}.yml" for k in LOAD_MAP.keys()}

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"


def load_any(path: Path) -> Any:
    import yaml, json

    with path.open(encoding="utf8") as f:
        return yaml.safe_load(f) if path.suffix in {".yml", ".yaml"} else json.load(f)


class GameData:
    """Difficulty presets and board settings read from the data folder."""

    minesweeper_difficulties: dict[str, MinesweeperDifficulty]
    gomoku_difficulties: dict[str, GomokuDifficulty]
    match3: Match3Config

    def __init__(self, root: Path | str = DEFAULT_DATA_DIR):
        root = Path(root)

        for name, factory in LOAD_MAP.items():
            raw = load_any(root / BASE_FILES[name])

            # single mapping, not a list of records
            if name == "match3":
                setattr(self, name, factory(raw))
                continue

            records = [factory(rec) for rec in raw]
            setattr(self, name, {r.id: r for r in records})
