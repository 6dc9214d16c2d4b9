from __future__ import annotations

import random
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from zippath.core.board import Board, generate_board

_REQUIRED_INTS = ("size", "checkpoints", "walls")


@dataclass(frozen=True)
class Level:
    """A puzzle preset: grid size, checkpoint count and wall layout parameters."""

    key: str
    name: str
    size: int
    checkpoints: int
    walls: int
    wall_length: Tuple[int, int]

    def generate(self, rng: Optional[random.Random] = None) -> Board:
        return generate_board(self.size, self.checkpoints, self.walls, self.wall_length, rng)


class LevelRepository:
    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = base_dir or Path(__file__).resolve().parent.parent / "data" / "levels"
        self._levels = self._load_levels()

    def all(self) -> List[Level]:
        return list(self._levels.values())

    def get(self, key: str) -> Level:
        return self._levels[key]

    def default(self) -> Level:
        return next(iter(self._levels.values()))

    def _load_levels(self) -> Dict[str, Level]:
        base_dir = self._base_dir
        if not base_dir.exists():
            raise FileNotFoundError(f"Levels directory not found: {base_dir}")

        levels: Dict[str, Level] = {}

        def _sort_key(p: Path) -> tuple[int, str]:
            m = re.match(r"^level(\d+)$", p.stem)
            if m:
                return (int(m.group(1)), p.stem)
            return (10**9, p.stem)

        for level_path in sorted(base_dir.glob("level*.yaml"), key=_sort_key):
            key = level_path.stem
            raw = yaml.safe_load(level_path.read_text(encoding="utf-8"))
            if not raw or not isinstance(raw, dict):
                raise ValueError(f"{level_path.name}: expected YAML with 'title' and 'size'")
            title = raw.get("title")
            if not title or not isinstance(title, str):
                raise ValueError(f"{level_path.name}: missing or invalid 'title'")
            values = {}
            for name in _REQUIRED_INTS:
                value = raw.get(name)
                if not isinstance(value, int) or isinstance(value, bool):
                    raise ValueError(f"{level_path.name}: missing or invalid '{name}'")
                values[name] = value
            wall_length = raw.get("wall_length", [2, 4])
            if (
                not isinstance(wall_length, list)
                or len(wall_length) != 2
                or not all(isinstance(n, int) for n in wall_length)
                or not 1 <= wall_length[0] <= wall_length[1]
            ):
                raise ValueError(f"{level_path.name}: 'wall_length' must be [min, max]")
            if values["size"] < 1 or values["walls"] < 0:
                raise ValueError(f"{level_path.name}: 'size' and 'walls' out of range")
            if not 1 <= values["checkpoints"] <= values["size"] ** 2:
                raise ValueError(
                    f"{level_path.name}: {values['checkpoints']} checkpoints do not fit "
                    f"a {values['size']}x{values['size']} grid"
                )
            levels[key] = Level(
                key=key,
                name=title.strip(),
                size=values["size"],
                checkpoints=values["checkpoints"],
                walls=values["walls"],
                wall_length=(wall_length[0], wall_length[1]),
            )

        if not levels:
            raise ValueError("No level files (level*.yaml) found in data/levels")
        return levels
