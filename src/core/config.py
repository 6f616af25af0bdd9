"""Application settings, read from the environment"""

import os
from dataclasses import dataclass
from typing import Optional, Self

from src.core.shared_types import Difficulty

ENV_PREFIX = "CHESS_"


def _env(name: str) -> Optional[str]:
    return os.environ.get(f"{ENV_PREFIX}{name}")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./chess.db"
    echo_sql: bool = False
    default_difficulty: Difficulty = Difficulty.NORMAL
    ai_seed: Optional[int] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Self:
        """Every setting can be overridden by a CHESS_<NAME> environment variable."""
        defaults = cls()

        difficulty_name = _env("DEFAULT_DIFFICULTY")
        if difficulty_name is not None and difficulty_name.lower() not in [
            d.value for d in Difficulty
        ]:
            raise ValueError(
                f"Unknown difficulty {difficulty_name!r}. Pick one from {','.join(d.value for d in Difficulty)}"
            )

        seed = _env("AI_SEED")
        echo = _env("ECHO_SQL")
        return cls(
            database_url=_env("DATABASE_URL") or defaults.database_url,
            echo_sql=_parse_bool(echo) if echo is not None else defaults.echo_sql,
            default_difficulty=(
                Difficulty(difficulty_name.lower())
                if difficulty_name
                else defaults.default_difficulty
            ),
            ai_seed=int(seed) if seed else defaults.ai_seed,
            log_level=(_env("LOG_LEVEL") or defaults.log_level).upper(),
        )


def get_settings() -> Settings:
    return Settings.from_env()
