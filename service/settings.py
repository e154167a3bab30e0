import os
from dataclasses import dataclass
from typing import Mapping, Optional

from spawner import SpawnMode

DEFAULT_SAVEFILE = "nc2048_save.dat"
DEFAULT_PORT = 5050


def resolve_save_path(env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    path = env.get("NC2048_SAVEFILE")
    if path:
        return os.path.abspath(os.path.expanduser(path))
    return os.path.abspath(DEFAULT_SAVEFILE)


@dataclass(frozen=True)
class Settings:
    save_path: str
    spawn_mode: SpawnMode = SpawnMode.RANDOM
    seed: Optional[int] = None
    allowed_origins: str = "*"
    port: int = DEFAULT_PORT
    debug: bool = False


def _int_or_none(env: Mapping[str, str], key: str) -> Optional[int]:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    port = _int_or_none(env, "PORT")
    return Settings(
        save_path=resolve_save_path(env),
        spawn_mode=SpawnMode.parse(env.get("NC2048_SPAWN_MODE") or SpawnMode.RANDOM),
        seed=_int_or_none(env, "NC2048_SEED"),
        allowed_origins=env.get("NC2048_ALLOWED_ORIGINS", "*"),
        port=DEFAULT_PORT if port is None else port,
        debug=bool(env.get("FLASK_DEBUG")),
    )


__all__ = ["DEFAULT_PORT", "DEFAULT_SAVEFILE", "Settings", "load_settings", "resolve_save_path"]
