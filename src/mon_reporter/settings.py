from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from mon_reporter.sorting.engine import SortDirection

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def load_env_profile(profile: str = "sandbox") -> None:
    env_path = Path(f".env.{profile}")
    if not env_path.exists():
        return
    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


@dataclass(slots=True)
class Settings:
    config_dir: Path
    data_root: Path
    output_dir: Path
    initial_direction: SortDirection = SortDirection.ASCENDING
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False

    @classmethod
    def from_env(cls, profile: str | None = None) -> Settings:
        load_env_profile(profile or os.getenv("APP_ENV", "sandbox"))
        return cls(
            config_dir=absolute_path(os.getenv("MON_REPORTER_CONFIG_DIR", "configs/report_types")),
            data_root=absolute_path(os.getenv("MON_REPORTER_DATA_ROOT", ".")),
            output_dir=absolute_path(os.getenv("MON_REPORTER_OUTPUT_DIR", "outputs")),
            initial_direction=SortDirection.parse(os.getenv("MON_REPORTER_INITIAL_DIRECTION", "ascending")),
            host=os.getenv("FLASK_HOST", "127.0.0.1"),
            port=int(os.getenv("FLASK_PORT", "5000")),
            debug=os.getenv("FLASK_DEBUG", "0").lower() in {"1", "true", "yes"},
        )


def absolute_path(path_value: str | Path) -> Path:
    path = Path(path_value).expanduser()
    if path.is_absolute():
        return path.resolve()
    return (PROJECT_ROOT / path).resolve()
