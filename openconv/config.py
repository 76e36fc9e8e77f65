from __future__ import annotations

"""Configuration handling for the OpenConv state engine.

Settings live in a JSON file, by default ``~/.config/openconv/config.json``
(``OPENCONV_CONFIG`` overrides the location). A missing file yields the
defaults below; an unreadable one is reported and also yields defaults. The
file only carries service settings: the user's UI preferences are stored
separately through :mod:`openconv.preferences`.
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
import json
import logging
import os

from .errors import ConfigError

DEFAULT_CFG_PATH = Path.home() / ".config" / "openconv" / "config.json"


def config_path() -> Path:
    override = os.getenv("OPENCONV_CONFIG")
    return Path(override) if override else DEFAULT_CFG_PATH


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 5060


@dataclass
class DatabaseConfig:
    """Location of the SQLite file holding persisted preferences."""

    path: str = str(Path.home() / ".config" / "openconv" / "preferences.db")

    @property
    def url(self) -> str:
        if self.path == ":memory:":
            return "sqlite+aiosqlite://"
        return f"sqlite+aiosqlite:///{self.path}"


@dataclass
class SourceConfig:
    """Behaviour of the simulated backend: source latency, send failures and
    how often other members appear to type."""

    fetch_delay_min: float = 0.2
    fetch_delay_max: float = 0.5
    send_delay_min: float = 0.1
    send_delay_max: float = 0.3
    failure_rate: float = 0.05
    seed: int | None = None
    typing_idle_min: float = 5.0
    typing_idle_max: float = 10.0
    typing_min: float = 2.0
    typing_max: float = 4.0

    def validate(self) -> None:
        if not 0.0 <= self.failure_rate <= 1.0:
            raise ConfigError(f"failure_rate must be within [0, 1], got {self.failure_rate}")
        for lo, hi, name in (
            (self.fetch_delay_min, self.fetch_delay_max, "fetch_delay"),
            (self.send_delay_min, self.send_delay_max, "send_delay"),
            (self.typing_idle_min, self.typing_idle_max, "typing_idle"),
            (self.typing_min, self.typing_max, "typing"),
        ):
            if lo < 0 or hi < lo:
                raise ConfigError(f"invalid {name} range: {lo}..{hi}")


@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    log_level: str = "INFO"
    profile: str = "default"


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError:
        logging.warning("Invalid JSON in %s, using defaults", path)
        return AppConfig()
    try:
        cfg = AppConfig(
            server=ServerConfig(**data.get("server", {})),
            database=DatabaseConfig(**data.get("database", {})),
            source=SourceConfig(**data.get("source", {})),
            log_level=data.get("log_level", "INFO"),
            profile=data.get("profile", "default"),
        )
    except TypeError as exc:
        raise ConfigError(f"Unknown setting in {path}: {exc}") from exc
    cfg.source.validate()
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> None:
    path = path or config_path()
    data = {
        "server": asdict(cfg.server),
        "database": asdict(cfg.database),
        "source": asdict(cfg.source),
        "log_level": cfg.log_level,
        "profile": cfg.profile,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))
    try:
        path.chmod(0o600)
    except OSError as exc:  # pragma: no cover - platform dependent
        logging.warning("Unable to set permissions on %s: %s", path, exc)
