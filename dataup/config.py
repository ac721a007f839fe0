# dataup/config.py
from __future__ import annotations
import json, logging, os
from dataclasses import dataclass, field
from pathlib import Path

from .errors import DataUpError

logger = logging.getLogger("dataup.config")

# relative to the working directory the server is started from
DEFAULT_CONFIG = Path("config") / "dataup.json"

ENV_OVERRIDES = {
    "DATAUP_VIDEOS_DIR": "videos_dir",
    "DATAUP_BASE_URL": "base_url",
    "DATAUP_HOST": "host",
    "DATAUP_PORT": "port",
    "DATAUP_LOG_LEVEL": "log_level",
    "DATAUP_PURGE_ON_START": "purge_on_start",
}

TRUE_WORDS = {"1", "true", "yes", "on"}
FALSE_WORDS = {"0", "false", "no", "off"}


class ConfigError(DataUpError):
    pass


@dataclass
class Settings:
    videos_dir: Path = Path("videos")
    # None -> derive scheme/host/port from each inbound request
    base_url: str | None = None
    host: str = "127.0.0.1"
    port: int = 8080
    allowed_origins: list[str] = field(default_factory=list)
    purge_on_start: bool = True
    log_level: str = "INFO"


def _as_bool(key: str, value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in TRUE_WORDS | FALSE_WORDS:
        return value.strip().lower() in TRUE_WORDS
    raise ConfigError(f"{key} must be a boolean, got {value!r}")


def _coerce(data: dict) -> dict:
    out = dict(data)
    if "videos_dir" in out:
        out["videos_dir"] = Path(out["videos_dir"])
    if "port" in out:
        try:
            out["port"] = int(out["port"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"port must be an integer, got {out['port']!r}") from e
    if out.get("base_url"):
        out["base_url"] = str(out["base_url"]).rstrip("/")
    if "purge_on_start" in out:
        out["purge_on_start"] = _as_bool("purge_on_start", out["purge_on_start"])
    if "log_level" in out:
        out["log_level"] = str(out["log_level"]).upper()
    return out


def load_settings(path: str | Path | None = None, environ: dict | None = None) -> Settings:
    env = os.environ if environ is None else environ
    cfg = Path(path or env.get("DATAUP_CONFIG") or DEFAULT_CONFIG)

    data: dict = {}
    if cfg.exists():
        # tolerate BOM if present
        raw = json.loads(cfg.read_text(encoding="utf-8-sig"))
        if not isinstance(raw, dict):
            raise ConfigError(f"{cfg} must contain a JSON object")
        known = Settings.__dataclass_fields__
        unknown = sorted(set(raw) - set(known))
        if unknown:
            logger.warning("ignoring unknown config keys in %s: %s", cfg, ", ".join(unknown))
        data = {k: v for k, v in raw.items() if k in known}
        logger.info("Loaded config: %s", cfg)

    for var, key in ENV_OVERRIDES.items():
        if env.get(var):
            data[key] = env[var]

    return Settings(**_coerce(data))
