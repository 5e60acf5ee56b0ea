import os
from dataclasses import dataclass


def _env_float(name: str, default: str) -> float:
    raw = os.environ.get(name, default)
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    log_format: str = "json"
    log_level: str = "INFO"
    config_path: str | None = None
    slow_modifier_ms: float = 20.0

    @classmethod
    def from_env(cls) -> "Settings":
        config_path = os.environ.get("DYNDIFF_CONFIG_PATH") or None

        return cls(
            log_format=os.environ.get("DYNDIFF_LOG_FORMAT", "json"),
            log_level=os.environ.get("DYNDIFF_LOG_LEVEL", "INFO").upper(),
            config_path=config_path,
            slow_modifier_ms=_env_float("DYNDIFF_SLOW_MODIFIER_MS", "20.0"),
        )
