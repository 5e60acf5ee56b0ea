import logging

# Import all modifiers so they register themselves.
from . import win_streak  # noqa: F401
from . import loss_streak  # noqa: F401
from . import time_decay  # noqa: F401
from . import rage_quit  # noqa: F401
from . import completion_rate  # noqa: F401
from . import level_progress  # noqa: F401
from . import session_pattern  # noqa: F401
from ..modifier_config import DifficultyConfig
from ..providers import Providers
from ..registry import MODIFIER_TYPES
from .base import DifficultyModifier


def build_modifiers(
    config: DifficultyConfig,
    providers: Providers,
    logger: logging.Logger | None = None,
) -> list[DifficultyModifier]:
    """Instantiate every enabled modifier whose required providers are present.

    The capability check happens here, once; a modifier without its
    providers is never constructed.
    """
    log = logger or logging.getLogger(__name__)
    modifiers: list[DifficultyModifier] = []
    for modifier_type, modifier_config in config.modifiers.items():
        modifier_cls = MODIFIER_TYPES.get(modifier_type)
        if modifier_cls is None:
            log.warning("No modifier registered for modifier_type=%s", modifier_type)
            continue
        if not modifier_config.enabled:
            log.debug("Skipping %s: disabled", modifier_type)
            continue
        if not providers.has(*modifier_cls.required_providers):
            log.debug(
                "Skipping %s: missing providers %s",
                modifier_type,
                ", ".join(name for name in modifier_cls.required_providers if getattr(providers, name) is None),
            )
            continue
        modifiers.append(modifier_cls.from_providers(modifier_config, providers, logger=logger))
    return modifiers


__all__ = ["DifficultyModifier", "build_modifiers"]
