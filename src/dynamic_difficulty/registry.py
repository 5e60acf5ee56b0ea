import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .modifiers.base import DifficultyModifier

logger = logging.getLogger(__name__)

# Modifier registry: one implementation per modifier_type
MODIFIER_TYPES: dict[str, type["DifficultyModifier"]] = {}


def register_modifier(
    modifier_type: str,
) -> Callable[[type["DifficultyModifier"]], type["DifficultyModifier"]]:
    """Register a modifier implementation for a modifier_type (e.g. 'win_streak')."""

    def decorator(cls: type["DifficultyModifier"]) -> type["DifficultyModifier"]:
        if modifier_type in MODIFIER_TYPES:
            raise ValueError(f"Duplicate modifier for modifier_type={modifier_type!r}")
        cls.modifier_type = modifier_type
        MODIFIER_TYPES[modifier_type] = cls
        logger.debug("Registered modifier for modifier_type=%s", modifier_type)
        return cls

    return decorator


def get_modifier_class(modifier_type: str) -> type["DifficultyModifier"] | None:
    return MODIFIER_TYPES.get(modifier_type)


def registered_modifier_types() -> list[str]:
    return list(MODIFIER_TYPES.keys())
