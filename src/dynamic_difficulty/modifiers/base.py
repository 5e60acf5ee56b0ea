"""Shared modifier contract."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from ..constants import NO_CHANGE_REASON
from ..modifier_config import ModifierConfig
from ..models import ModifierResult
from ..providers import Providers

if TYPE_CHECKING:
    from ..models import DifficultyResult


class DifficultyModifier(ABC):
    """One behavioral signal turned into a signed difficulty contribution.

    ``calculate()`` must not raise for missing or zero data; it returns a
    zero contribution instead. The calculator still isolates anything that
    does escape.
    """

    # Filled in by register_modifier
    modifier_type: ClassVar[str] = ""
    # Providers fields that must be present for the modifier to run
    required_providers: ClassVar[tuple[str, ...]] = ()

    def __init__(self, config: ModifierConfig, *, logger: logging.Logger | None = None) -> None:
        self.config = config
        self.logger = logger or logging.getLogger(type(self).__module__)

    @classmethod
    def from_providers(
        cls,
        config: ModifierConfig,
        providers: Providers,
        *,
        logger: logging.Logger | None = None,
    ) -> DifficultyModifier:
        args = [getattr(providers, name) for name in cls.required_providers]
        return cls(config, *args, logger=logger)

    @property
    def name(self) -> str:
        return self.modifier_type

    @property
    def priority(self) -> int:
        return self.config.priority

    @property
    def is_enabled(self) -> bool:
        return self.config.enabled

    @abstractmethod
    def calculate(self) -> ModifierResult: ...

    def on_applied(self, result: DifficultyResult) -> None:
        """Called after a result has been persisted. Stateless modifiers ignore it."""

    def no_change(self, reason: str = NO_CHANGE_REASON, **metadata: Any) -> ModifierResult:
        return ModifierResult.no_change(self.name, reason, **metadata)

    def result(self, value: float, reason: str, **metadata: Any) -> ModifierResult:
        return ModifierResult(name=self.name, value=value, reason=reason, metadata=metadata)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(priority={self.priority}, enabled={self.is_enabled})"


def capped_streak_value(streak: int, threshold: float, step: float, cap: float) -> tuple[float, bool]:
    """Capped-linear streak response: 0 below threshold, else min(step * (s - t + 1), cap).

    Returns the magnitude and whether the cap bound it.
    """
    if streak <= 0 or streak < threshold:
        return 0.0, False
    raw = step * (streak - threshold + 1)
    if raw > cap:
        return cap, True
    return raw, False
