"""Evaluate-then-apply facade over the calculator.

``evaluate()`` has no side effects. ``apply()`` is the only place a new
difficulty is written back and modifiers are told about the outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .calculator import DifficultyCalculator
from .modifier_config import DifficultyConfig
from .modifiers import DifficultyModifier, build_modifiers
from .models import DifficultyResult
from .providers import DataProvider, Providers


class DifficultyService:
    def __init__(
        self,
        calculator: DifficultyCalculator,
        modifiers: Iterable[DifficultyModifier] = (),
        data_provider: DataProvider | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.calculator = calculator
        self.data_provider = data_provider
        self.logger = logger or logging.getLogger(__name__)
        self._modifiers: list[DifficultyModifier] = []
        for modifier in modifiers:
            self.register(modifier)

    @classmethod
    def from_config(
        cls,
        config: DifficultyConfig,
        providers: Providers,
        *,
        logger: logging.Logger | None = None,
        **calculator_options,
    ) -> DifficultyService:
        calculator = DifficultyCalculator(config, logger=logger, **calculator_options)
        modifiers = build_modifiers(config, providers, logger=logger)
        return cls(calculator, modifiers, providers.data, logger=logger)

    @property
    def modifiers(self) -> list[DifficultyModifier]:
        return list(self._modifiers)

    @property
    def current_difficulty(self) -> float:
        return self.calculator.current_difficulty(self.data_provider)

    def register(self, modifier: DifficultyModifier) -> None:
        if modifier in self._modifiers:
            return
        self._modifiers.append(modifier)
        self.logger.debug("Registered modifier %s", modifier.name)

    def unregister(self, modifier: DifficultyModifier) -> None:
        if modifier in self._modifiers:
            self._modifiers.remove(modifier)
            self.logger.debug("Unregistered modifier %s", modifier.name)

    def evaluate(self) -> DifficultyResult:
        return self.calculator.calculate(self._modifiers, self.data_provider)

    def apply(self, result: DifficultyResult) -> None:
        """Persist ``result.new_difficulty`` and notify every modifier.

        Storage errors propagate; a failing ``on_applied`` hook is logged and
        the remaining modifiers are still notified.
        """
        if self.data_provider is not None:
            self.data_provider.set_current_difficulty(result.new_difficulty)

        for modifier in self._modifiers:
            try:
                modifier.on_applied(result)
            except Exception:
                self.logger.exception(
                    "on_applied failed for %s",
                    modifier.name,
                    extra={"dd_modifier": modifier.name},
                )

        self.logger.info(
            "Applied difficulty %.2f",
            result.new_difficulty,
            extra={"dd_new": result.new_difficulty, "dd_reason": result.primary_reason},
        )

    def on_session_start(self) -> DifficultyResult:
        result = self.evaluate()
        self.apply(result)
        return result
