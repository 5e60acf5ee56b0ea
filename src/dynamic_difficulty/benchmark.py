"""Latency check for the evaluation pipeline against a p95 budget."""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .calculator import DifficultyCalculator
from .modifiers import DifficultyModifier
from .providers import DataProvider
from .service import DifficultyService

REPORT_SCHEMA_VERSION = "difficulty_benchmark.v1"


@dataclass(frozen=True)
class BudgetPolicy:
    p95_budget_ms: float = 2.0

    def validate(self) -> None:
        if self.p95_budget_ms <= 0:
            raise ValueError("p95_budget_ms must be > 0")


def percentile(values: list[float], p: float) -> float:
    if not values:
        return 0.0
    sorted_values = sorted(values)
    rank = max(0, min(len(sorted_values) - 1, int((len(sorted_values) - 1) * p)))
    return round(sorted_values[rank], 3)


def summarize(label: str, samples_ms: list[float]) -> dict[str, Any]:
    return {
        "label": label,
        "sample_count": len(samples_ms),
        "p50_ms": percentile(samples_ms, 0.50),
        "p95_ms": percentile(samples_ms, 0.95),
        "min_ms": round(min(samples_ms), 3) if samples_ms else 0.0,
        "max_ms": round(max(samples_ms), 3) if samples_ms else 0.0,
    }


def run_benchmark(
    target: DifficultyService | DifficultyCalculator,
    modifiers: Sequence[DifficultyModifier] | None = None,
    *,
    iterations: int = 1000,
    data_provider: DataProvider | None = None,
    label: str = "evaluate",
) -> dict[str, Any]:
    """Time ``iterations`` evaluations and summarize them in milliseconds.

    A service evaluates its own modifiers; a bare calculator evaluates
    ``modifiers`` against ``data_provider``.
    """
    if iterations <= 0:
        raise ValueError("iterations must be > 0")

    if isinstance(target, DifficultyService):
        evaluate = target.evaluate
    else:
        calculator_modifiers = list(modifiers or [])

        def evaluate() -> object:
            return target.calculate(calculator_modifiers, data_provider)

    samples_ms: list[float] = []
    for _ in range(iterations):
        started = time.perf_counter()
        evaluate()
        samples_ms.append((time.perf_counter() - started) * 1000)
    return summarize(label, samples_ms)


def evaluate_budget(summary: dict[str, Any], policy: BudgetPolicy | None = None) -> dict[str, Any]:
    policy = policy or BudgetPolicy()
    policy.validate()

    p95 = float(summary["p95_ms"])
    reasons: list[str] = []
    if summary.get("sample_count", 0) <= 0:
        reasons.append("no_samples")
    if p95 > policy.p95_budget_ms:
        reasons.append("p95_over_budget")

    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "label": summary.get("label"),
        "p95_ms": p95,
        "p95_budget_ms": policy.p95_budget_ms,
        "status": "pass" if not reasons else "fail",
        "failure_reasons": reasons,
        "summary": summary,
    }
