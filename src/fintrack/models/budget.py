"""Budget goals: one monthly ceiling per category."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping

from ..constants.categories import DEFAULT_BUDGET_LIMITS, Category, parse_category
from ..errors import BudgetConfigurationError


@dataclass(frozen=True, slots=True)
class BudgetGoal:
    """Monthly spending ceiling for a category. ``limit == 0`` is a real budget."""

    category: Category
    limit: float

    def to_record(self) -> dict[str, object]:
        return {"category": self.category.value, "limit": self.limit}


class BudgetGoalSet:
    """Read-only collection of budget goals keyed by category."""

    __slots__ = ("_goals",)

    def __init__(self, goals: Iterable[BudgetGoal] = ()) -> None:
        indexed: dict[Category, BudgetGoal] = {}
        for goal in goals:
            if not isinstance(goal.category, Category):
                raise BudgetConfigurationError(f"Unknown category: {goal.category!r}")
            if goal.limit < 0:
                raise BudgetConfigurationError(
                    f"Budget limit for {goal.category.value} must be non-negative"
                )
            if goal.category in indexed:
                raise BudgetConfigurationError(
                    f"Duplicate budget goal for {goal.category.value}"
                )
            indexed[goal.category] = goal
        self._goals = indexed

    @classmethod
    def from_mapping(cls, limits: Mapping[str | Category, float]) -> BudgetGoalSet:
        goals = []
        for raw_category, limit in limits.items():
            try:
                category = parse_category(raw_category)
            except ValueError as exc:
                raise BudgetConfigurationError(f"Unknown category: {raw_category!r}") from exc
            goals.append(BudgetGoal(category=category, limit=float(limit)))
        return cls(goals)

    @classmethod
    def defaults(cls) -> BudgetGoalSet:
        """The goal set the application starts with."""

        return cls.from_mapping(DEFAULT_BUDGET_LIMITS)

    def get(self, category: Category) -> BudgetGoal | None:
        return self._goals.get(category)

    def limit_for(self, category: Category) -> float:
        """Return the category's limit, or 0 when no goal exists."""

        goal = self._goals.get(category)
        return goal.limit if goal is not None else 0.0

    def with_limit(self, category: Category, limit: float) -> BudgetGoalSet:
        """Return a new set with ``category`` set to ``limit``."""

        updated = dict(self._goals)
        updated[category] = BudgetGoal(category=category, limit=float(limit))
        return BudgetGoalSet(updated.values())

    def to_records(self) -> list[dict[str, object]]:
        return [goal.to_record() for goal in self._goals.values()]

    def __iter__(self) -> Iterator[BudgetGoal]:
        return iter(self._goals.values())

    def __len__(self) -> int:
        return len(self._goals)

    def __contains__(self, category: object) -> bool:
        return category in self._goals

    def __repr__(self) -> str:
        return f"BudgetGoalSet({list(self._goals.values())!r})"
