"""Rubric data models."""

from dataclasses import dataclass, field
from enum import Enum

RUBRIC_TOTAL = 100


class ReviewLevel(str, Enum):
    """Which rubric a session is scored against."""

    BASIC = "basic"
    ADVANCED = "advanced"

    @classmethod
    def parse(cls, value: "str | ReviewLevel") -> "ReviewLevel":
        """Accept a level or its string value, case-insensitively."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown review level: {value!r} (expected 'basic' or 'advanced')"
            ) from None


@dataclass(frozen=True)
class SubCriterion:
    """The smallest scored unit of a rubric."""

    name: str
    points: int
    hint: str = ""


@dataclass(frozen=True)
class CategoryDescriptor:
    """A titled group of sub-criteria."""

    title: str
    max_points: int
    subcriteria: tuple[SubCriterion, ...] = ()

    @property
    def subcriteria_points(self) -> int:
        """Sum of the sub-criteria maxima."""
        return sum(sub.points for sub in self.subcriteria)


@dataclass(frozen=True)
class RubricDefinition:
    """A complete rubric for one review level.

    Categories keep the order they were declared in, which is also the
    order they are presented and reported in.
    """

    level: ReviewLevel
    name: str
    categories: dict[str, CategoryDescriptor] = field(default_factory=dict)

    @property
    def total_points(self) -> int:
        return sum(c.max_points for c in self.categories.values())

    def category(self, key: str) -> CategoryDescriptor:
        """Look up a category, raising KeyError for unknown keys."""
        try:
            return self.categories[key]
        except KeyError:
            raise KeyError(f"Unknown category for {self.level.value} rubric: {key!r}") from None

    def sub_criterion(self, key: str, index: int) -> SubCriterion:
        """Look up a sub-criterion by category key and position."""
        subcriteria = self.category(key).subcriteria
        if not 0 <= index < len(subcriteria):
            raise IndexError(f"Sub-criterion index {index} out of range for {key!r}")
        return subcriteria[index]

    def problems(self) -> list[str]:
        """Describe every broken point invariant (empty when valid)."""
        problems = []
        for key, category in self.categories.items():
            if any(sub.points < 0 for sub in category.subcriteria):
                problems.append(f"{key}: negative sub-criterion points")
            if category.max_points != category.subcriteria_points:
                problems.append(
                    f"{key}: max_points {category.max_points} != "
                    f"sum of sub-criteria {category.subcriteria_points}"
                )
        if self.total_points != RUBRIC_TOTAL:
            problems.append(f"category max_points total {self.total_points} != {RUBRIC_TOTAL}")
        return problems
