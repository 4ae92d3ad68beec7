"""Rubric loader for the basic and advanced review levels."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from ..exceptions import RubricError
from ..utils.logging import get_logger
from .models import CategoryDescriptor, ReviewLevel, RubricDefinition, SubCriterion

logger = get_logger(__name__)

RUBRICS_DIR = Path(__file__).parent / "data"


class RubricLoader:
    """Loads and validates rubrics from YAML files."""

    def __init__(self, rubrics_dir: Path | None = None):
        """Initialize the rubric loader.

        Args:
            rubrics_dir: Directory containing ``<level>.yml`` rubric files
        """
        self.rubrics_dir = rubrics_dir or RUBRICS_DIR

    def load_level(self, level: str | ReviewLevel) -> RubricDefinition:
        """Load the rubric shipped for a review level."""
        level = ReviewLevel.parse(level)
        return self.load(f"{level.value}.yml")

    def load(self, rubric_file: str | Path) -> RubricDefinition:
        """Load a rubric from a YAML file.

        Args:
            rubric_file: Path to the rubric YAML file

        Returns:
            Parsed RubricDefinition

        Raises:
            FileNotFoundError: If the file does not exist
            RubricError: If the file is malformed or the points do not add up
        """
        path = self._resolve_path(rubric_file)
        data = self._load_yaml(path)
        rubric = self._parse_rubric(data, path)

        problems = rubric.problems()
        if problems:
            raise RubricError(f"Invalid rubric {path.name}: " + "; ".join(problems))

        logger.debug(f"Loaded {rubric.level.value} rubric with {len(rubric.categories)} categories")
        return rubric

    def _resolve_path(self, file_path: str | Path) -> Path:
        """Resolve a rubric file path."""
        path = Path(file_path)
        if not path.is_absolute():
            path = self.rubrics_dir / path
        return path

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load and parse a YAML file."""
        if not path.exists():
            raise FileNotFoundError(f"Rubric file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RubricError(f"Cannot parse rubric {path.name}: {e}") from e

        if not isinstance(data, dict):
            raise RubricError(f"Rubric {path.name} must be a mapping")
        return data

    def _parse_rubric(self, data: dict[str, Any], path: Path) -> RubricDefinition:
        """Parse rubric data into a RubricDefinition."""
        try:
            categories = {}
            for key, category_data in (data.get("categories") or {}).items():
                subcriteria = tuple(
                    SubCriterion(
                        name=sub["name"],
                        points=int(sub["points"]),
                        hint=sub.get("hint", ""),
                    )
                    for sub in category_data.get("subcriteria", [])
                )
                categories[str(key)] = CategoryDescriptor(
                    title=category_data.get("title", str(key)),
                    max_points=int(
                        category_data.get("max_points", sum(s.points for s in subcriteria))
                    ),
                    subcriteria=subcriteria,
                )

            return RubricDefinition(
                level=ReviewLevel.parse(data.get("level", path.stem)),
                name=data.get("name", path.stem),
                categories=categories,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise RubricError(f"Malformed rubric {path.name}: {e}") from e


@lru_cache(maxsize=None)
def load_builtin_rubric(level: ReviewLevel) -> RubricDefinition:
    """Load a shipped rubric once per process."""
    return RubricLoader().load_level(level)
