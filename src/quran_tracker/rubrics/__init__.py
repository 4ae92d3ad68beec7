"""
Rubrics module.

Defines the basic and advanced recitation rubrics and loads them from the
YAML files shipped with the package.
"""

from .loader import RubricLoader, load_builtin_rubric
from .models import (
    RUBRIC_TOTAL,
    CategoryDescriptor,
    ReviewLevel,
    RubricDefinition,
    SubCriterion,
)

__all__ = [
    "RubricLoader",
    "load_builtin_rubric",
    "RUBRIC_TOTAL",
    "CategoryDescriptor",
    "ReviewLevel",
    "RubricDefinition",
    "SubCriterion",
]
