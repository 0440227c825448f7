"""Project profile models.

The profile is supplied by the interview/brief collaborator and drives
initial agent selection. Only the fields used for selection are modeled;
unknown keys are ignored.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..resolution.exceptions import InvalidProfileError


class Complexity(str, Enum):
    """Declared project complexity."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    VERY_COMPLEX = "very-complex"


class ProjectContext(BaseModel):
    """What the project is about."""

    model_config = ConfigDict(extra="ignore")

    domain: Optional[str] = Field(None, description="Explicit project domain (marketplace, saas, ...)")
    cultural_requirements: bool = False
    payment_integration: bool = False


class BusinessContext(BaseModel):
    """Business-level description of the project."""

    model_config = ConfigDict(extra="ignore")

    complexity: Complexity = Complexity.MODERATE
    project_types: list[str] = Field(default_factory=list)
    description: str = ""


class TechnicalContext(BaseModel):
    """Technical constraints of the project."""

    model_config = ConfigDict(extra="ignore")

    stack: list[str] = Field(default_factory=list)
    security_requirements: bool = False


class ProjectProfile(BaseModel):
    """Structured description of a project.

    Example:
        profile = ProjectProfile.model_validate({
            "context": {"domain": "marketplace", "cultural_requirements": True},
            "business": {"complexity": "complex"},
            "technical": {"stack": ["nextjs"]},
        })
    """

    model_config = ConfigDict(extra="ignore")

    context: ProjectContext = Field(default_factory=ProjectContext)
    business: BusinessContext = Field(default_factory=BusinessContext)
    technical: TechnicalContext = Field(default_factory=TechnicalContext)

    @classmethod
    def from_mapping(cls, data: Any) -> "ProjectProfile":
        """Validate raw profile data.

        Raises:
            InvalidProfileError: If the data is missing or malformed
        """
        if data is None:
            raise InvalidProfileError("A project profile is required")
        if not isinstance(data, dict):
            raise InvalidProfileError(
                f"Project profile must be a mapping, got {type(data).__name__}"
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidProfileError(f"Invalid project profile: {e}") from e


def load_profile(path: str | Path) -> ProjectProfile:
    """Load a project profile from a YAML or JSON file.

    Raises:
        InvalidProfileError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.is_file():
        raise InvalidProfileError(f"Profile file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidProfileError(f"Could not parse profile file {path}: {e}") from e

    return ProjectProfile.from_mapping(data)
