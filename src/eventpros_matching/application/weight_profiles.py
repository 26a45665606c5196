"""Loading and validation for weight profile catalogues.

A catalogue holds named ``WeightConfig`` variants (for example A/B test arms). The file
shape is validated strictly; the weight values themselves are only type-checked here and
are normalised by the scorer, so a variant whose weights do not sum to 1.0 still loads.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from ..domain.weights import DEFAULT_WEIGHTS, WeightConfig
from ..exceptions import (
    WeightProfileFileNotFoundError,
    WeightProfileSelectionError,
    WeightProfileValidationError,
)
from ..protocols import FileSystem

_SCHEMA_VERSION = 1


class _WeightsModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    service_type: float = DEFAULT_WEIGHTS.service_type
    experience: float = DEFAULT_WEIGHTS.experience
    pricing: float = DEFAULT_WEIGHTS.pricing
    location: float = DEFAULT_WEIGHTS.location
    performance: float = DEFAULT_WEIGHTS.performance
    availability: float = DEFAULT_WEIGHTS.availability


class _WeightProfileModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    description: str = ""
    weights: _WeightsModel

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        text = value.strip().lower()
        if not text:
            raise ValueError
        return text


class _WeightProfileCatalogModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    default_profile: str
    profiles: tuple[_WeightProfileModel, ...]

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, value: int) -> int:
        if value != _SCHEMA_VERSION:
            raise ValueError
        return value

    @field_validator("default_profile")
    @classmethod
    def _validate_default_profile(cls, value: str) -> str:
        text = value.strip().lower()
        if not text:
            raise ValueError
        return text

    @model_validator(mode="after")
    def _validate_profiles(self) -> _WeightProfileCatalogModel:
        if not self.profiles:
            raise ValueError
        names = [profile.name for profile in self.profiles]
        if len(set(names)) != len(names):
            raise ValueError
        if self.default_profile not in set(names):
            raise ValueError
        return self


@dataclass(frozen=True)
class WeightProfile:
    """A named weight configuration."""

    name: str
    description: str
    weights: WeightConfig


@dataclass(frozen=True)
class WeightProfileCatalog:
    """Named weight profiles bundled in a single schema version."""

    schema_version: int
    default_profile: str
    profiles: tuple[WeightProfile, ...]


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def _to_weight_config(model: _WeightsModel) -> WeightConfig:
    return WeightConfig(
        service_type=model.service_type,
        experience=model.experience,
        pricing=model.pricing,
        location=model.location,
        performance=model.performance,
        availability=model.availability,
    )


def load_weight_profile_catalog(*, path: Path, fs: FileSystem) -> WeightProfileCatalog:
    """Load and validate a weight profile catalogue from JSON."""
    if not fs.exists(path):
        raise WeightProfileFileNotFoundError(str(path))

    payload = fs.read_text(path)
    try:
        model = _WeightProfileCatalogModel.model_validate_json(payload)
    except ValidationError as exc:
        raise WeightProfileValidationError(str(path), _format_validation_error(exc)) from exc

    return WeightProfileCatalog(
        schema_version=model.schema_version,
        default_profile=model.default_profile,
        profiles=tuple(
            WeightProfile(
                name=profile.name,
                description=profile.description,
                weights=_to_weight_config(profile.weights),
            )
            for profile in model.profiles
        ),
    )


def resolve_weight_profile(
    catalog: WeightProfileCatalog,
    profile_name: str | None = None,
) -> WeightProfile:
    """Resolve one profile by name, defaulting to the catalogue default profile."""
    target = (profile_name or catalog.default_profile).strip().lower()
    if not target:
        target = catalog.default_profile

    for profile in catalog.profiles:
        if profile.name == target:
            return profile

    available = tuple(sorted(profile.name for profile in catalog.profiles))
    raise WeightProfileSelectionError(target, available)
