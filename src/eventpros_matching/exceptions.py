"""Custom exceptions for the contractor matching engine.

Scoring itself only ever raises ``ValidationError``; the remaining exceptions belong to the
loading and configuration boundary.
"""

from __future__ import annotations


class MatchingError(Exception):
    """Base exception for all matching-engine errors."""

    pass


class ValidationError(MatchingError):
    """Raised when a record is missing a required identifier.

    This is the only error that aborts scoring for an (event, contractor) pair.
    """

    def __init__(self, field_name: str, detail: str = "is required") -> None:
        self.field_name = field_name
        super().__init__(f"{field_name} {detail}.")


class InvalidPaginationError(MatchingError):
    """Raised when a matching request asks for an impossible page."""

    def __init__(self, page: int, limit: int) -> None:
        self.page = page
        self.limit = limit
        super().__init__(f"page and limit must be positive (got page={page}, limit={limit}).")


class InputFileNotFoundError(MatchingError):
    """Raised when an event or contractor input file is missing."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Input file not found: {path}")


class ConfigFileNotFoundError(MatchingError):
    """Raised when an explicitly requested config file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")


class ConfigFileParseError(MatchingError):
    """Raised when a config file is not valid TOML."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file {path} is not valid TOML: {detail}")


class ConfigFileValidationError(MatchingError):
    """Raised when a config file has unknown keys or invalid values."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file {path} is invalid: {detail}")


class WeightProfileFileNotFoundError(MatchingError):
    """Raised when the weight profile catalogue cannot be found."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Weight profile catalogue not found: {path}\n"
            "Set WEIGHT_PROFILES_PATH to a valid file or omit it to use the default weights."
        )


class WeightProfileValidationError(MatchingError):
    """Raised when the weight profile catalogue has the wrong shape."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Weight profile catalogue {path} is invalid: {detail}")


class WeightProfileSelectionError(MatchingError):
    """Raised when a requested weight profile is not in the catalogue."""

    def __init__(self, name: str, available: tuple[str, ...]) -> None:
        self.name = name
        self.available = available
        super().__init__(
            f"Unknown weight profile '{name}'. Available profiles: {', '.join(available)}"
        )


class ServiceAreaFileNotFoundError(MatchingError):
    """Raised when the configured service-area gazetteer is missing."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Service area file not found: {path}\n"
            "Set SERVICE_AREAS_PATH to a valid file or leave it empty to disable area lookup."
        )


class WeightProfileCatalogNotConfiguredError(MatchingError):
    """Raised when a weight profile is requested but no catalogue path is configured."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Weight profile '{name}' requested but no catalogue is configured.\n"
            "Set WEIGHT_PROFILES_PATH (or weight_profiles_path in the config file)."
        )
