"""CLI for the EventProsNZ contractor matching engine.

Commands:
- match: Rank contractors for an event and write rankings, explanations and analytics
- score: Score one contractor against one event and print the breakdown as JSON
- algorithms: List the registered ranking algorithms
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Annotated, Protocol

import typer
from rich import print as rprint
from rich import print_json

from . import __version__
from .application.matching import MatchingFilters
from .application.run_match import run_match, run_score
from .config import MatchingConfig
from .config_file import load_matching_config_file
from .domain.ranking import available_algorithms
from .exceptions import (
    MatchingError,
    WeightProfileCatalogNotConfiguredError,
    WeightProfileSelectionError,
)
from .observability.logging import set_log_level
from .protocols import FileSystem


class DependenciesBuilder(Protocol):
    """Protocol for constructing CLI dependencies."""

    def __call__(self, *, config: MatchingConfig) -> CliDependencies:
        """Build dependencies for CLI commands."""
        ...


@dataclass(frozen=True)
class CliDependencies:
    """Concrete dependencies required by the CLI."""

    fs: FileSystem


@dataclass(frozen=True)
class CliContext:
    """Runtime CLI context for a single command invocation."""

    config: MatchingConfig
    deps_builder: DependenciesBuilder

    def build_dependencies(self, *, config: MatchingConfig | None = None) -> CliDependencies:
        """Return dependencies using the configured builder."""
        return self.deps_builder(config=config or self.config)


class CliContextNotInitialisedError(typer.BadParameter):
    """Raised when CLI context is missing."""

    def __init__(self) -> None:
        super().__init__("CLI context is not initialised. Use the eventpros-match entry point.")


DEFAULT_OUTPUT_DIR = Path("data/processed")


def _get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        raise CliContextNotInitialisedError()
    return ctx.obj


def _version_callback(value: bool) -> None:
    if value:
        rprint(f"eventpros-match {__version__}")
        raise typer.Exit()


def _weight_profile_error(exc: MatchingError) -> typer.BadParameter:
    return typer.BadParameter(str(exc), param_hint="--weight-profile")


def _load_config(config_path: Path | None, deps_builder: DependenciesBuilder) -> MatchingConfig:
    config = MatchingConfig.from_env()
    if config_path is None:
        return config
    deps = deps_builder(config=config)
    return config.with_file_overrides(load_matching_config_file(path=config_path, fs=deps.fs))


def create_app(deps_builder: DependenciesBuilder) -> typer.Typer:
    """Create a Typer app wired with the provided dependencies builder."""
    app = typer.Typer(
        add_completion=False,
        help="EventProsNZ contractor matching: score → rank → explain",
    )

    @app.callback()
    def main(
        ctx: typer.Context,
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="TOML config file (overrides environment variables)",
            ),
        ] = None,
        quiet: Annotated[
            bool,
            typer.Option("--quiet", "-q", help="Only log warnings and errors"),
        ] = False,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                callback=_version_callback,
                is_eager=True,
                help="Show the package version and exit",
            ),
        ] = False,
    ) -> None:
        """Initialise CLI context."""
        _ = version
        set_log_level(logging.WARNING if quiet else logging.INFO)
        try:
            config = _load_config(config_path, deps_builder)
        except (MatchingError, ValueError) as exc:
            raise typer.BadParameter(str(exc), param_hint="--config") from exc
        ctx.obj = CliContext(config=config, deps_builder=deps_builder)

    @app.command()
    def match(
        ctx: typer.Context,
        event_path: Annotated[
            Path,
            typer.Option("--event", "-e", help="Event requirements JSON file"),
        ],
        contractors_path: Annotated[
            Path,
            typer.Option("--contractors", "-k", help="Contractors JSON file"),
        ],
        out_dir: Annotated[
            Path,
            typer.Option("--output-dir", "-o", help="Directory for output files"),
        ] = DEFAULT_OUTPUT_DIR,
        algorithm: Annotated[
            str | None,
            typer.Option("--algorithm", "-a", help="Ranking algorithm (default: default)"),
        ] = None,
        weight_profile: Annotated[
            str | None,
            typer.Option("--weight-profile", "-w", help="Named weight profile to score with"),
        ] = None,
        min_score: Annotated[
            float | None,
            typer.Option(
                "--min-score",
                "-t",
                min=0.0,
                max=1.0,
                help="Drop matches below this overall score",
            ),
        ] = None,
        service_type: Annotated[
            list[str] | None,
            typer.Option(
                "--service-type",
                "-s",
                help="Only consider contractors offering this service (repeatable)",
            ),
        ] = None,
        verified_only: Annotated[
            bool,
            typer.Option("--verified-only", help="Only consider verified contractors"),
        ] = False,
        premium_only: Annotated[
            bool,
            typer.Option("--premium-only", help="Only consider showcase/spotlight contractors"),
        ] = False,
        page: Annotated[int, typer.Option("--page", min=1, help="1-based page to write")] = 1,
        limit: Annotated[
            int | None,
            typer.Option("--limit", "-l", min=1, help="Page size (default: MATCHING_PAGE_LIMIT)"),
        ] = None,
    ) -> None:
        """Rank contractors for one event and write rankings, explanations and analytics."""
        state = _get_context(ctx)
        config = state.config.with_overrides(
            ranking_algorithm=algorithm,
            weight_profile=weight_profile,
            min_score=min_score,
            page_limit=limit,
        )
        deps = state.build_dependencies(config=config)
        filters = MatchingFilters(
            service_types=tuple(service_type or ()),
            verified_only=verified_only,
            premium_only=premium_only,
            min_score=config.min_score,
        )
        try:
            outs = run_match(
                event_path=event_path,
                contractors_path=contractors_path,
                out_dir=out_dir,
                config=config,
                fs=deps.fs,
                filters=filters,
                page=page,
                limit=config.page_limit,
            )
        except (WeightProfileCatalogNotConfiguredError, WeightProfileSelectionError) as exc:
            raise _weight_profile_error(exc) from exc
        rprint("[green]✓ Match complete:[/green]")
        for k, v in outs.items():
            rprint(f"  {k}: {v}")

    @app.command()
    def score(
        ctx: typer.Context,
        event_path: Annotated[
            Path,
            typer.Option("--event", "-e", help="Event requirements JSON file"),
        ],
        contractor_path: Annotated[
            Path,
            typer.Option("--contractor", "-k", help="Single contractor JSON file"),
        ],
        weight_profile: Annotated[
            str | None,
            typer.Option("--weight-profile", "-w", help="Named weight profile to score with"),
        ] = None,
    ) -> None:
        """Score one contractor against one event and print the breakdown."""
        state = _get_context(ctx)
        config = state.config.with_overrides(weight_profile=weight_profile)
        deps = state.build_dependencies(config=config)
        try:
            result = run_score(
                event_path=event_path,
                contractor_path=contractor_path,
                config=config,
                fs=deps.fs,
            )
        except (WeightProfileCatalogNotConfiguredError, WeightProfileSelectionError) as exc:
            raise _weight_profile_error(exc) from exc
        print_json(json.dumps(asdict(result)))

    @app.command()
    def algorithms() -> None:
        """List the registered ranking algorithms."""
        for name in available_algorithms():
            rprint(f"  {name}")

    _ = (main, match, score, algorithms)

    return app
