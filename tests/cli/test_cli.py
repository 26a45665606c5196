"""Tests for CLI wiring and overrides."""

from __future__ import annotations

import re
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from eventpros_matching import cli
from eventpros_matching.application.matching import MatchingFilters
from eventpros_matching.cli import CliDependencies
from eventpros_matching.config import MatchingConfig
from eventpros_matching.exceptions import InputFileNotFoundError
from eventpros_matching.protocols import FileSystem
from tests.fakes import InMemoryFileSystem
from tests.support.records import contractor_payload, event_payload

WEIGHT_CATALOG = {
    "schema_version": 1,
    "default_profile": "default",
    "profiles": [
        {"name": "default", "weights": {}},
        {
            "name": "location_only",
            "weights": {
                "service_type": 0.0,
                "experience": 0.0,
                "pricing": 0.0,
                "location": 1.0,
                "performance": 0.0,
                "availability": 0.0,
            },
        },
    ],
}

runner = CliRunner()
_ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE_RE.sub("", text)


def _patch_env_config(monkeypatch: pytest.MonkeyPatch, config: MatchingConfig) -> None:
    def fake_from_env(
        cls: type[MatchingConfig], dotenv_path: str | None = None
    ) -> MatchingConfig:
        _ = (cls, dotenv_path)
        return config

    monkeypatch.setattr(cli.MatchingConfig, "from_env", classmethod(fake_from_env))


def _build_app_with_fs(fs: InMemoryFileSystem) -> typer.Typer:
    def build_with_shared_deps(*, config: MatchingConfig) -> CliDependencies:
        _ = config
        return CliDependencies(fs=fs)

    return cli.create_app(build_with_shared_deps)


def _seeded_fs() -> InMemoryFileSystem:
    fs = InMemoryFileSystem()
    fs.write_json(event_payload(), Path("in/event.json"))
    fs.write_json(contractor_payload(), Path("in/contractor.json"))
    fs.write_json(
        {
            "contractors": [
                contractor_payload(),
                contractor_payload(contractor_id="con-2", service_categories=["venue"]),
            ]
        },
        Path("in/contractors.json"),
    )
    return fs


def test_cli_version_option_prints_package_version(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env_config(monkeypatch, MatchingConfig())
    monkeypatch.setattr(cli, "__version__", "9.9.9", raising=False)

    result = runner.invoke(_build_app_with_fs(InMemoryFileSystem()), ["--version"])

    assert result.exit_code == 0
    assert "9.9.9" in _strip_ansi(result.output)


def test_cli_match_passes_overrides_to_run_match(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    _patch_env_config(monkeypatch, MatchingConfig(page_limit=10))

    def fake_run_match(
        *,
        event_path: str | Path,
        contractors_path: str | Path,
        out_dir: str | Path,
        config: MatchingConfig,
        fs: FileSystem,
        filters: MatchingFilters,
        page: int,
        limit: int,
    ) -> dict[str, Path]:
        _ = (event_path, contractors_path, fs)
        captured.update(config=config, filters=filters, page=page, limit=limit, out_dir=out_dir)
        return {"rankings": Path("out/contractor_rankings.csv")}

    monkeypatch.setattr(cli, "run_match", fake_run_match)

    result = runner.invoke(
        _build_app_with_fs(InMemoryFileSystem()),
        [
            "match",
            "--event",
            "in/event.json",
            "--contractors",
            "in/contractors.json",
            "--output-dir",
            "out",
            "--algorithm",
            "Performance",
            "--weight-profile",
            "quality_first",
            "--min-score",
            "0.6",
            "--service-type",
            "photography",
            "--service-type",
            "video",
            "--verified-only",
            "--page",
            "2",
        ],
    )

    assert result.exit_code == 0, result.output
    config = captured["config"]
    assert isinstance(config, MatchingConfig)
    assert config.ranking_algorithm == "performance"
    assert config.weight_profile == "quality_first"
    assert config.min_score == 0.6
    assert captured["filters"] == MatchingFilters(
        service_types=("photography", "video"),
        verified_only=True,
        premium_only=False,
        min_score=0.6,
    )
    assert captured["page"] == 2
    assert captured["limit"] == 10
    assert captured["out_dir"] == Path("out")
    assert "Match complete" in _strip_ansi(result.output)


def test_cli_match_writes_outputs_end_to_end(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env_config(monkeypatch, MatchingConfig())
    fs = _seeded_fs()

    result = runner.invoke(
        _build_app_with_fs(fs),
        [
            "match",
            "--event",
            "in/event.json",
            "--contractors",
            "in/contractors.json",
            "--output-dir",
            "out",
        ],
    )

    assert result.exit_code == 0, result.output
    rankings = fs.read_csv(Path("out/contractor_rankings.csv"))
    assert rankings["contractor_id"].tolist() == ["con-1", "con-2"]
    assert fs.exists(Path("out/matching_analytics.json"))


def test_cli_global_config_file_overrides_env(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env_config(monkeypatch, MatchingConfig(min_score=0.0, page_limit=7))
    fs = _seeded_fs()
    fs.write_text(
        """
schema_version = 1
[matching]
min_score = 0.9
""".strip(),
        Path("config/matching.toml"),
    )

    result = runner.invoke(
        _build_app_with_fs(fs),
        [
            "--config",
            "config/matching.toml",
            "match",
            "--event",
            "in/event.json",
            "--contractors",
            "in/contractors.json",
            "--output-dir",
            "out",
        ],
    )

    assert result.exit_code == 0, result.output
    rankings = fs.read_csv(Path("out/contractor_rankings.csv"))
    assert rankings["contractor_id"].tolist() == ["con-1"]


def test_cli_rejects_invalid_config_file(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env_config(monkeypatch, MatchingConfig())
    fs = _seeded_fs()
    fs.write_text("schema_version = 1\n[matching]\nnope = 1\n", Path("bad.toml"))

    result = runner.invoke(_build_app_with_fs(fs), ["--config", "bad.toml", "algorithms"])

    assert result.exit_code == 2
    assert "bad.toml" in _strip_ansi(result.output)


def test_cli_match_missing_input_surfaces_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env_config(monkeypatch, MatchingConfig())

    result = runner.invoke(
        _build_app_with_fs(InMemoryFileSystem()),
        ["match", "--event", "missing.json", "--contractors", "missing.json"],
    )

    assert result.exit_code != 0
    assert isinstance(result.exception, InputFileNotFoundError)


def test_cli_score_prints_breakdown(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env_config(monkeypatch, MatchingConfig())

    result = runner.invoke(
        _build_app_with_fs(_seeded_fs()),
        ["score", "--event", "in/event.json", "--contractor", "in/contractor.json"],
    )

    assert result.exit_code == 0, result.output
    output = _strip_ansi(result.output)
    assert '"service_type_score": 1.0' in output
    assert '"overall_score"' in output


def test_cli_algorithms_lists_strategies(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env_config(monkeypatch, MatchingConfig())

    result = runner.invoke(_build_app_with_fs(InMemoryFileSystem()), ["algorithms"])

    assert result.exit_code == 0
    output = _strip_ansi(result.output)
    assert "default" in output
    assert "performance" in output


def test_cli_score_rejects_weight_profile_without_catalog(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _patch_env_config(monkeypatch, MatchingConfig())

    result = runner.invoke(
        _build_app_with_fs(_seeded_fs()),
        ["score", "-e", "in/event.json", "-k", "in/contractor.json", "-w", "no_such_profile"],
    )

    assert result.exit_code == 2
    output = _strip_ansi(result.output)
    assert "no_such_profile" in output
    assert "WEIGHT_PROFILES_PATH" in output


def test_cli_score_rejects_unknown_weight_profile_in_catalog(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _patch_env_config(monkeypatch, MatchingConfig(weight_profiles_path="ref/weights.json"))
    fs = _seeded_fs()
    fs.write_json(WEIGHT_CATALOG, Path("ref/weights.json"))

    result = runner.invoke(
        _build_app_with_fs(fs),
        ["score", "-e", "in/event.json", "-k", "in/contractor.json", "-w", "no_such_profile"],
    )

    assert result.exit_code == 2
    output = _strip_ansi(result.output)
    assert "no_such_profile" in output
    assert "location_only" in output


def test_cli_match_rejects_weight_profile_without_catalog(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _patch_env_config(monkeypatch, MatchingConfig())
    fs = _seeded_fs()

    result = runner.invoke(
        _build_app_with_fs(fs),
        ["match", "-e", "in/event.json", "-k", "in/contractors.json", "-o", "out", "-w", "typo"],
    )

    assert result.exit_code == 2
    assert "typo" in _strip_ansi(result.output)
    assert not fs.exists(Path("out/contractor_rankings.csv"))


def test_cli_score_uses_named_weight_profile(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env_config(monkeypatch, MatchingConfig(weight_profiles_path="ref/weights.json"))
    fs = _seeded_fs()
    fs.write_json(WEIGHT_CATALOG, Path("ref/weights.json"))
    fs.write_json(
        contractor_payload(location={"lat": -41.0, "lng": 174.0}), Path("in/far.json")
    )

    result = runner.invoke(
        _build_app_with_fs(fs),
        ["score", "-e", "in/event.json", "-k", "in/far.json", "-w", "location_only"],
    )

    assert result.exit_code == 0, result.output
    output = _strip_ansi(result.output)
    assert '"service_type_score": 1.0' in output
    assert '"overall_score": 0.0' in output
