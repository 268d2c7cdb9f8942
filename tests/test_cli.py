from click.testing import CliRunner

import upkeep.core.source as source_mod
from upkeep.cli import main
from upkeep.core.manifest import Manifest

from conftest import reg

INDEX = """
packages:
  ripgrep: {version: "14.1.0"}
  fd: {version: "9.0.0"}
"""


def _serve(monkeypatch) -> None:
    monkeypatch.setattr(source_mod, "fetch_text", lambda url, timeout=30.0: INDEX)


def _install(config, *descs) -> None:
    manifest = Manifest(config.manifest_path)
    for desc in descs:
        manifest.add_version(desc)
        (config.packages_dir / f"{desc.name}-{desc.version}").mkdir(parents=True, exist_ok=True)


def test_list_empty(config) -> None:
    result = CliRunner().invoke(main, ["list"])
    assert result.exit_code == 0
    assert "No packages installed" in result.output


def test_list_shows_packages(config) -> None:
    _install(config, reg("ripgrep", "13.0.0"))
    result = CliRunner().invoke(main, ["list"])
    assert result.exit_code == 0
    assert "ripgrep" in result.output
    assert "13.0.0" in result.output


def test_outdated_after_refresh(monkeypatch, config) -> None:
    _serve(monkeypatch)
    _install(config, reg("ripgrep", "13.0.0"), reg("fd", "9.0.0"))

    assert CliRunner().invoke(main, ["refresh"]).exit_code == 0
    result = CliRunner().invoke(main, ["outdated", "--no-vc"])

    assert result.exit_code == 0
    assert "ripgrep" in result.output
    assert "14.1.0" in result.output
    assert "1 package(s) can be upgraded" in result.output


def test_refresh_is_throttled(monkeypatch, config) -> None:
    _serve(monkeypatch)
    runner = CliRunner()
    runner.invoke(main, ["refresh"])

    result = runner.invoke(main, ["refresh"])
    assert "less than 7 day(s) old" in result.output

    result = runner.invoke(main, ["refresh", "--force"])
    assert "Package index refreshed" in result.output


def test_upgrade_all(monkeypatch, config) -> None:
    _serve(monkeypatch)
    _install(config, reg("ripgrep", "13.0.0"), reg("fd", "9.0.0"))

    result = CliRunner().invoke(main, ["upgrade", "--all", "--no-vc"])

    assert result.exit_code == 0, result.output
    assert "Upgraded: ripgrep" in result.output
    manifest = Manifest(config.manifest_path)
    assert manifest.get("ripgrep").versions == ["14.1.0"]


def test_upgrade_single_candidate_asks(monkeypatch, config) -> None:
    _serve(monkeypatch)
    _install(config, reg("ripgrep", "13.0.0"))

    result = CliRunner().invoke(main, ["upgrade", "--no-vc"], input="n\n")

    assert result.exit_code == 0, result.output
    assert "ripgrep (13.0.0) => (14.1.0)" in result.output
    assert "Cancelled" in result.output


def test_upgrade_up_to_date(monkeypatch, config) -> None:
    _serve(monkeypatch)
    _install(config, reg("fd", "9.0.0"))

    result = CliRunner().invoke(main, ["upgrade", "--all", "--no-vc"])

    assert result.exit_code == 0
    assert "All packages are up to date" in result.output


def test_upgrade_without_sources(config) -> None:
    config.sources = []
    result = CliRunner().invoke(main, ["upgrade", "--all"])
    assert result.exit_code == 1
    assert "No package sources configured" in result.output


def test_schedule_rejects_bad_time(config) -> None:
    result = CliRunner().invoke(main, ["schedule", "--at", "25:99"])
    assert result.exit_code == 1
    assert "Invalid time" in result.output
