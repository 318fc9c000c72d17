"""End-to-end tests for repository validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import CACHE_GO, CACHE_PACKAGE, CACHE_README
from vpkg_validator import core
from vpkg_validator.config import Settings
from vpkg_validator.errors import MetadataNotFound, MetadataParseError
from vpkg_validator.models import Severity
from vpkg_validator.validators.report_schema import validate_report


@pytest.fixture
def discover_calls(monkeypatch: pytest.MonkeyPatch) -> list[Path]:
    calls: list[Path] = []
    original = core.discover_templates

    def spy(root: Path, suffix: str = ".tmpl") -> list[Path]:
        calls.append(root)
        return original(root, suffix)

    monkeypatch.setattr(core, "discover_templates", spy)
    return calls


def _problems(report, severity: Severity) -> list[str]:
    return [f.format() for f in report.by_severity(severity)]


def test_cache_module_scenario(make_repo) -> None:
    catalog = make_repo(
        CACHE_PACKAGE,
        {
            "packages/acme-cache/templates/cache.go.tmpl": CACHE_GO,
            "packages/acme-cache/templates/README.md.tmpl": CACHE_README,
        },
    )

    report = core.validate_repository(catalog, settings=Settings())

    assert report.errors == 0
    assert _problems(report, Severity.WARNING) == [
        "packages/acme-cache/templates/README.md.tmpl: No installation instructions found",
        "packages/acme-cache/templates/README.md.tmpl: No code examples found",
        "packages/acme-cache/templates/cache.go.tmpl: fx-module should import go.uber.org/fx",
        "packages/acme-cache/templates/cache.go.tmpl: "
        "fx-module should export var Module or func NewModule",
    ]
    assert report.valid is True


def test_report_is_identical_across_runs(make_repo) -> None:
    packages = "".join(
        f"""\
  - name: "acme/pkg-{i}"
    title: "Package {i}"
    description: "Package number {i}"
    type: "{'fx-module' if i % 2 else 'service'}"
    templates: "packages/pkg-{i}"
    version: "v0.{i}.0"
"""
        for i in range(1, 7)
    )
    files: dict[str, str] = {}
    for i in range(1, 7):
        files[f"packages/pkg-{i}/a.go.tmpl"] = CACHE_GO
        files[f"packages/pkg-{i}/nested/b.go.tmpl"] = "func Exported() {}\n"
        files[f"packages/pkg-{i}/README.md.tmpl"] = CACHE_README
    catalog = make_repo(packages, files)

    first = core.validate_repository(catalog, settings=Settings(workers=4))
    second = core.validate_repository(catalog, settings=Settings(workers=3))

    assert first.render_text() == second.render_text()
    assert first.to_dict() == second.to_dict()

    contexts = [f.message for f in first.findings if f.rule == "package.context"]
    assert contexts == [f"Validating package {i}: acme/pkg-{i}" for i in range(1, 7)]


def test_missing_templates_dir_isolated_to_its_package(make_repo, discover_calls) -> None:
    packages = """\
  - name: "acme/broken"
    title: "Broken"
    description: "Points nowhere"
    type: "utility"
    templates: "packages/missing"
    version: "v1.0.0"
""" + CACHE_PACKAGE
    catalog = make_repo(
        packages,
        {
            "packages/acme-cache/templates/cache.go.tmpl": CACHE_GO,
            "packages/acme-cache/templates/README.md.tmpl": CACHE_README,
        },
    )

    report = core.validate_repository(catalog)

    package_one = [f for f in report.findings if f.package_index == 1 and f.severity is not Severity.INFO]
    assert [f.message for f in package_one] == [
        "Package 1: Templates directory not found: packages/missing"
    ]
    assert discover_calls == [catalog.parent.resolve() / "packages/acme-cache/templates"]
    assert sum(f.package_index == 2 for f in report.by_severity(Severity.WARNING)) == 4
    assert report.valid is False


def test_empty_packages_skips_package_validation(make_repo, discover_calls) -> None:
    catalog = make_repo(None)
    catalog.write_text(catalog.read_text(encoding="utf-8") + "packages: []\n", encoding="utf-8")

    report = core.validate_repository(catalog)

    assert report.errors == 1
    assert _problems(report, Severity.ERROR) == ["packages array cannot be empty"]
    assert report.valid is False
    assert discover_calls == []
    assert not any(f.rule == "package.context" for f in report.findings)


def test_empty_templates_directory_is_error(make_repo) -> None:
    catalog = make_repo(CACHE_PACKAGE, {"packages/acme-cache/templates/notes.txt": "not a template"})
    report = core.validate_repository(catalog)
    assert _problems(report, Severity.ERROR) == [
        "Package 1: No template files found in packages/acme-cache/templates"
    ]


def test_broken_package_does_not_stop_siblings(make_repo) -> None:
    packages = """\
  - "not-a-mapping"
  - name: "Bad Name"
    type: "widget"
    templates: "packages/acme-cache/templates"
    version: "latest"
    tags: "a,b"
""" + CACHE_PACKAGE
    catalog = make_repo(
        packages,
        {
            "packages/acme-cache/templates/cache.go.tmpl": CACHE_GO,
            "packages/acme-cache/templates/secrets.env.tmpl": 'TOKEN="s3cr3t"\n{{.Title}}\n',
        },
    )

    report = core.validate_repository(catalog)

    by_package = {i: [f for f in report.findings if f.package_index == i] for i in (1, 2, 3)}
    assert any(f.rule == "package.entry" for f in by_package[1])
    assert {f.rule for f in by_package[2] if f.severity is Severity.ERROR} == {
        "package.required",
        "package.name",
        "package.tags",
        "security",
    }
    assert any(f.rule == "security" for f in by_package[3])
    assert report.valid is False


def test_found_templates_reported_as_info(make_repo) -> None:
    catalog = make_repo(
        CACHE_PACKAGE,
        {
            "packages/acme-cache/templates/cache.go.tmpl": CACHE_GO,
            "packages/acme-cache/templates/README.md.tmpl": CACHE_README,
        },
    )
    report = core.validate_repository(catalog)
    assert "Found 2 template files for acme/cache" in [f.message for f in report.by_severity(Severity.INFO)]


def test_base_dir_override(make_repo, tmp_path: Path) -> None:
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    catalog = make_repo(CACHE_PACKAGE, {"packages/acme-cache/templates/cache.go.tmpl": CACHE_GO})
    report = core.validate_repository(catalog, base_dir=elsewhere)
    assert any(f.rule == "package.templates" for f in report.findings)


def test_report_matches_schema(make_repo) -> None:
    catalog = make_repo(CACHE_PACKAGE, {"packages/acme-cache/templates/cache.go.tmpl": CACHE_GO})
    validate_report(core.validate_repository(catalog).to_dict())


def test_missing_catalog_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(MetadataNotFound):
        core.validate_repository(tmp_path / "meta.yaml")


def test_malformed_catalog_raises_parse_error(tmp_path: Path) -> None:
    catalog = tmp_path / "meta.yaml"
    catalog.write_text("packages: [\n", encoding="utf-8")
    with pytest.raises(MetadataParseError):
        core.validate_repository(catalog)


def test_catalog_from_environment(make_repo, monkeypatch: pytest.MonkeyPatch) -> None:
    catalog = make_repo(CACHE_PACKAGE, {"packages/acme-cache/templates/cache.go.tmpl": CACHE_GO})
    monkeypatch.setenv("VPKG_VALIDATOR_CATALOG", str(catalog))
    report = core.validate_repository()
    assert report.errors == 0
