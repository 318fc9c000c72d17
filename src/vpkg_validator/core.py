"""Core validation entrypoints.

This module MUST NOT contain CI-specific dependencies so it can be used by
both the CLI and any wrapper that embeds the validator.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .config import RuleTables, Settings, load_settings
from .discovery import discover_templates
from .models import Catalog, Finding, PackageSpec, Severity, TemplateFile, TemplateKind
from .parsers.metadata import is_remote, load_catalog
from .report import Aggregator, Report
from .validators.catalog import check_catalog
from .validators.package import check_package, resolve_templates_dir
from .validators.template import check_template

LOGGER = logging.getLogger(__name__)


def validate_package(
    package: PackageSpec,
    index: int,
    aggregator: Aggregator,
    *,
    base_dir: Path,
    rules: RuleTables,
) -> None:
    """Check one package declaration and, if its directory exists, its templates."""
    LOGGER.debug("Validating package %d: %s", index, package.display_name)
    aggregator.extend(check_package(package, index, base_dir=base_dir, rules=rules))

    templates_dir = resolve_templates_dir(package, base_dir)
    if templates_dir is None:
        return

    paths = sorted(
        discover_templates(templates_dir, rules.template_suffix),
        key=lambda p: p.relative_to(templates_dir).as_posix(),
    )
    if not paths:
        aggregator.add(
            Finding(
                severity=Severity.ERROR,
                message=f"Package {index}: No template files found in {package.templates_dir}",
                rule="package.discovery",
                package_index=index,
            )
        )
        return

    aggregator.add(
        Finding(
            severity=Severity.INFO,
            message=f"Found {len(paths)} template files for {package.display_name}",
            rule="package.discovery",
            package_index=index,
        )
    )

    for ordinal, path in enumerate(paths):
        relative = path.relative_to(templates_dir).as_posix()
        template = TemplateFile(
            path=path,
            relative_path=f"{str(package.templates_dir).rstrip('/')}/{relative}",
            package=package,
            package_index=index,
            ordinal=ordinal,
            kind=TemplateKind.detect(
                relative, rules.source_suffixes, rules.documentation_markers
            ),
        )
        aggregator.extend(check_template(template, rules))


def validate_catalog(
    catalog: Catalog,
    *,
    base_dir: Path,
    settings: Settings | None = None,
) -> Report:
    """Validate an already parsed catalog and return the aggregated report.

    Params:
        catalog: parsed catalog document
        base_dir: directory that relative ``templates`` paths resolve against
        settings: worker count and rule tables; defaults when None
    """
    settings = settings or Settings()
    aggregator = Aggregator()
    aggregator.extend(check_catalog(catalog, settings.rules))

    if not catalog.packages:
        return aggregator.report()

    with ThreadPoolExecutor(max_workers=settings.workers) as pool:
        futures = [
            pool.submit(
                validate_package,
                package,
                index,
                aggregator,
                base_dir=base_dir,
                rules=settings.rules,
            )
            for index, package in enumerate(catalog.packages, start=1)
        ]
        for future in futures:
            future.result()

    report = aggregator.report()
    LOGGER.info(
        "Validated %d package(s): %d error(s), %d warning(s)",
        len(catalog.packages),
        report.errors,
        report.warnings,
    )
    return report


def validate_repository(
    source: str | Path | None = None,
    *,
    base_dir: Path | None = None,
    settings: Settings | None = None,
) -> Report:
    """Load the catalog from ``source`` and validate it.

    Relative template directories resolve against ``base_dir``; when it is
    None they resolve against the catalog's own directory, or the current
    directory for remote catalogs.

    Raises:
        MetadataNotFound: If the catalog cannot be located.
        MetadataParseError: If the catalog cannot be decoded.
    """
    settings = settings or load_settings()
    source = str(source or settings.catalog)
    catalog = load_catalog(source)

    if base_dir is None:
        base_dir = Path.cwd() if is_remote(source) else Path(source).resolve().parent

    return validate_catalog(catalog, base_dir=base_dir.resolve(), settings=settings)
