"""Project configuration: ``.uxray.yml`` loading and registry construction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from uxray.audit.catalog import default_registry
from uxray.audit.report import REPORT_FORMATS
from uxray.audit.rules import RuleRegistry

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".uxray.yml"


class ConfigError(Exception):
    """Raised when a configuration file is present but invalid."""


@dataclass(frozen=True)
class UXRayConfig:
    """Settings read from ``.uxray.yml``.

    Example::

        disabled_rules:
          - heading-structure
        report: md
        out: reports/a11y.md
    """

    disabled_rules: tuple[str, ...] = ()
    report: str | None = None
    out: Path | None = None


def load_config(path: Path | None = None, *, cwd: Path | None = None) -> UXRayConfig:
    """Load configuration from *path*, or from ``<cwd>/.uxray.yml`` when *path* is None.

    A missing default file yields the defaults; an explicit *path* must exist.

    Raises
    ------
    ConfigError
        When the file cannot be read or its contents are malformed.
    """
    explicit = path is not None
    if path is None:
        path = (cwd or Path.cwd()) / CONFIG_FILENAME

    if not path.is_file():
        if explicit:
            msg = f"Config file not found: {path}"
            raise ConfigError(msg)
        return UXRayConfig()

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Invalid config {path}: {exc}"
        raise ConfigError(msg) from exc

    if data is None:
        return UXRayConfig()
    if not isinstance(data, dict):
        msg = f"{path}: top level must be a mapping"
        raise ConfigError(msg)

    disabled_raw = data.get("disabled_rules", [])
    if disabled_raw is None:
        disabled_raw = []
    if not isinstance(disabled_raw, list):
        msg = f"{path}: disabled_rules must be a list"
        raise ConfigError(msg)

    report = data.get("report")
    if report is not None:
        report = str(report)
        if report not in REPORT_FORMATS:
            msg = (
                f"{path}: invalid report format '{report}', "
                f"must be one of {list(REPORT_FORMATS)}"
            )
            raise ConfigError(msg)

    out_raw = data.get("out")
    out = Path(str(out_raw)) if out_raw is not None else None

    return UXRayConfig(
        disabled_rules=tuple(str(name) for name in disabled_raw),
        report=report,
        out=out,
    )


def build_registry(
    config: UXRayConfig | None = None, *, disabled: tuple[str, ...] = ()
) -> RuleRegistry:
    """Return the default registry minus rules disabled in *config* or *disabled*.

    Unknown rule names are logged and ignored so that a config written for a
    newer rule set still loads.
    """
    registry = default_registry()
    names = (config.disabled_rules if config is not None else ()) + disabled

    known: list[str] = []
    for name in names:
        if name in registry:
            if name not in known:
                known.append(name)
        else:
            logger.warning("Unknown rule '%s' in disabled rules, ignoring", name)

    if not known:
        return registry
    return registry.without(*known)
