"""Process-wide settings for checks and the final report.

Settings live in a single :class:`CheckConfig` guarded by a lock. They can
be changed in code with :func:`set_config` or read from a YAML file::

    # softcheck.yaml
    color: never
    approx_rel_tol: 0.0005
    exit_on_failure: true
"""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass, fields
from pathlib import Path

import yaml

from softcheck.types import CheckConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "softcheck.yaml"
DEFAULT_APPROX_REL_TOL = 0.001

COLOR_MODES = ("auto", "always", "never")


@dataclass
class CheckConfig:
    """Settings for diagnostics and the end-of-run report.

    Attributes:
        color: ``auto`` colors only when stdout is a terminal,
            ``always``/``never`` force it on or off.
        approx_rel_tol: Relative tolerance used by ``check_equal_approx``.
        exit_on_failure: Whether the final report ends the process with a
            non-zero status when failures were recorded.
    """

    color: str = "auto"
    approx_rel_tol: float = DEFAULT_APPROX_REL_TOL
    exit_on_failure: bool = True

    def validate(self) -> None:
        """Raise :class:`CheckConfigError` if a field is out of range."""
        if self.color not in COLOR_MODES:
            raise CheckConfigError(
                f"color must be one of {COLOR_MODES}, got '{self.color}'"
            )
        if isinstance(self.approx_rel_tol, bool) or not isinstance(self.approx_rel_tol, (int, float)):
            raise CheckConfigError(
                f"approx_rel_tol must be a number, got {type(self.approx_rel_tol).__name__}"
            )
        if self.approx_rel_tol < 0:
            raise CheckConfigError(f"approx_rel_tol must be >= 0, got {self.approx_rel_tol}")
        if not isinstance(self.exit_on_failure, bool):
            raise CheckConfigError(
                f"exit_on_failure must be a bool, got {type(self.exit_on_failure).__name__}"
            )

    def to_dict(self) -> dict:
        """Serialise to a plain dict (for writing YAML)."""
        return asdict(self)


_config_lock = threading.Lock()
_global_config: CheckConfig | None = None


def get_config() -> CheckConfig:
    """Return the process-wide configuration, creating it on first use."""
    global _global_config  # pylint: disable=global-statement
    with _config_lock:
        if _global_config is None:
            _global_config = CheckConfig()
        return _global_config


def set_config(
    color: str | None = None,
    approx_rel_tol: float | None = None,
    exit_on_failure: bool | None = None,
) -> CheckConfig:
    """Update the process-wide configuration.

    Only arguments that are not ``None`` are applied. The updated config is
    validated before it is returned; an invalid update leaves the previous
    settings in place.

    Example:
        set_config(color="never")
        set_config(approx_rel_tol=1e-4, exit_on_failure=False)
    """
    global _global_config  # pylint: disable=global-statement
    with _config_lock:
        current = _global_config or CheckConfig()
        updated = CheckConfig(**current.to_dict())

        updates = {
            "color": color,
            "approx_rel_tol": approx_rel_tol,
            "exit_on_failure": exit_on_failure,
        }
        for key, value in updates.items():
            if value is not None:
                setattr(updated, key, value)

        updated.validate()
        _global_config = updated
        return _global_config


def reset_config() -> CheckConfig:
    """Restore the default configuration."""
    global _global_config  # pylint: disable=global-statement
    with _config_lock:
        _global_config = CheckConfig()
        return _global_config


def load_config(path: str | Path = DEFAULT_CONFIG_FILE) -> CheckConfig:
    """Load and validate a YAML configuration file.

    Args:
        path: Path to the configuration file.

    Returns:
        Parsed :class:`CheckConfig`. The process-wide config is not touched;
        pass the result to :func:`set_config` to apply it.

    Raises:
        CheckConfigError: If the file is missing or malformed.
    """
    p = Path(path)
    if not p.exists():
        raise CheckConfigError(f"Configuration file not found: {p}")

    try:
        with open(p, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise CheckConfigError(f"Failed to parse {p}: {exc}") from exc

    if not isinstance(data, dict):
        raise CheckConfigError(f"Expected a YAML mapping in {p}, got {type(data).__name__}")

    known = {f.name for f in fields(CheckConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise CheckConfigError(f"Unknown keys in {p}: {', '.join(map(str, unknown))}")

    cfg = CheckConfig(**data)
    cfg.validate()
    logger.debug("loaded softcheck config from %s: %s", p, cfg)
    return cfg
