"""Configuration loading and management for Plan Wolf.

Configuration sources are merged in priority order:
    1. Defaults (defined in AuditConfig)
    2. Global config (~/.plan-wolf.toml)
    3. Project config (<project>/plan-wolf.toml)
    4. Explicit config file (--config)
    5. Environment variables (PLAN_WOLF_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(Path("."), fast=True)
    >>> config.fast
    True
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]


@dataclass(frozen=True)
class ScoringThresholds:
    """Fixed rubric constants used by the phase scorers.

    Attributes:
        Build:
            bundle_limit_kb: Main bundle size that still earns full points
            bundle_growth_kb: Growth since the last run that gets reported
            asset_limit_kb: Non-script asset size reported as oversized
            min_js_chunks: Script chunk count that shows code splitting is on

        Impact:
            impact_high_files: Affected-set size above which risk is "high"
            impact_medium_files: Affected-set size above which risk is "medium"
            long_string_length: Literal length treated as untranslated text
            long_file_lines: File length that earns a deep-scan penalty
            deep_scan_max_penalty: Upper bound of the per-run deep-scan penalty

        Wiring:
            handler_count_high: Handler count for the top tier
            handler_count_medium: Handler count for the middle tier
            expected_languages: Number of language files expected in i18n

        Multi-level:
            seo_guide_pages: Generated guide pages for full SEO points
            seo_content_pages_high / seo_content_pages_low: Generated content page tiers
            data_files_high: Data files for full data points

        Self-evaluation:
            weak_phase_ratio: Phases below this ratio are listed as weak
            strong_phase_ratio: Phases at or above this ratio are listed as strong
    """

    bundle_limit_kb: int = 750
    bundle_growth_kb: int = 20
    asset_limit_kb: int = 500
    min_js_chunks: int = 5

    impact_high_files: int = 20
    impact_medium_files: int = 5
    long_string_length: int = 40
    long_file_lines: int = 800
    deep_scan_max_penalty: int = 3

    handler_count_high: int = 300
    handler_count_medium: int = 200
    expected_languages: int = 4

    seo_guide_pages: int = 50
    seo_content_pages_high: int = 800
    seo_content_pages_low: int = 100
    data_files_high: int = 100

    weak_phase_ratio: float = 0.6
    strong_phase_ratio: float = 0.9

    def __post_init__(self) -> None:
        if self.bundle_limit_kb < 1:
            raise ValueError("bundle_limit_kb must be at least 1")
        if self.impact_medium_files > self.impact_high_files:
            raise ValueError("impact_medium_files must not exceed impact_high_files")
        if self.handler_count_medium > self.handler_count_high:
            raise ValueError("handler_count_medium must not exceed handler_count_high")
        for name in ("weak_phase_ratio", "strong_phase_ratio"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0.0 and 1.0")
        if self.deep_scan_max_penalty < 0:
            raise ValueError("deep_scan_max_penalty must be non-negative")


@dataclass(frozen=True)
class AuditConfig:
    """Configuration for one audit run.

    Paths are relative to the project root unless absolute. Tool commands
    are split with shlex and run without a shell; an empty command disables
    the corresponding check.
    """

    # Layout
    source_dir: str = "src"
    extensions: list[str] = field(
        default_factory=lambda: [".js", ".mjs", ".cjs", ".jsx", ".ts", ".tsx", ".html"]
    )
    excluded_dirs: list[str] = field(
        default_factory=lambda: ["node_modules", "dist", "build", "coverage"]
    )
    corpus_dirs: list[str] = field(default_factory=lambda: ["tests", "scripts", "e2e"])
    tests_dir: str = "tests"
    dist_dir: str = "dist"
    memory_file: str = "wolf-memory.json"
    features_file: str = "memory/features.md"

    # Wiring
    global_object: str = "window"
    critical_files: list[str] = field(
        default_factory=lambda: [
            "src/main.js",
            "src/stores/state.js",
            "src/components/App.js",
            "src/i18n/index.js",
        ]
    )
    feature_files: dict[str, str] = field(default_factory=dict)

    # External tools
    lint_command: str = "npx eslint src/ --max-warnings=0"
    lint_report_command: str = "npx eslint src/ --format=compact"
    i18n_lint_command: str = "node scripts/lint-i18n.mjs"
    privacy_lint_command: str = "node scripts/audit-rgpd.mjs"
    wiring_test_command: str = "npx vitest run tests/wiring/"
    integration_test_command: str = "npx vitest run tests/integration/"
    test_command: str = "npx vitest run"
    build_command: str = "npm run build"
    performance_command: str = ""

    # Timeouts
    command_timeout_seconds: int = 120
    test_timeout_seconds: int = 300
    build_timeout_seconds: int = 300
    regression_timeout_seconds: int = 60

    # Run mode
    fast: bool = False
    pass_threshold: int = 70
    verbosity: Verbosity = "normal"

    # Memory retention
    max_runs: int = 50
    max_errors: int = 200
    max_followed_recommendations: int = 60
    max_open_recommendations: int = 100

    thresholds: ScoringThresholds = field(default_factory=ScoringThresholds)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not 0 <= self.pass_threshold <= 100:
            raise InvalidConfigError("pass_threshold", self.pass_threshold, "must be 0-100")
        for name in (
            "command_timeout_seconds",
            "test_timeout_seconds",
            "build_timeout_seconds",
            "regression_timeout_seconds",
        ):
            if getattr(self, name) < 1:
                raise InvalidConfigError(name, getattr(self, name), "must be at least 1")
        for name in (
            "max_runs",
            "max_errors",
            "max_followed_recommendations",
            "max_open_recommendations",
        ):
            if getattr(self, name) < 1:
                raise InvalidConfigError(name, getattr(self, name), "must be at least 1")
        if not self.global_object.isidentifier():
            raise InvalidConfigError(
                "global_object", self.global_object, "must be a JavaScript identifier"
            )
        if not self.extensions:
            raise InvalidConfigError("extensions", self.extensions, "must not be empty")

    @property
    def mode(self) -> str:
        return "fast" if self.fast else "full"


def load_config(
    project_root: Path, config_file: Optional[Path] = None, **overrides: Any
) -> AuditConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        project_root: Root of the audited project (holds plan-wolf.toml)
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AuditConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".plan-wolf.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = Path(project_root) / "plan-wolf.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    thresholds_dict = merged.pop("thresholds", None)
    if thresholds_dict is not None:
        if isinstance(thresholds_dict, dict):
            try:
                merged["thresholds"] = ScoringThresholds(**thresholds_dict)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid [thresholds] config: {e}")
        elif isinstance(thresholds_dict, ScoringThresholds):
            merged["thresholds"] = thresholds_dict

    try:
        return AuditConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from PLAN_WOLF_* environment variables.

    Only scalar fields are read (str, int, bool); list and table fields
    belong in the TOML file.
    """
    type_hints = get_type_hints(AuditConfig)
    result: dict[str, Any] = {}

    for field_name in AuditConfig.__dataclass_fields__:
        env_key = f"PLAN_WOLF_{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    origin = getattr(type_hint, "__origin__", None)

    if origin in (list, dict) or type_hint in (list, dict):
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
