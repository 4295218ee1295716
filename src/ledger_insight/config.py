# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for Ledger Insight.

This module is responsible for:
- loading the application configuration from a TOML file,
- validating the policy values used by the analytics (health thresholds,
  projection scenarios, ranking and trend sizes),
- exposing typed dataclasses used by the rest of the application.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import]

from .health import DEFAULT_THRESHOLDS, HealthThresholds
from .pareto import DEFAULT_LIMIT as DEFAULT_PARETO_LIMIT
from .projection import (
    DEFAULT_FACTORS,
    DEFAULT_LIMIT as DEFAULT_PROJECTION_LIMIT,
    Scenario,
    ScenarioFactors,
)

DEFAULT_CONFIG_FILE = "ledger_insight_config.toml"
DISPLAY_MODES: tuple[str, ...] = ("table", "csv", "both")
LOG_FORMATS: tuple[str, ...] = ("text", "json")


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for Ledger Insight.

    This aggregates:
    - the snapshot data directory,
    - health scorecard thresholds,
    - projection size and scenario factors,
    - Pareto ranking size and trend window,
    - display and logging options.
    """

    data_directory: Path
    health: HealthThresholds = DEFAULT_THRESHOLDS
    projection_limit: int = DEFAULT_PROJECTION_LIMIT
    scenario_factors: Mapping[Scenario, ScenarioFactors] = field(
        default_factory=lambda: dict(DEFAULT_FACTORS)
    )
    pareto_limit: int = DEFAULT_PARETO_LIMIT
    trend_months: int = 12
    display_mode: str = "table"
    decimals: int = 2
    currency: str = "BRL"
    log_level: str = "WARNING"
    log_format: str = "text"


def default_app_config(data_directory: Optional[str] = None) -> AppConfig:
    """Configuration used when no TOML file is available."""
    return AppConfig(data_directory=Path(data_directory or "data").resolve())


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed or is not a table.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Invalid TOML root type in {path}, expected a table.")

    return data


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    """Return a sub-table, or an empty mapping when missing or not a table."""
    value = data.get(name) or {}
    if not isinstance(value, Mapping):
        return {}
    return value


def _decimal_option(section: Mapping[str, Any], key: str, default: Decimal) -> Decimal:
    raw = section.get(key)
    if raw is None:
        return default
    try:
        return Decimal(str(raw))
    except InvalidOperation as exc:
        raise ValueError(
            f"Invalid value for '{key}' in the configuration. Expected a number."
        ) from exc


def _int_option(section: Mapping[str, Any], key: str, default: int) -> int:
    raw = section.get(key)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid value for '{key}' in the configuration. Expected an integer."
        ) from exc
    if value < 0:
        raise ValueError(f"'{key}' cannot be negative in the configuration.")
    return value


def _parse_health(section: Mapping[str, Any]) -> HealthThresholds:
    d = DEFAULT_THRESHOLDS
    thresholds = HealthThresholds(
        liquidity_healthy=_decimal_option(section, "liquidity_healthy", d.liquidity_healthy),
        liquidity_warning=_decimal_option(section, "liquidity_warning", d.liquidity_warning),
        profitability_healthy=_decimal_option(
            section, "profitability_healthy", d.profitability_healthy
        ),
        profitability_warning=_decimal_option(
            section, "profitability_warning", d.profitability_warning
        ),
    )
    if thresholds.liquidity_warning > thresholds.liquidity_healthy:
        raise ValueError("[health] liquidity_warning cannot exceed liquidity_healthy.")
    if thresholds.profitability_warning > thresholds.profitability_healthy:
        raise ValueError(
            "[health] profitability_warning cannot exceed profitability_healthy."
        )
    return thresholds


def _parse_scenarios(section: Mapping[str, Any]) -> dict[Scenario, ScenarioFactors]:
    factors = dict(DEFAULT_FACTORS)
    for name, cfg in section.items():
        try:
            scenario = Scenario(str(name))
        except ValueError as exc:
            raise ValueError(
                f"Unknown scenario [projection.scenarios.{name}] in the configuration."
            ) from exc
        if not isinstance(cfg, Mapping):
            continue

        default = factors[scenario]
        factors[scenario] = ScenarioFactors(
            inflow_factor=_decimal_option(cfg, "inflow_factor", default.inflow_factor),
            outflow_factor=_decimal_option(cfg, "outflow_factor", default.outflow_factor),
        )
    return factors


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the Ledger Insight application configuration from a TOML file.

    Expected top-level sections in the TOML file
    --------------------------------------------
    [data]
        ``directory``: folder holding the ledger snapshot (accounts.csv,
        transactions.csv, ...), relative to the TOML file.

    [health]
        Thresholds of the health scorecard (months of cash, margin %).

    [projection]
        ``limit`` of projected transactions and optional
        [projection.scenarios.<base|optimistic|pessimistic>] factors.

    [pareto] / [trends]
        Size of the category ranking and of the monthly trend window.

    [display]
        ``mode`` (table, csv, both), ``decimals`` and ``currency``.

    [logging]
        ``level`` and ``format`` (text, json).

    Every section is optional; missing values fall back to defaults.

    Returns
    -------
    AppConfig
        Parsed and validated application configuration.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
    else:
        config_file = Path(config_path).resolve()

    raw = _load_toml(config_file)
    base_dir = config_file.parent

    # 1) Data directory
    data_section = _section(raw, "data")
    data_directory = (base_dir / str(data_section.get("directory") or "data")).resolve()

    # 2) Analytics policy
    health = _parse_health(_section(raw, "health"))

    projection_section = _section(raw, "projection")
    projection_limit = _int_option(
        projection_section, "limit", DEFAULT_PROJECTION_LIMIT
    )
    scenario_factors = _parse_scenarios(_section(projection_section, "scenarios"))

    pareto_limit = _int_option(_section(raw, "pareto"), "limit", DEFAULT_PARETO_LIMIT)
    trend_months = _int_option(_section(raw, "trends"), "months", 12)

    # 3) Display options
    display_section = _section(raw, "display")
    display_mode = str(display_section.get("mode", "table"))
    if display_mode not in DISPLAY_MODES:
        raise ValueError(
            f"Invalid [display].mode {display_mode!r}, expected one of {DISPLAY_MODES}."
        )
    try:
        decimals = int(display_section.get("decimals", 2))
    except (TypeError, ValueError):
        decimals = 2
    currency = str(display_section.get("currency") or "BRL")

    # 4) Logging options
    logging_section = _section(raw, "logging")
    log_level = str(logging_section.get("level") or "WARNING").upper()
    log_format = str(logging_section.get("format") or "text")
    if log_format not in LOG_FORMATS:
        raise ValueError(
            f"Invalid [logging].format {log_format!r}, expected one of {LOG_FORMATS}."
        )

    return AppConfig(
        data_directory=data_directory,
        health=health,
        projection_limit=projection_limit,
        scenario_factors=scenario_factors,
        pareto_limit=pareto_limit,
        trend_months=trend_months,
        display_mode=display_mode,
        decimals=decimals,
        currency=currency,
        log_level=log_level,
        log_format=log_format,
    )
