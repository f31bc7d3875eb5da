"""Configuration management for the fair scheduler"""

from dataclasses import dataclass, field, asdict, fields
from typing import Dict, Optional, Any
from pathlib import Path
import json
import os

from .exceptions import ConfigurationError
from .utils.logging_setup import level_from_name


@dataclass
class PainMultipliers:
    """
    Weights for each unfairness factor.

    Use None to omit a factor entirely (and speed up the evaluation).
    """
    double_header_count: Optional[float] = 0.1      # don't mind double headers
    double_header_deviation: Optional[float] = 0.5  # but balance them across teams
    triple_header_count: Optional[float] = None     # usually prevented by validation
    triple_header_deviation: Optional[float] = None
    double_bye_count: Optional[float] = 1.5
    double_bye_deviation: Optional[float] = 15.0
    triple_bye_count: Optional[float] = None        # usually prevented by validation
    triple_bye_deviation: Optional[float] = None
    early_late_deviation: Optional[float] = 1.0
    total_slot_count: Optional[float] = 0.1
    total_slots_deviation: Optional[float] = 0.2
    uneven_team_unhappiness: Optional[float] = 50.0  # deviation in combined per-team pain
    matchup_imbalance: Optional[float] = None

    # Per-stat overrides for the uneven team unhappiness composite,
    # keyed by stat name (e.g. "double_headers"). None drops the stat.
    unhappiness_weights: Dict[str, Optional[float]] = field(default_factory=dict)

    def __post_init__(self):
        # Early-exit pruning relies on every component being non-negative
        weights = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "unhappiness_weights"}
        weights.update({f"unhappiness_weights.{k}": v for k, v in self.unhappiness_weights.items()})
        for name, value in weights.items():
            if value is not None and value < 0:
                raise ConfigurationError(f"Pain multiplier {name} must not be negative, got {value}")

    @classmethod
    def disabled(cls, **weights: Optional[float]) -> "PainMultipliers":
        """All factors off except the ones given"""
        base = {f.name: None for f in fields(cls) if f.name != "unhappiness_weights"}
        base.update(weights)
        return cls(**base)


@dataclass
class StatsSettings:
    """Thresholds used when precomputing per-option stats"""
    early_late_slots: int = 2
    double_bye_idle_slots: int = 2
    triple_bye_idle_slots: int = 3


@dataclass
class ValidationRules:
    """
    Structural constraints a lineup must satisfy to become an option.

    A rule set to None (or False) is disabled.
    """
    # No team may play two games in a row
    no_double_headers: bool = False
    # No team may play three games in a row
    no_triple_headers: bool = True
    # Maximum number of idle slots between any two of a team's games
    max_idle_slots: Optional[int] = 2
    # Number of slots a team has to stay from first to last game
    max_slot_span: Optional[int] = 6
    # Maximum number of gaps of exactly max_idle_slots per team
    max_gap_instance_count: Optional[int] = None
    # Report why each rejected lineup failed (slow; diagnostics only)
    show_failure_reasons: bool = False

    def __post_init__(self):
        for name in ("max_idle_slots", "max_slot_span", "max_gap_instance_count"):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
                raise ConfigurationError(f"{name} must be a non-negative integer or None, got {value!r}")
        if self.max_gap_instance_count is not None and self.max_idle_slots is None:
            raise ConfigurationError("max_gap_instance_count requires max_idle_slots")


@dataclass
class Config:
    """
    Global configuration for the fair scheduler.

    Can be loaded from file or environment variables. The resulting value is
    passed explicitly to generators, scorers and searches.
    """

    pain: PainMultipliers = field(default_factory=PainMultipliers)
    stats: StatsSettings = field(default_factory=StatsSettings)
    validation: ValidationRules = field(default_factory=ValidationRules)

    # Search settings
    workers: int = field(default_factory=lambda: os.cpu_count() or 1)
    progress_interval: float = 5.0   # seconds between worker progress messages
    report_interval: float = 10.0    # seconds between progress log lines

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self):
        if self.workers < 1:
            raise ConfigurationError("workers must be at least 1")
        level_from_name(self.log_level)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        data = dict(data)
        try:
            if "pain" in data:
                data["pain"] = PainMultipliers(**data["pain"])
            if "stats" in data:
                data["stats"] = StatsSettings(**data["stats"])
            if "validation" in data:
                data["validation"] = ValidationRules(**data["validation"])
            if data.get("log_file"):
                data["log_file"] = Path(data["log_file"])
            return cls(**data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_file(cls, path: Path) -> "Config":
        """Load configuration from JSON file"""
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables"""
        config = cls()

        if workers := os.getenv("FAIR_SCHEDULER_WORKERS"):
            try:
                config.workers = max(1, int(workers))
            except ValueError:
                raise ConfigurationError(f"FAIR_SCHEDULER_WORKERS must be an integer, got {workers!r}")

        if log_level := os.getenv("FAIR_SCHEDULER_LOG_LEVEL"):
            config.log_level = log_level

        if log_file := os.getenv("FAIR_SCHEDULER_LOG_FILE"):
            config.log_file = Path(log_file)

        return config

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["log_file"] = str(self.log_file) if self.log_file else None
        return data

    def save(self, path: Path) -> None:
        """Save configuration to file"""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


def load_config(path: Optional[Path] = None) -> Config:
    """Resolve configuration from an explicit file, default locations or the environment"""
    if path is not None:
        return Config.from_file(Path(path))

    config_paths = [
        Path("fair_scheduler.json"),
        Path.home() / ".fair_scheduler.json",
    ]
    for candidate in config_paths:
        if candidate.exists():
            return Config.from_file(candidate)
    return Config.from_env()
