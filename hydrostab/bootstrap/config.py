"""
bootstrap/config.py - Engine configuration

Provides configuration loading from files, environment variables, and defaults.

Environment variables use the HYDROSTAB_ prefix. A JSON file overrides
environment values section by section:

    {
        "trim": {"max_iterations": 30, "tolerance_kg": 50.0},
        "logging": {"level": "DEBUG"}
    }
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional
from pathlib import Path
import os
import json
import logging

from ..core.constants import SEAWATER_DENSITY_KG_M3, SPACING_RTOL
from ..errors import ConfigurationError, EngineError, create_config_error
from ..stability.constants import (
    StabilityMethod,
    METHOD_AGREEMENT_MAX_DEG,
    METHOD_AGREEMENT_RTOL,
    METHOD_AGREEMENT_ATOL_M,
)
from ..physics.trim import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE_KG,
    DEFAULT_LEVER_TOLERANCE_M,
    DEFAULT_PERTURBATION_M,
)
from ..curves.generator import DEFAULT_CURVE_POINTS

logger = logging.getLogger(__name__)

SOURCE = "bootstrap.config"


def _env(name: str, default: str, convert):
    raw = os.getenv(name, default)
    try:
        return convert(raw)
    except ValueError as e:
        raise ConfigurationError([create_config_error(
            f"invalid value for {name}: {raw!r}", SOURCE, field=name, actual=raw,
        )]) from e


def _bool(raw: str) -> bool:
    return raw.lower() == "true"


@dataclass
class IntegrationConfig:
    """Numerical integration settings."""

    spacing_rtol: float = SPACING_RTOL

    @classmethod
    def from_env(cls) -> "IntegrationConfig":
        return cls(
            spacing_rtol=_env("HYDROSTAB_SPACING_RTOL", str(SPACING_RTOL), float),
        )


@dataclass
class HydrostaticsConfig:
    """Hydrostatics defaults."""

    default_rho: float = SEAWATER_DENSITY_KG_M3

    @classmethod
    def from_env(cls) -> "HydrostaticsConfig":
        return cls(
            default_rho=_env("HYDROSTAB_DEFAULT_RHO", str(SEAWATER_DENSITY_KG_M3), float),
        )


@dataclass
class StabilityConfig:
    """GZ sweep defaults and method agreement tolerance."""

    default_method: str = StabilityMethod.FULL_IMMERSION.value
    angle_min_deg: float = 0.0
    angle_max_deg: float = 90.0
    angle_step_deg: float = 1.0
    agreement_max_deg: float = METHOD_AGREEMENT_MAX_DEG
    agreement_rtol: float = METHOD_AGREEMENT_RTOL
    agreement_atol_m: float = METHOD_AGREEMENT_ATOL_M

    @classmethod
    def from_env(cls) -> "StabilityConfig":
        return cls(
            default_method=os.getenv("HYDROSTAB_STABILITY_METHOD", StabilityMethod.FULL_IMMERSION.value),
            angle_min_deg=_env("HYDROSTAB_ANGLE_MIN", "0", float),
            angle_max_deg=_env("HYDROSTAB_ANGLE_MAX", "90", float),
            angle_step_deg=_env("HYDROSTAB_ANGLE_STEP", "1", float),
            agreement_max_deg=_env("HYDROSTAB_AGREEMENT_MAX_DEG", str(METHOD_AGREEMENT_MAX_DEG), float),
            agreement_rtol=_env("HYDROSTAB_AGREEMENT_RTOL", str(METHOD_AGREEMENT_RTOL), float),
            agreement_atol_m=_env("HYDROSTAB_AGREEMENT_ATOL", str(METHOD_AGREEMENT_ATOL_M), float),
        )


@dataclass
class TrimConfig:
    """Trim solver settings."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    tolerance_kg: float = DEFAULT_TOLERANCE_KG
    lever_tolerance_m: float = DEFAULT_LEVER_TOLERANCE_M
    perturbation_m: float = DEFAULT_PERTURBATION_M

    @classmethod
    def from_env(cls) -> "TrimConfig":
        return cls(
            max_iterations=_env("HYDROSTAB_TRIM_MAX_ITER", str(DEFAULT_MAX_ITERATIONS), int),
            tolerance_kg=_env("HYDROSTAB_TRIM_TOLERANCE", str(DEFAULT_TOLERANCE_KG), float),
            lever_tolerance_m=_env("HYDROSTAB_TRIM_LEVER_TOLERANCE", str(DEFAULT_LEVER_TOLERANCE_M), float),
            perturbation_m=_env("HYDROSTAB_TRIM_PERTURBATION", str(DEFAULT_PERTURBATION_M), float),
        )


@dataclass
class CurvesConfig:
    """Curve generation defaults."""

    default_points: int = DEFAULT_CURVE_POINTS

    @classmethod
    def from_env(cls) -> "CurvesConfig":
        return cls(
            default_points=_env("HYDROSTAB_CURVE_POINTS", str(DEFAULT_CURVE_POINTS), int),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("HYDROSTAB_LOG_LEVEL", "INFO"),
            format=os.getenv("HYDROSTAB_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("HYDROSTAB_LOG_FILE"),
            json_logs=_env("HYDROSTAB_JSON_LOGS", "false", _bool),
        )


_SECTIONS = ("integration", "hydrostatics", "stability", "trim", "curves", "logging")


@dataclass
class EngineConfig:
    """Root configuration for the calculation engine."""

    integration: IntegrationConfig = field(default_factory=IntegrationConfig)
    hydrostatics: HydrostaticsConfig = field(default_factory=HydrostaticsConfig)
    stability: StabilityConfig = field(default_factory=StabilityConfig)
    trim: TrimConfig = field(default_factory=TrimConfig)
    curves: CurvesConfig = field(default_factory=CurvesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create configuration from environment variables."""
        return cls(
            integration=IntegrationConfig.from_env(),
            hydrostatics=HydrostaticsConfig.from_env(),
            stability=StabilityConfig.from_env(),
            trim=TrimConfig.from_env(),
            curves=CurvesConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "EngineConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError([create_config_error(
                f"config file {filepath} is not valid JSON: {e.msg}", SOURCE, field=str(filepath),
            )]) from e

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Create config from dictionary."""
        config = cls.from_env()

        # Override with file values
        for section in _SECTIONS:
            if section not in data:
                continue
            target = getattr(config, section)
            for key, value in data[section].items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Ignoring unknown config key: {section}.{key}")

        config.validate()
        return config

    def validate(self) -> None:
        """Raise ConfigurationError for values no calculator accepts."""
        errors: List[EngineError] = []

        def check(ok: bool, name: str, value: Any, message: str) -> None:
            if not ok:
                errors.append(create_config_error(message, SOURCE, field=name, actual=value))

        check(self.integration.spacing_rtol > 0, "integration.spacing_rtol",
              self.integration.spacing_rtol, "must be positive")
        check(self.hydrostatics.default_rho > 0, "hydrostatics.default_rho",
              self.hydrostatics.default_rho, "must be positive")
        check(self.stability.default_method in [m.value for m in StabilityMethod],
              "stability.default_method", self.stability.default_method, "unknown stability method")
        check(self.stability.angle_step_deg > 0, "stability.angle_step_deg",
              self.stability.angle_step_deg, "must be positive")
        check(self.stability.angle_min_deg < self.stability.angle_max_deg, "stability.angle_max_deg",
              self.stability.angle_max_deg, "must exceed angle_min_deg")
        check(0 < self.stability.agreement_max_deg < 90, "stability.agreement_max_deg",
              self.stability.agreement_max_deg, "must lie between 0 and 90 degrees")
        check(self.trim.max_iterations >= 1, "trim.max_iterations",
              self.trim.max_iterations, "must be at least 1")
        check(self.trim.tolerance_kg > 0, "trim.tolerance_kg",
              self.trim.tolerance_kg, "must be positive")
        check(self.trim.lever_tolerance_m > 0, "trim.lever_tolerance_m",
              self.trim.lever_tolerance_m, "must be positive")
        check(self.trim.perturbation_m > 0, "trim.perturbation_m",
              self.trim.perturbation_m, "must be positive")
        check(self.curves.default_points >= 2, "curves.default_points",
              self.curves.default_points, "must be at least 2")

        if errors:
            raise ConfigurationError(errors)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {section: asdict(getattr(self, section)) for section in _SECTIONS}


# Global config instance
_config: Optional[EngineConfig] = None


def load_config(filepath: str = None) -> EngineConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        EngineConfig instance
    """
    global _config

    if filepath:
        _config = EngineConfig.from_file(filepath)
    else:
        # Try default locations
        default_paths = [
            "./hydrostab.json",
            "./config/hydrostab.json",
            os.path.expanduser("~/.hydrostab/config.json"),
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = EngineConfig.from_file(path)
                return _config

        # Fall back to environment
        _config = EngineConfig.from_env()
        _config.validate()

    logger.info(f"Configuration loaded: log level={_config.logging.level}")
    return _config


def get_config() -> EngineConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the loaded configuration."""
    global _config
    _config = None
