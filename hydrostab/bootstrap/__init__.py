"""
bootstrap/ - Configuration, logging setup and the Engine facade.
"""

from .config import (
    EngineConfig,
    IntegrationConfig,
    HydrostaticsConfig,
    StabilityConfig,
    TrimConfig,
    CurvesConfig,
    LoggingConfig,
    load_config,
    get_config,
    reset_config,
)

from .app import Engine

from .entrypoints import (
    JSONFormatter,
    setup_logging,
    bootstrap,
)

__all__ = [
    # Config
    "EngineConfig",
    "IntegrationConfig",
    "HydrostaticsConfig",
    "StabilityConfig",
    "TrimConfig",
    "CurvesConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    "reset_config",
    # Engine
    "Engine",
    # Entry points
    "JSONFormatter",
    "setup_logging",
    "bootstrap",
]
