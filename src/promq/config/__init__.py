# promq.config - Configuration module
from promq.config.config import (
    CompleteConfig,
    Config,
    LintConfig,
    load_config,
)

__all__ = [
    "CompleteConfig",
    "Config",
    "LintConfig",
    "load_config",
]
