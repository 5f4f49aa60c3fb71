# promq.config.config - Configuration management
"""
Configuration file loading and management.
"""
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# Use tomli for Python < 3.11, tomllib for 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from promq.errors import ConfigError

logger = logging.getLogger(__name__)

# Completion sources
SOURCE_OFFLINE = "offline"
SOURCE_PROMETHEUS = "prometheus"
SOURCE_LSP = "lsp"

# "hybrid" is the historical name of the prometheus source
SOURCE_ALIASES = {"hybrid": SOURCE_PROMETHEUS}

COMPLETE_SOURCES = (SOURCE_OFFLINE, SOURCE_PROMETHEUS, SOURCE_LSP)
LINT_SOURCES = (SOURCE_OFFLINE, SOURCE_LSP)


@dataclass
class CompleteConfig:
    """
    Where completion metadata comes from.

    offline: grammar only
    prometheus: grammar plus a Prometheus server at `url`
    lsp: a language server bridge at `url` answers everything
    """
    source: str = SOURCE_OFFLINE
    url: str = ""
    limit: int = 100
    timeout: float = 5.0

    @classmethod
    def from_dict(cls, data: dict) -> "CompleteConfig":
        config = cls()
        if "source" in data:
            source = str(data["source"]).lower()
            config.source = SOURCE_ALIASES.get(source, source)
        if "url" in data:
            config.url = str(data["url"]).strip()
        if "limit" in data:
            config.limit = int(data["limit"])
        if "timeout" in data:
            config.timeout = float(data["timeout"])
        return config

    def validated(self) -> "CompleteConfig":
        """
        This config, or an offline one when it can't be used.

        Unknown sources and remote sources without a URL fall back to
        offline with a warning.
        """
        if self.source not in COMPLETE_SOURCES:
            logger.warning("Unknown completion source %r, using offline", self.source)
            return CompleteConfig(limit=self.limit, timeout=self.timeout)
        if self.source != SOURCE_OFFLINE and not self.url:
            logger.warning("Completion source %r needs a url, using offline", self.source)
            return CompleteConfig(limit=self.limit, timeout=self.timeout)
        return self

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "url": self.url,
            "limit": self.limit,
            "timeout": self.timeout,
        }


@dataclass
class LintConfig:
    """Linter source. Carried for hosts, the completion core ignores it."""
    source: str = SOURCE_OFFLINE
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "LintConfig":
        config = cls()
        source = str(data.get("source", SOURCE_OFFLINE)).lower()
        if source not in LINT_SOURCES:
            logger.warning("Unknown lint source %r, using offline", source)
            source = SOURCE_OFFLINE
        config.source = source
        config.url = str(data.get("url", ""))
        return config

    def to_dict(self) -> dict:
        return {"source": self.source, "url": self.url}


@dataclass
class Config:
    """
    promq configuration.

    Configuration file locations (in order of precedence):
    1. --config argument
    2. .promq.toml in current directory
    3. ~/.config/promq/config.toml
    """

    complete: CompleteConfig = field(default_factory=CompleteConfig)
    lint: LintConfig = field(default_factory=LintConfig)

    # REPL settings
    history_file: Optional[Path] = None
    complete_while_typing: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """
        Create config from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance
        """
        config = cls()

        if isinstance(data.get("complete"), dict):
            config.complete = CompleteConfig.from_dict(data["complete"])
        if isinstance(data.get("lint"), dict):
            config.lint = LintConfig.from_dict(data["lint"])

        repl = data.get("repl", {})
        if "history_file" in repl:
            config.history_file = Path(repl["history_file"]).expanduser()
        if "complete_while_typing" in repl:
            config.complete_while_typing = bool(repl["complete_while_typing"])

        return config

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "complete": self.complete.to_dict(),
            "lint": self.lint.to_dict(),
            "repl": {
                "history_file": str(self.history_file) if self.history_file else None,
                "complete_while_typing": self.complete_while_typing,
            },
        }


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration.

    Args:
        config_path: Optional explicit config path

    Returns:
        Config instance

    Raises:
        ConfigError: If the explicit config file can't be read
    """
    # Try explicit path first
    if config_path:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        try:
            return _load_from_file(config_path)
        except (OSError, tomllib.TOMLDecodeError, ValueError, TypeError) as e:
            raise ConfigError(f"Failed to load config from {config_path}: {e}") from e

    candidates = [
        Path(".promq.toml"),
        Path.home() / ".config" / "promq" / "config.toml",
    ]
    for path in candidates:
        if path.exists():
            try:
                return _load_from_file(path)
            except (OSError, tomllib.TOMLDecodeError, ValueError, TypeError) as e:
                logger.warning("Failed to load config from %s: %s", path, e)
                return Config()

    # Return defaults
    return Config()


def _load_from_file(path: Path) -> Config:
    """Load config from TOML file."""
    with open(path, "rb") as f:
        data = tomllib.load(f)
    return Config.from_dict(data)
