"""
Logging management for the AudioShare relay.

Loads the packaged ``logging.yaml``, adjusts it for the deployment
environment (``ENVIRONMENT`` = development / staging / production) and the
relay's own settings, and hands the result to ``logging.config.dictConfig``.
If the YAML file is missing or broken, plain console and file handlers
are attached instead.

Default level per environment:
- development: DEBUG
- staging: INFO
- production: WARNING
"""

import copy
import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Third-party loggers that stay at WARNING in every environment
NOISY_LOGGERS = ["websockets", "websockets.server", "asyncio"]

ENVIRONMENT_LEVELS = {
    "development": "DEBUG",
    "staging": "INFO",
    "production": "WARNING",
}

_ENVIRONMENT_ALIASES = {"dev": "development", "stage": "staging", "prod": "production"}

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "logging.yaml"

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_environment(value: Optional[str]) -> str:
    """Normalize an ENVIRONMENT value; unknown values mean development."""
    env = (value or "development").strip().lower()
    env = _ENVIRONMENT_ALIASES.get(env, env)
    return env if env in ENVIRONMENT_LEVELS else "development"


class LoggingManager:
    """Builds and applies the relay's logging configuration."""

    def __init__(self, config_path: Optional[Path] = None, environment: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self.environment = resolve_environment(environment or os.getenv("ENVIRONMENT"))
        self._yaml_cache: Optional[Dict[str, Any]] = None

    @property
    def default_level(self) -> str:
        return ENVIRONMENT_LEVELS[self.environment]

    def _load_yaml(self) -> Optional[Dict[str, Any]]:
        if self._yaml_cache is None:
            if not self.config_path.exists():
                return None
            try:
                with open(self.config_path, "r") as f:
                    self._yaml_cache = yaml.safe_load(f)
            except (yaml.YAMLError, OSError) as e:
                print(f"Warning: Failed to load logging config {self.config_path}: {e}")
                return None
        # dictConfig and the overrides below both mutate the dict
        return copy.deepcopy(self._yaml_cache)

    def build_config(
        self,
        component_name: str,
        log_level: str,
        log_file: Optional[str],
    ) -> Optional[Dict[str, Any]]:
        """
        Produce a dictConfig mapping for the relay.

        The component logger gets ``log_level``. In production every
        non-noisy logger and DEBUG-level file handler is raised to WARNING.
        File handlers are pointed at ``log_file``, or removed when it is None.

        Returns:
            The mapping, or None if no YAML configuration is available
        """
        config = self._load_yaml()
        if not config:
            return None

        loggers = config.setdefault("loggers", {})
        loggers.setdefault(component_name, {"handlers": ["console"], "propagate": False})
        loggers[component_name]["level"] = log_level.upper()

        if self.environment == "production":
            floor = self.default_level
            if "root" in config:
                config["root"]["level"] = floor
            for name, logger_config in loggers.items():
                if name not in NOISY_LOGGERS:
                    logger_config["level"] = floor
            for handler_config in config.get("handlers", {}).values():
                if "filename" in handler_config and handler_config.get("level") == "DEBUG":
                    handler_config["level"] = floor

        self._point_file_handlers(config, log_file)
        return config

    def _point_file_handlers(self, config: Dict[str, Any], log_file: Optional[str]) -> None:
        handlers = config.get("handlers", {})
        file_handlers = [name for name, h in handlers.items() if "filename" in h]

        if log_file:
            for name in file_handlers:
                handlers[name]["filename"] = log_file
            return

        # Console only
        for name in file_handlers:
            del handlers[name]
        targets = list(config.get("loggers", {}).values())
        if "root" in config:
            targets.append(config["root"])
        for target in targets:
            if "handlers" in target:
                target["handlers"] = [h for h in target["handlers"] if h not in file_handlers]

    def setup_logging(
        self,
        component_name: str,
        log_level: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> logging.Logger:
        """
        Configure logging for a component.

        Args:
            component_name: Logger name, usually the package name
            log_level: Level for the component logger; defaults to the
                environment's level
            log_file: File to write to; None logs to the console only

        Returns:
            The configured component logger
        """
        log_level = (log_level or self.default_level).upper()
        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

        config = self.build_config(component_name, log_level, log_file)
        if config is not None:
            logging.config.dictConfig(config)
            logger = logging.getLogger(component_name)
        else:
            logger = self._setup_basic_logging(component_name, log_level, log_file)

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

        logger.debug(f"Logging configured ({self.environment}, level {log_level})")
        return logger

    def _setup_basic_logging(
        self,
        component_name: str,
        log_level: str,
        log_file: Optional[str],
    ) -> logging.Logger:
        """Console and optional file handler when no YAML config is usable."""
        logger = logging.getLogger(component_name)
        logger.setLevel(getattr(logging, log_level))
        logger.handlers.clear()
        formatter = logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(getattr(logging, ENVIRONMENT_LEVELS[self.environment]))
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        return logger


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configure logging using the current ENVIRONMENT."""
    return LoggingManager().setup_logging(component_name, log_level, log_file)
