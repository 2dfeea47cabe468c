"""
Configuration loader for the title module.
Loads the display, output template and rule table from YAML files.

Expected YAML structure:
display_name: ":0"                   # X display, default: $DISPLAY
template: "{{ name }}"               # Output template, default: "{{ name }}"
resolver:
  global_options:                    # Optional, no transform when absent
    capitalize: first_letter         # first_letter or all_words
  desktop_name: "Desktop"            # Optional, empty label when absent
  filters:                           # Optional
    "wm_class=firefox":
      filter: new_name
      value: "Browser"
    "wm_name=htop":
      filter: options
      value:
        capitalize: all_words

Files are searched in order and merged, earlier files winning:
$XDG_CONFIG_HOME/polybar-title-module/config.yml, then
./polybar-title-module.yml.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from .Models import Options, WindowIdentifier, filter_from_config
from .renderer import DEFAULT_TEMPLATE
from .resolver import Resolver

APP_NAME = "polybar-title-module"
CONFIG_FILE_NAME = "config.yml"
LOCAL_CONFIG_FILE = f"{APP_NAME}.yml"

VALID_TOP_LEVEL = ['display_name', 'template', 'resolver']
VALID_RESOLVER = ['global_options', 'desktop_name', 'filters']


class ConfigValidationError(Exception):
    """Exception raised when configuration validation fails."""


@dataclass
class Config:
    """
    Parsed configuration.

    Attributes:
        display_name: X display to connect to, None for $DISPLAY
        template: Output template source
        resolver: Rule table
    """
    display_name: Optional[str] = None
    template: str = DEFAULT_TEMPLATE
    resolver: Resolver = field(default_factory=Resolver)


def default_config_paths() -> List[str]:
    """Config files in search order, highest priority first."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return [
        os.path.join(config_home, APP_NAME, CONFIG_FILE_NAME),
        LOCAL_CONFIG_FILE,
    ]


def merge_config(primary: Dict[str, Any], secondary: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two mappings, values from ``primary`` win."""
    merged = dict(secondary)
    for key, value in primary.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(value, merged[key])
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Load and validate the title module configuration from YAML files."""

    def __init__(self, config_paths: Optional[List[str]] = None):
        """
        Initialize the configuration loader.

        :param config_paths: Files to read, highest priority first.
                             Defaults to the user and local config files.
        """
        self.config_paths = config_paths if config_paths is not None else default_config_paths()
        self.config = None
        self.logger = logging.getLogger(__name__)

    def load(self) -> Config:
        """
        Read, merge and validate the configuration files.

        :raises FileNotFoundError: If none of the files exist
        :raises ConfigValidationError: If the configuration is invalid
        """
        merged = None
        for path in self.config_paths:
            if not os.path.exists(path):
                self.logger.debug(f"Configuration file not found: {path}")
                continue

            self.logger.debug(f"Reading configuration file: {path}")
            try:
                with open(path, 'r') as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigValidationError(f"{path}: invalid YAML: {e}") from e

            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise ConfigValidationError(f"{path}: configuration must be a mapping")

            merged = data if merged is None else merge_config(merged, data)

        if merged is None:
            raise FileNotFoundError(f"No configuration file found in: {', '.join(self.config_paths)}")

        self.config = merged
        return self._build_config()

    def load_or_default(self) -> Config:
        """Load the configuration, falling back to defaults on any problem."""
        try:
            return self.load()
        except (FileNotFoundError, ConfigValidationError, OSError) as e:
            self.logger.warning(f"Could not parse config: {e}")
            return Config()

    def _build_config(self) -> Config:
        unknown = set(self.config) - set(VALID_TOP_LEVEL)
        if unknown:
            raise ConfigValidationError(f"Unknown configuration key(s): {', '.join(sorted(map(str, unknown)))}")

        display_name = self.config.get('display_name')
        if display_name is not None and not isinstance(display_name, str):
            raise ConfigValidationError("display_name must be a string")

        template = self.config.get('template', DEFAULT_TEMPLATE)
        if not isinstance(template, str):
            raise ConfigValidationError("template must be a string")

        if 'resolver' not in self.config:
            raise ConfigValidationError("Configuration must contain 'resolver' section")

        return Config(
            display_name=display_name,
            template=template,
            resolver=self._build_resolver(self.config['resolver']),
        )

    def _build_resolver(self, resolver_config) -> Resolver:
        """
        Validate the resolver section and build the rule table.

        :raises ConfigValidationError: If validation fails
        """
        if resolver_config is None:
            resolver_config = {}
        if not isinstance(resolver_config, dict):
            raise ConfigValidationError("'resolver' must be a dictionary")

        unknown = set(resolver_config) - set(VALID_RESOLVER)
        if unknown:
            raise ConfigValidationError(f"Unknown resolver key(s): {', '.join(sorted(map(str, unknown)))}")

        global_options = None
        if resolver_config.get('global_options') is not None:
            try:
                global_options = Options.from_config(resolver_config['global_options'])
            except ValueError as e:
                raise ConfigValidationError(f"global_options: {e}") from e

        desktop_name = resolver_config.get('desktop_name')
        if desktop_name is not None and not isinstance(desktop_name, str):
            raise ConfigValidationError("desktop_name must be a string")

        return Resolver(
            global_options=global_options,
            desktop_name=desktop_name,
            filters=self._build_filters(resolver_config.get('filters')),
        )

    def _build_filters(self, filters_config) -> dict:
        if filters_config is None:
            return {}
        if not isinstance(filters_config, dict):
            raise ConfigValidationError("'filters' must be a dictionary")

        filters = {}
        for raw_key, filter_def in filters_config.items():
            if not isinstance(raw_key, str):
                raise ConfigValidationError(f"Filter key {raw_key!r} must be a string of the form 'kind=value'")
            try:
                identifier = WindowIdentifier.parse(raw_key)
            except ValueError as e:
                raise ConfigValidationError(f"Filter '{raw_key}': {e}") from e

            if identifier in filters:
                raise ConfigValidationError(f"Filter '{raw_key}' duplicates '{identifier}'")

            try:
                filters[identifier] = filter_from_config(filter_def)
            except ValueError as e:
                raise ConfigValidationError(f"Filter '{raw_key}': {e}") from e

            self.logger.debug(f"Loaded filter {identifier}: {filters[identifier]}")

        return filters
