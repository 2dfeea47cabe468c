from .config_loader import Config, ConfigLoader, ConfigValidationError
from .Models import CapitalizeMode, NewNameFilter, Options, OptionsFilter, WindowIdentifier, WindowIdentifierKind
from .renderer import TemplateRenderer
from .resolver import Resolver
from .window_monitor import WindowMonitor

__all__ = [
    'CapitalizeMode', 'Config', 'ConfigLoader', 'ConfigValidationError', 'NewNameFilter', 'Options',
    'OptionsFilter', 'Resolver', 'TemplateRenderer', 'WindowIdentifier', 'WindowIdentifierKind', 'WindowMonitor',
]
