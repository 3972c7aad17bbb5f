"""
Widget registry and factory

Widget modules register their classes by type name:

    @register('cpu')
    class CpuWidget(MetricWidget):
        ...

and the compositor setup builds them from configuration records with
create_widgets().
"""

import logging
from typing import Dict, Iterable, List, Type

from ..config.model import WidgetConfig
from ..errors import ConfigurationError, OledashError
from .base_widget import BaseWidget

logger = logging.getLogger(__name__)

_REGISTRY: Dict[str, Type[BaseWidget]] = {}


def register(type_name: str):
    """Class decorator adding a widget class under type_name."""
    def decorator(cls):
        if type_name in _REGISTRY and _REGISTRY[type_name] is not cls:
            logger.warning(f"Widget type '{type_name}' re-registered by {cls.__name__}")
        cls.type_name = type_name
        _REGISTRY[type_name] = cls
        return cls
    return decorator


def registered_types() -> List[str]:
    return sorted(_REGISTRY)


def create_widget(cfg: WidgetConfig) -> BaseWidget:
    """
    Construct the widget for one configuration record.

    Raises:
        ConfigurationError: unknown type or invalid configuration
    """
    cls = _REGISTRY.get(cfg.type)
    if cls is None:
        raise ConfigurationError(f"unknown widget type '{cfg.type}' (widget '{cfg.id}')")
    widget = cls(cfg)
    logger.debug(f"Created {cfg.type} widget '{cfg.id}' at "
                 f"({cfg.position.x},{cfg.position.y}) {cfg.position.w}x{cfg.position.h}")
    return widget


def create_widgets(configs: Iterable[WidgetConfig], skip_broken: bool = False) -> List[BaseWidget]:
    """
    Build widgets in configuration order.

    Args:
        configs: Widget configuration records
        skip_broken: Log and leave out widgets that fail to construct
            instead of raising
    """
    widgets = []
    for cfg in configs:
        try:
            widgets.append(create_widget(cfg))
        except OledashError as e:
            if not skip_broken:
                raise
            logger.error(f"Skipping widget '{cfg.id}': {e}")
    return widgets
