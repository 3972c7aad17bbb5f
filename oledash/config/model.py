"""
Configuration Model - typed records consumed by widget constructors

Every record is a dataclass with from_dict()/to_dict(). Missing fields take
the defaults from oledash.config.widgets / oledash.config.display, so a
configuration only needs to spell out what differs.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, List

from . import display as display_defaults
from . import widgets as widget_defaults
from ..errors import ConfigurationError


def _get(data: Optional[Dict[str, Any]], key: str, default=None):
    if not data:
        return default
    value = data.get(key)
    return default if value is None else value


@dataclass
class PositionConfig:
    """Widget rectangle in display coordinates plus z-order."""
    x: int = 0
    y: int = 0
    w: int = 1
    h: int = 1
    z: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PositionConfig':
        if not data:
            raise ConfigurationError("position is required")
        pos = cls(
            x=int(_get(data, 'x', 0)),
            y=int(_get(data, 'y', 0)),
            w=int(_get(data, 'w', 0)),
            h=int(_get(data, 'h', 0)),
            z=int(_get(data, 'z', 0)),
        )
        if pos.w < 1 or pos.h < 1:
            raise ConfigurationError(f"position size must be at least 1x1, got {pos.w}x{pos.h}")
        return pos


@dataclass
class StyleConfig:
    """background -1 means transparent; border -1 means no border."""
    background: int = 0
    border: int = -1
    padding: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'StyleConfig':
        style = cls(
            background=int(_get(data, 'background', 0)),
            border=int(_get(data, 'border', -1)),
            padding=int(_get(data, 'padding', widget_defaults.PADDING)),
        )
        if not -1 <= style.background <= 255:
            raise ConfigurationError(f"style.background out of range: {style.background}")
        if style.padding < 0:
            raise ConfigurationError(f"style.padding must be >= 0, got {style.padding}")
        return style

    @property
    def transparent(self) -> bool:
        return self.background == -1


@dataclass
class ColorSettings:
    """Per-mode colour overrides. None means "use the mode default"."""
    fill: Optional[int] = None
    line: Optional[int] = None
    arc: Optional[int] = None
    needle: Optional[int] = None
    ticks: Optional[int] = None
    rx: Optional[int] = None
    tx: Optional[int] = None
    rx_needle: Optional[int] = None
    tx_needle: Optional[int] = None
    read: Optional[int] = None
    write: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ColorSettings':
        data = data or {}
        return cls(**{k: data.get(k) for k in cls.__dataclass_fields__})


@dataclass
class TextSettings:
    size: Optional[int] = None
    font: str = ''
    format: str = ''
    h_align: str = widget_defaults.TEXT_H_ALIGN
    v_align: str = widget_defaults.TEXT_V_ALIGN
    show_unit: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'TextSettings':
        align = _get(data, 'align', {})
        return cls(
            size=_get(data, 'size'),
            font=_get(data, 'font', ''),
            format=_get(data, 'format', ''),
            h_align=_get(align, 'h', widget_defaults.TEXT_H_ALIGN),
            v_align=_get(align, 'v', widget_defaults.TEXT_V_ALIGN),
            show_unit=bool(_get(data, 'show_unit', False)),
        )


@dataclass
class BarSettings:
    direction: str = widget_defaults.BAR_DIRECTION
    border: bool = widget_defaults.BAR_BORDER
    colors: ColorSettings = field(default_factory=ColorSettings)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'BarSettings':
        return cls(
            direction=_get(data, 'direction', widget_defaults.BAR_DIRECTION),
            border=bool(_get(data, 'border', widget_defaults.BAR_BORDER)),
            colors=ColorSettings.from_dict(_get(data, 'colors')),
        )


@dataclass
class GraphSettings:
    history: int = widget_defaults.GRAPH_HISTORY
    colors: ColorSettings = field(default_factory=ColorSettings)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'GraphSettings':
        return cls(
            history=int(_get(data, 'history', widget_defaults.GRAPH_HISTORY)),
            colors=ColorSettings.from_dict(_get(data, 'colors')),
        )


@dataclass
class GaugeSettings:
    show_ticks: bool = widget_defaults.GAUGE_SHOW_TICKS
    colors: ColorSettings = field(default_factory=ColorSettings)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'GaugeSettings':
        return cls(
            show_ticks=bool(_get(data, 'show_ticks', widget_defaults.GAUGE_SHOW_TICKS)),
            colors=ColorSettings.from_dict(_get(data, 'colors')),
        )


@dataclass
class ScrollSettings:
    enabled: bool = False
    direction: str = widget_defaults.SCROLL_DIRECTION
    speed: float = widget_defaults.SCROLL_SPEED
    mode: str = widget_defaults.SCROLL_MODE
    pause_ms: int = widget_defaults.SCROLL_PAUSE_MS
    gap: int = widget_defaults.SCROLL_GAP

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ScrollSettings':
        return cls(
            enabled=bool(_get(data, 'enabled', False)),
            direction=_get(data, 'direction', widget_defaults.SCROLL_DIRECTION),
            speed=float(_get(data, 'speed', widget_defaults.SCROLL_SPEED)),
            mode=_get(data, 'mode', widget_defaults.SCROLL_MODE),
            pause_ms=int(_get(data, 'pause_ms', widget_defaults.SCROLL_PAUSE_MS)),
            gap=int(_get(data, 'gap', widget_defaults.SCROLL_GAP)),
        )


@dataclass
class AutoHideSettings:
    enabled: bool = False
    timeout_s: float = widget_defaults.AUTO_HIDE_TIMEOUT

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'AutoHideSettings':
        return cls(
            enabled=bool(_get(data, 'enabled', False)),
            timeout_s=float(_get(data, 'timeout_s', widget_defaults.AUTO_HIDE_TIMEOUT)),
        )


@dataclass
class WidgetConfig:
    """
    Configuration record for a single widget.

    Type-specific parameters (thresholds, addresses, unit names, ...) travel
    in params; everything shared by all widget kinds has its own field.
    """
    id: str
    type: str
    position: PositionConfig
    style: StyleConfig = field(default_factory=StyleConfig)
    mode: str = ''
    text: TextSettings = field(default_factory=TextSettings)
    bar: BarSettings = field(default_factory=BarSettings)
    graph: GraphSettings = field(default_factory=GraphSettings)
    gauge: GaugeSettings = field(default_factory=GaugeSettings)
    scroll: ScrollSettings = field(default_factory=ScrollSettings)
    auto_hide: AutoHideSettings = field(default_factory=AutoHideSettings)
    update_interval: float = widget_defaults.UPDATE_INTERVAL
    max_value: float = -1
    params: Dict[str, Any] = field(default_factory=dict)

    _KNOWN_KEYS = ('id', 'type', 'position', 'style', 'mode', 'text', 'bar', 'graph',
                   'gauge', 'scroll', 'auto_hide', 'update_interval', 'max_value',
                   'max_speed_mbps', 'params')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WidgetConfig':
        if not data.get('id'):
            raise ConfigurationError("widget id is required")
        if not data.get('type'):
            raise ConfigurationError(f"widget '{data['id']}' has no type")

        # Unknown top-level keys are folded into params so per-type sections
        # ("bluetooth": {...}, "clipboard": {...}) need no special casing.
        params = dict(data.get('params') or {})
        for key, value in data.items():
            if key not in cls._KNOWN_KEYS:
                params[key] = value

        max_value = data.get('max_value')
        if max_value is None:
            max_value = data.get('max_speed_mbps', -1)

        return cls(
            id=str(data['id']),
            type=str(data['type']),
            position=PositionConfig.from_dict(data.get('position')),
            style=StyleConfig.from_dict(data.get('style')),
            mode=data.get('mode') or '',
            text=TextSettings.from_dict(data.get('text')),
            bar=BarSettings.from_dict(data.get('bar')),
            graph=GraphSettings.from_dict(data.get('graph')),
            gauge=GaugeSettings.from_dict(data.get('gauge')),
            scroll=ScrollSettings.from_dict(data.get('scroll')),
            auto_hide=AutoHideSettings.from_dict(data.get('auto_hide')),
            update_interval=float(data.get('update_interval') or widget_defaults.UPDATE_INTERVAL),
            max_value=float(max_value),
            params=params,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return asdict(self)


@dataclass
class TransitionSettings:
    type: str = display_defaults.TRANSITION_TYPE
    duration_s: float = display_defaults.TRANSITION_DURATION

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'TransitionSettings':
        return cls(
            type=_get(data, 'type', display_defaults.TRANSITION_TYPE),
            duration_s=float(_get(data, 'duration_s', display_defaults.TRANSITION_DURATION)),
        )


@dataclass
class DisplayConfig:
    width: int = display_defaults.WIDTH
    height: int = display_defaults.HEIGHT
    background: int = display_defaults.BACKGROUND
    refresh_rate_ms: int = display_defaults.REFRESH_RATE_MS
    transition: TransitionSettings = field(default_factory=TransitionSettings)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'DisplayConfig':
        cfg = cls(
            width=int(_get(data, 'width', display_defaults.WIDTH)),
            height=int(_get(data, 'height', display_defaults.HEIGHT)),
            background=int(_get(data, 'background', display_defaults.BACKGROUND)),
            refresh_rate_ms=int(_get(data, 'refresh_rate_ms', display_defaults.REFRESH_RATE_MS)),
            transition=TransitionSettings.from_dict(_get(data, 'transition')),
        )
        if cfg.width < 1 or cfg.height < 1:
            raise ConfigurationError(f"display size must be positive, got {cfg.width}x{cfg.height}")
        if not 0 <= cfg.background <= 255:
            raise ConfigurationError(f"display background out of range: {cfg.background}")
        if cfg.refresh_rate_ms < 1:
            raise ConfigurationError(f"refresh_rate_ms must be positive, got {cfg.refresh_rate_ms}")
        return cfg


@dataclass
class DashboardConfig:
    display: DisplayConfig = field(default_factory=DisplayConfig)
    widgets: List[WidgetConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DashboardConfig':
        widgets = [WidgetConfig.from_dict(w) for w in data.get('widgets') or []]
        seen = set()
        for w in widgets:
            if w.id in seen:
                raise ConfigurationError(f"duplicate widget id '{w.id}'")
            seen.add(w.id)
        return cls(display=DisplayConfig.from_dict(data.get('display')), widgets=widgets)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return asdict(self)
