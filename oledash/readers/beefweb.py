"""
Beefweb (foobar2000 / DeaDBeeF web API) player client
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any

import requests

from ..config import system as system_config
from ..config import widgets as widget_defaults
from ..errors import DataUnavailableError

logger = logging.getLogger(__name__)

PLAYER_COLUMNS = "%25artist%25,%25title%25,%25album%25"


class PlaybackState(Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'PlaybackState':
        try:
            return cls(value)
        except ValueError:
            return cls.STOPPED


@dataclass
class TrackInfo:
    artist: str = ""
    title: str = ""
    album: str = ""
    position: float = 0.0  # seconds
    duration: float = 0.0  # seconds
    index: int = -1

    @property
    def key(self):
        """Identity used to detect track changes."""
        return (self.index, self.artist, self.title, self.album)


@dataclass
class PlayerState:
    state: PlaybackState = PlaybackState.STOPPED
    track: Optional[TrackInfo] = None  # None when nothing is loaded
    volume: float = 0.0  # normalised 0..1
    muted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'state': self.state.value,
            'track': None if self.track is None else {
                'artist': self.track.artist,
                'title': self.track.title,
                'album': self.track.album,
                'position': self.track.position,
                'duration': self.track.duration,
                'index': self.track.index,
            },
            'volume': self.volume,
            'muted': self.muted,
        }


def normalize_volume(value: float, vmin: float, vmax: float) -> float:
    if vmax <= vmin:
        return 0.0
    return min(1.0, max(0.0, (value - vmin) / (vmax - vmin)))


class BeefwebClient:
    """
    Minimal beefweb REST client.

    is_available() probes /api/player and caches the answer for
    AVAILABILITY_CACHE_TTL seconds; a failed get_state() invalidates it.
    """

    def __init__(self, base_url: str = widget_defaults.MEDIA_SERVER_URL,
                 timeout: float = system_config.HTTP_TIMEOUT,
                 cache_ttl: float = system_config.AVAILABILITY_CACHE_TTL,
                 clock=time.monotonic):
        self.base_url = (base_url or widget_defaults.MEDIA_SERVER_URL).rstrip('/')
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._available = False
        self._last_check: Optional[float] = None

        logger.info(f"Beefweb client initialized for {self.base_url}")

    def _mark(self, available: bool):
        if self._available and not available:
            logger.warning(f"Beefweb at {self.base_url} became unreachable")
        elif not self._available and available and self._last_check is not None:
            logger.info(f"Beefweb at {self.base_url} is reachable again")
        self._available = available
        self._last_check = self._clock()

    def is_available(self) -> bool:
        with self._lock:
            if self._last_check is not None and self._clock() - self._last_check < self.cache_ttl:
                return self._available
            try:
                response = requests.get(f"{self.base_url}/api/player", timeout=self.timeout)
                self._mark(response.status_code == 200)
            except requests.exceptions.RequestException as e:
                logger.debug(f"Beefweb availability check failed: {e}")
                self._mark(False)
            return self._available

    def get_state(self) -> PlayerState:
        """
        Fetch the current player state.

        Raises:
            DataUnavailableError: on connection failure, non-200 status or bad JSON
        """
        url = f"{self.base_url}/api/player?columns={PLAYER_COLUMNS}"
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            with self._lock:
                self._mark(False)
            raise DataUnavailableError(f"beefweb request failed: {e}") from e

        if response.status_code != 200:
            raise DataUnavailableError(f"beefweb returned status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Beefweb JSON decode error for {url}: {e}")
            raise DataUnavailableError(f"beefweb decode failed: {e}") from e

        return parse_player_response(data)


def parse_player_response(data: Dict[str, Any]) -> PlayerState:
    player = data.get('player') or {}
    volume = player.get('volume') or {}
    item = player.get('activeItem') or {}

    state = PlayerState(
        state=PlaybackState.parse(player.get('playbackState')),
        volume=normalize_volume(float(volume.get('value', 0)), float(volume.get('min', 0)),
                                float(volume.get('max', 0))),
        muted=bool(volume.get('isMuted', False)),
    )

    columns = item.get('columns') or []
    if len(columns) >= 3:
        state.track = TrackInfo(
            artist=columns[0],
            title=columns[1],
            album=columns[2],
            position=float(item.get('position', 0)),
            duration=float(item.get('duration', 0)),
            index=int(item.get('index', -1)),
        )
    return state
