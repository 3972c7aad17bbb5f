"""
System volume reader

Shells out to whichever mixer tool is installed: wpctl (PipeWire), pactl
(PulseAudio) or amixer (ALSA), tried in that order.
"""

import logging
import re
import shutil
import subprocess
from typing import List, Optional, Tuple

from ..config import system as system_config
from ..errors import ConfigurationError, DataUnavailableError

logger = logging.getLogger(__name__)

SUPPORTED_TOOLS = ('wpctl', 'pactl', 'amixer')

_VOLUME_COMMANDS = {
    'wpctl': ['wpctl', 'get-volume', '@DEFAULT_AUDIO_SINK@'],
    'pactl': ['pactl', 'get-sink-volume', '@DEFAULT_SINK@'],
    'amixer': ['amixer', 'get', 'Master'],
}
_PACTL_MUTE = ['pactl', 'get-sink-mute', '@DEFAULT_SINK@']

_WPCTL_RE = re.compile(r'Volume:\s*([0-9.]+)')
_PERCENT_RE = re.compile(r'(\d+)%')
_AMIXER_RE = re.compile(r'\[(\d+)%\]')


def detect_tool() -> Optional[str]:
    for tool in SUPPORTED_TOOLS:
        if shutil.which(tool):
            return tool
    return None


def parse_wpctl(output: str) -> Tuple[float, bool]:
    """'Volume: 0.40 [MUTED]' -> (40.0, True)"""
    match = _WPCTL_RE.search(output)
    if match is None:
        raise DataUnavailableError(f"cannot parse wpctl output {output.strip()!r}")
    return float(match.group(1)) * 100.0, '[MUTED]' in output


def parse_pactl(output: str) -> float:
    """First channel percentage of 'Volume: front-left: 26214 /  40% / -23.81 dB, ...'"""
    match = _PERCENT_RE.search(output)
    if match is None:
        raise DataUnavailableError(f"cannot parse pactl output {output.strip()!r}")
    return float(match.group(1))


def parse_amixer(output: str) -> Tuple[float, bool]:
    """'Front Left: Playback 26214 [40%] [off]' -> (40.0, True)"""
    match = _AMIXER_RE.search(output)
    if match is None:
        raise DataUnavailableError("cannot parse amixer output")
    return float(match.group(1)), '[off]' in output


class VolumeReader:
    """
    Master volume in percent plus the mute flag.

    Args:
        tool: Force one of SUPPORTED_TOOLS; auto-detected when None
        timeout: Per-invocation timeout in seconds

    Raises:
        ConfigurationError: no supported mixer tool is installed
    """

    def __init__(self, tool: Optional[str] = None, timeout: float = system_config.SUBPROCESS_TIMEOUT):
        if tool is None:
            tool = detect_tool()
            if tool is None:
                raise ConfigurationError(
                    f"no mixer tool found (install one of: {', '.join(SUPPORTED_TOOLS)})")
        elif tool not in SUPPORTED_TOOLS:
            raise ConfigurationError(f"unsupported mixer tool '{tool}'")

        self.tool = tool
        self.timeout = timeout
        logger.info(f"Volume reader using {tool}")

    def _run(self, cmd: List[str]) -> str:
        try:
            result = subprocess.run(cmd, capture_output=True, timeout=self.timeout)
        except (OSError, subprocess.SubprocessError) as e:
            raise DataUnavailableError(f"{cmd[0]} failed: {e}") from e
        if result.returncode != 0:
            raise DataUnavailableError(f"{cmd[0]} exited with {result.returncode}")
        return result.stdout.decode('utf-8', errors='replace')

    def sample(self) -> Tuple[float, bool]:
        """
        Returns:
            (volume 0..100, muted)

        Raises:
            DataUnavailableError: the tool failed or printed something unexpected
        """
        output = self._run(_VOLUME_COMMANDS[self.tool])
        if self.tool == 'wpctl':
            return parse_wpctl(output)
        if self.tool == 'amixer':
            return parse_amixer(output)

        volume = parse_pactl(output)
        try:
            muted = 'yes' in self._run(_PACTL_MUTE)
        except DataUnavailableError as e:
            logger.debug(f"Reading pactl mute state failed: {e}")
            muted = False
        return volume, muted

    def close(self):
        pass
