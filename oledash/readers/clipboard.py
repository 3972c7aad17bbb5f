"""
Clipboard reader

Shells out to whichever clipboard tool is installed (wl-paste, xclip or
xsel, tried in that order). Content type is taken from the advertised
targets where the tool can list them.
"""

import hashlib
import logging
import shutil
import subprocess
from enum import Enum
from typing import List, Optional, Tuple
from urllib.parse import unquote, urlparse

from ..config import system as system_config
from ..errors import ConfigurationError, DataUnavailableError

logger = logging.getLogger(__name__)

SUPPORTED_TOOLS = ('wl-paste', 'xclip', 'xsel')

_READ_COMMANDS = {
    'wl-paste': ['wl-paste', '--no-newline'],
    'xclip': ['xclip', '-selection', 'clipboard', '-o'],
    'xsel': ['xsel', '--clipboard', '--output'],
}

_TARGET_COMMANDS = {
    'wl-paste': ['wl-paste', '--list-types'],
    'xclip': ['xclip', '-selection', 'clipboard', '-t', 'TARGETS', '-o'],
}

_FILE_COMMANDS = {
    'wl-paste': ['wl-paste', '-t', 'text/uri-list', '--no-newline'],
    'xclip': ['xclip', '-selection', 'clipboard', '-t', 'text/uri-list', '-o'],
}


class ContentType(Enum):
    EMPTY = "Empty"
    TEXT = "Text"
    IMAGE = "Image"
    FILES = "Files"
    HTML = "HTML"
    UNKNOWN = "Unknown"

    def __str__(self):
        return self.value


def detect_tool() -> Optional[str]:
    """First supported clipboard tool found on PATH, or None."""
    for tool in SUPPORTED_TOOLS:
        if shutil.which(tool):
            return tool
    return None


def classify_targets(targets: List[str]) -> ContentType:
    """Pick a content type from the MIME targets. Files beat images beat HTML beat text."""
    if not targets:
        return ContentType.TEXT

    has_files = has_image = has_html = has_text = False
    for target in targets:
        t = target.lower()
        if t in ('text/uri-list', 'x-special/gnome-copied-files'):
            has_files = True
        elif t.startswith('image/'):
            has_image = True
        elif t == 'text/html':
            has_html = True
        elif t.startswith('text/') or t in ('utf8_string', 'string', 'text'):
            has_text = True

    if has_files:
        return ContentType.FILES
    if has_image:
        return ContentType.IMAGE
    if has_html:
        return ContentType.HTML
    if has_text:
        return ContentType.TEXT
    return ContentType.UNKNOWN


def format_file_list(files: List[str]) -> str:
    if not files:
        return "[No files]"
    if len(files) == 1:
        return files[0].rstrip('/').rsplit('/', 1)[-1] or files[0]
    return f"[{len(files)} files]"


class ClipboardReader:
    """
    Args:
        tool: Force one of SUPPORTED_TOOLS; auto-detected when None
        timeout: Per-invocation timeout in seconds

    Raises:
        ConfigurationError: no supported clipboard tool is installed
    """

    def __init__(self, tool: Optional[str] = None, timeout: float = system_config.SUBPROCESS_TIMEOUT):
        if tool is None:
            tool = detect_tool()
            if tool is None:
                raise ConfigurationError(
                    f"no clipboard tool found (install one of: {', '.join(SUPPORTED_TOOLS)})")
        elif tool not in SUPPORTED_TOOLS:
            raise ConfigurationError(f"unsupported clipboard tool '{tool}'")

        self.tool = tool
        self.timeout = timeout
        self._last_hash: Optional[str] = None
        logger.info(f"Clipboard reader using {tool}")

    def _run(self, cmd: List[str]) -> bytes:
        try:
            result = subprocess.run(cmd, capture_output=True, timeout=self.timeout)
        except (OSError, subprocess.SubprocessError) as e:
            raise DataUnavailableError(f"{cmd[0]} failed: {e}") from e
        if result.returncode != 0:
            # wl-paste and xclip exit non-zero on an empty selection
            return b''
        return result.stdout

    def _raw(self) -> bytes:
        return self._run(_READ_COMMANDS[self.tool])

    def targets(self) -> List[str]:
        cmd = _TARGET_COMMANDS.get(self.tool)
        if cmd is None:
            return ['text/plain']
        try:
            output = self._run(cmd)
        except DataUnavailableError as e:
            logger.debug(f"Listing clipboard targets failed: {e}")
            return []
        lines = output.decode('utf-8', errors='replace').splitlines()
        return [line.strip() for line in lines if line.strip()]

    def _files(self) -> List[str]:
        cmd = _FILE_COMMANDS.get(self.tool)
        if cmd is None:
            return []
        files = []
        for line in self._run(cmd).decode('utf-8', errors='replace').splitlines():
            path = line.strip()
            if not path or path.startswith('#'):
                continue
            if path.startswith('file://'):
                path = unquote(urlparse(path).path)
            files.append(path)
        return files

    def has_changed(self) -> bool:
        """
        True when the clipboard bytes differ from the previous call.

        The first call always reports a change.
        """
        digest = hashlib.md5(self._raw()).hexdigest()
        if digest == self._last_hash:
            return False
        self._last_hash = digest
        return True

    def read(self) -> Tuple[str, ContentType]:
        """
        Current clipboard content and its type.

        Raises:
            DataUnavailableError: the clipboard tool could not be run
        """
        content_type = classify_targets(self.targets())

        if content_type == ContentType.FILES:
            return format_file_list(self._files()), content_type
        if content_type == ContentType.IMAGE:
            return "[Image]", content_type

        raw = self._raw()
        if not raw:
            return "", ContentType.EMPTY
        return raw.decode('utf-8', errors='replace'), content_type

    def close(self):
        self._last_hash = None
