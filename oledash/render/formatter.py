"""
Map-based template substitution for plain-text widgets.
"""

import re
from typing import Dict, Optional


class TokenFormatter:
    """
    Replace {name} placeholders with stored values.

    format() keeps unknown placeholders verbatim, format_strict() erases
    them. Delimiters default to "{" and "}" and may be changed, e.g. to
    "{{" / "}}". Substitution is a single pass, so values that happen to
    contain delimiters are never expanded again.

        f = TokenFormatter().set('artist', 'Nina').set('title', 'Sinnerman')
        f.format('{artist} - {title}')   # 'Nina - Sinnerman'
    """

    def __init__(self, prefix: str = '{', suffix: str = '}', values: Optional[Dict[str, str]] = None):
        self.prefix = prefix
        self.suffix = suffix
        self._values: Dict[str, str] = dict(values or {})
        self._pattern = re.compile(re.escape(prefix) + r'(.*?)' + re.escape(suffix), re.DOTALL)

    def set(self, name: str, value) -> 'TokenFormatter':
        self._values[name] = str(value)
        return self

    def set_all(self, values: Dict[str, object]) -> 'TokenFormatter':
        for name, value in values.items():
            self._values[name] = str(value)
        return self

    def get(self, name: str) -> str:
        return self._values.get(name, '')

    def has(self, name: str) -> bool:
        return name in self._values

    def clear(self) -> 'TokenFormatter':
        self._values = {}
        return self

    def count(self) -> int:
        return len(self._values)

    def clone(self) -> 'TokenFormatter':
        return TokenFormatter(self.prefix, self.suffix, self._values)

    def format(self, template: str) -> str:
        if not template:
            return ''
        return self._pattern.sub(lambda m: self._values.get(m.group(1), m.group(0)), template)

    def format_strict(self, template: str) -> str:
        if not template:
            return ''
        return self._pattern.sub(lambda m: self._values.get(m.group(1), ''), template)
