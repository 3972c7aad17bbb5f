"""
Format-string tokens

A format string such as "{icon} {name} {battery:20}" is split into a list
of tokens. Each {name} or {name:param} placeholder is classified by a
widget-supplied function; text between placeholders becomes Literal tokens.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

TOKEN_PATTERN = re.compile(r'\{([a-zA-Z_][a-zA-Z0-9_]*)(?::([^}]*))?\}')


class TokenType(Enum):
    LITERAL = "literal"
    TEXT = "text"
    ICON = "icon"
    SHAPE = "shape"


Classifier = Callable[[str], TokenType]


@dataclass
class Token:
    """
    One parsed element of a format string.

    text is what a Literal draws: the run itself for literal text, or the
    placeholder with its braces stripped when the classifier did not
    recognise the name. source is the exact slice of the format string the
    token came from.
    """
    type: TokenType
    name: str = ''
    param: str = ''
    text: str = ''
    source: str = ''

    @property
    def is_placeholder(self) -> bool:
        return bool(self.name)

    def int_param(self, default: int = 0) -> int:
        """Leading integer of param ("20" in {battery:20}), or default."""
        match = re.match(r'\s*(-?\d+)', self.param or '')
        return int(match.group(1)) if match else default


def parse_format_tokens(fmt: str, classifier: Classifier) -> List[Token]:
    """
    Split fmt into an ordered token list.

    Args:
        fmt: Format string with {name} / {name:param} placeholders
        classifier: Maps a placeholder name to its TokenType

    Returns:
        Tokens in source order; join_tokens() of the result equals fmt
    """
    tokens = []
    last_end = 0

    for match in TOKEN_PATTERN.finditer(fmt):
        if match.start() > last_end:
            run = fmt[last_end:match.start()]
            tokens.append(Token(TokenType.LITERAL, text=run, source=run))

        name = match.group(1)
        param = match.group(2) or ''
        source = match.group(0)
        token_type = classifier(name)
        text = source[1:-1] if token_type == TokenType.LITERAL else ''
        tokens.append(Token(token_type, name=name, param=param, text=text, source=source))

        last_end = match.end()

    if last_end < len(fmt):
        run = fmt[last_end:]
        tokens.append(Token(TokenType.LITERAL, text=run, source=run))

    return tokens


def join_tokens(tokens: List[Token]) -> str:
    return ''.join(t.source for t in tokens)


def find_blink_target(tokens: List[Token], text_name: str = 'name') -> Optional[int]:
    """
    Index of the token that should blink: first Shape, else first Icon,
    else the first Text token called text_name. None if there is none.
    """
    first_icon = None
    first_text = None
    for i, t in enumerate(tokens):
        if t.type == TokenType.SHAPE:
            return i
        if t.type == TokenType.ICON and first_icon is None:
            first_icon = i
        elif t.type == TokenType.TEXT and t.name == text_name and first_text is None:
            first_text = i
    return first_icon if first_icon is not None else first_text
