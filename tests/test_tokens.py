"""
Tests for format-string tokens and the map-based formatter.
"""

import pytest

from oledash.render.formatter import TokenFormatter
from oledash.render.tokens import TokenType, find_blink_target, join_tokens, parse_format_tokens


def classify(name):
    return {
        'icon': TokenType.ICON,
        'name': TokenType.TEXT,
        'level': TokenType.TEXT,
        'battery': TokenType.SHAPE,
    }.get(name, TokenType.LITERAL)


class TestParseFormatTokens:

    @pytest.mark.parametrize("fmt", [
        "",
        "plain text",
        "{icon} {name} {battery:20}",
        "{name}{level}",
        "[{unknown}] {battery:20px} tail",
        "{icon}{ icon}{}",
    ])
    def test_round_trip(self, fmt):
        assert join_tokens(parse_format_tokens(fmt, classify)) == fmt

    def test_types_and_params(self):
        tokens = parse_format_tokens("{icon} {name} {battery:20}", classify)
        assert [t.type for t in tokens] == [
            TokenType.ICON, TokenType.LITERAL, TokenType.TEXT, TokenType.LITERAL, TokenType.SHAPE,
        ]
        assert tokens[1].text == " "
        assert tokens[4].name == 'battery'
        assert tokens[4].param == '20'
        assert tokens[4].int_param() == 20

    def test_unknown_name_is_literal_without_braces(self):
        tokens = parse_format_tokens("a{foo:bar}b", classify)
        assert [t.text for t in tokens] == ["a", "foo:bar", "b"]
        assert all(t.type == TokenType.LITERAL for t in tokens)

    def test_int_param_default(self):
        token = parse_format_tokens("{battery}", classify)[0]
        assert token.int_param(7) == 7

    def test_malformed_braces_stay_literal(self):
        tokens = parse_format_tokens("{1abc} {name", classify)
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.LITERAL


class TestBlinkTarget:

    def test_shape_wins(self):
        tokens = parse_format_tokens("{name} {icon} {battery:10}", classify)
        assert find_blink_target(tokens) == 4

    def test_icon_before_name(self):
        tokens = parse_format_tokens("{name} {icon}", classify)
        assert find_blink_target(tokens) == 2

    def test_name_only(self):
        tokens = parse_format_tokens("{level} {name}", classify)
        assert find_blink_target(tokens) == 2

    def test_nothing_to_blink(self):
        assert find_blink_target(parse_format_tokens("{level} x", classify)) is None


class TestTokenFormatter:

    def test_format_keeps_unknown(self):
        f = TokenFormatter().set('artist', 'Nina').set('title', 'Sinnerman')
        assert f.format('{artist} - {title} ({year})') == 'Nina - Sinnerman ({year})'

    def test_format_strict_erases_unknown(self):
        f = TokenFormatter().set('artist', 'Nina')
        assert f.format_strict('{artist}{year}!') == 'Nina!'

    def test_custom_delimiters(self):
        f = TokenFormatter('{{', '}}').set('a', 1)
        assert f.format('{{a}} {a}') == '1 {a}'

    def test_values_are_not_expanded_again(self):
        f = TokenFormatter().set_all({'a': '{b}', 'b': 'x'})
        assert f.format('{a}') == '{b}'

    def test_empty_template(self):
        assert TokenFormatter().set('a', 1).format('') == ''

    def test_helpers(self):
        f = TokenFormatter().set('a', 1)
        g = f.clone().set('b', 2)
        assert f.has('a') and not f.has('b')
        assert g.count() == 2
        assert g.get('b') == '2'
        assert f.clear().count() == 0
