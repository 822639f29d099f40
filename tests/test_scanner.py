import io

import pytest

from plume.errors import ErrorReporter
from plume.scanner import scan
from plume.tokens import TokenType


def quiet_reporter():
    return ErrorReporter(stream=io.StringIO())


def kinds(tokens):
    return [t.kind for t in tokens]


@pytest.mark.parametrize('text', ['0', '7', '123', '3.14', '0.5', '10.25'])
def test_number_literal_scans_to_one_token(text):
    tokens = scan(text)
    assert kinds(tokens) == [TokenType.NUMBER, TokenType.EOF]
    assert tokens[0].literal == float(text)
    assert tokens[0].lexeme == text


def test_trailing_dot_is_not_part_of_number():
    tokens = scan('1.')
    assert kinds(tokens) == [TokenType.NUMBER, TokenType.DOT, TokenType.EOF]
    assert tokens[0].literal == 1.0


def test_string_literal_stops_at_next_quote():
    tokens = scan('"ab" ')
    assert kinds(tokens) == [TokenType.STRING, TokenType.EOF]
    assert tokens[0].literal == 'ab'
    assert tokens[0].lexeme == '"ab"'


def test_operators_use_one_character_lookahead():
    tokens = scan('! != = == < <= > >= / * - + ; , . ( ) { } [ ]')
    assert kinds(tokens) == [
        TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL,
        TokenType.LESS, TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL,
        TokenType.SLASH, TokenType.STAR, TokenType.MINUS, TokenType.PLUS,
        TokenType.SEMICOLON, TokenType.COMMA, TokenType.DOT,
        TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN,
        TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
        TokenType.LEFT_BRACKET, TokenType.RIGHT_BRACKET,
        TokenType.EOF,
    ]


def test_keywords_and_identifiers():
    tokens = scan('fun funny or orchid var _tmp1 nil')
    assert kinds(tokens) == [
        TokenType.FUN, TokenType.IDENTIFIER, TokenType.OR, TokenType.IDENTIFIER,
        TokenType.VAR, TokenType.IDENTIFIER, TokenType.NIL, TokenType.EOF,
    ]
    assert tokens[5].lexeme == '_tmp1'


def test_comments_are_skipped_and_lines_counted():
    tokens = scan('// a comment\nprint /* spans\ntwo lines */ x;')
    assert kinds(tokens) == [TokenType.PRINT, TokenType.IDENTIFIER, TokenType.SEMICOLON, TokenType.EOF]
    assert tokens[0].line == 2
    assert tokens[1].line == 3


def test_multiline_string_advances_line():
    tokens = scan('"a\nb" x')
    assert tokens[0].literal == 'a\nb'
    assert tokens[1].line == 2


def test_unterminated_string_reports_and_emits_nothing():
    reporter = quiet_reporter()
    tokens = scan('print "abc', reporter)
    assert kinds(tokens) == [TokenType.PRINT, TokenType.EOF]
    assert [str(d) for d in reporter.diagnostics] == ['[line 1] Error: Unterminated string.']


def test_unterminated_block_comment_is_reported():
    reporter = quiet_reporter()
    tokens = scan('1 /* never closed', reporter)
    assert kinds(tokens) == [TokenType.NUMBER, TokenType.EOF]
    assert reporter.diagnostics[0].message == 'Unterminated block comment.'


def test_unexpected_character_is_reported_and_scanning_continues():
    reporter = quiet_reporter()
    tokens = scan('@ 1\n# 2', reporter)
    assert kinds(tokens) == [TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF]
    assert [str(d) for d in reporter.diagnostics] == [
        "[line 1] Error: Unexpected character '@'.",
        "[line 2] Error: Unexpected character '#'.",
    ]


def test_eof_is_always_last():
    tokens = scan('')
    assert kinds(tokens) == [TokenType.EOF]
    assert tokens[0].line == 1


def test_diagnostics_go_to_stderr_by_default(capsys):
    scan('$')
    assert capsys.readouterr().err.strip() == "[line 1] Error: Unexpected character '$'."


def test_token_str_matches_dump_format():
    number, eof = scan('42')
    assert str(number) == "NUMBER | '42' | 42.0 | line=1"
    assert str(eof) == "EOF | '' | null | line=1"
