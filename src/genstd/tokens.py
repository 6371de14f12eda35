"""Token kinds and token representation for the Go/Gno lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from genstd.source import Span


class TokenKind(Enum):
    # Keywords
    BREAK = auto()
    CASE = auto()
    CHAN = auto()
    CONST = auto()
    CONTINUE = auto()
    DEFAULT = auto()
    DEFER = auto()
    ELSE = auto()
    FALLTHROUGH = auto()
    FOR = auto()
    FUNC = auto()
    GO = auto()
    GOTO = auto()
    IF = auto()
    IMPORT = auto()
    INTERFACE = auto()
    MAP = auto()
    PACKAGE = auto()
    RANGE = auto()
    RETURN = auto()
    SELECT = auto()
    STRUCT = auto()
    SWITCH = auto()
    TYPE = auto()
    VAR = auto()

    # Literals
    INT = auto()
    FLOAT = auto()
    IMAG = auto()
    CHAR = auto()
    STRING = auto()

    # Punctuation the parser inspects
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    SEMICOLON = auto()
    COLON = auto()
    DOT = auto()
    ELLIPSIS = auto()
    STAR = auto()
    ARROW = auto()  # <-

    # Every other operator; the token value holds its text
    OPERATOR = auto()

    IDENTIFIER = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    span: Span


KEYWORDS: dict[str, TokenKind] = {
    "break": TokenKind.BREAK,
    "case": TokenKind.CASE,
    "chan": TokenKind.CHAN,
    "const": TokenKind.CONST,
    "continue": TokenKind.CONTINUE,
    "default": TokenKind.DEFAULT,
    "defer": TokenKind.DEFER,
    "else": TokenKind.ELSE,
    "fallthrough": TokenKind.FALLTHROUGH,
    "for": TokenKind.FOR,
    "func": TokenKind.FUNC,
    "go": TokenKind.GO,
    "goto": TokenKind.GOTO,
    "if": TokenKind.IF,
    "import": TokenKind.IMPORT,
    "interface": TokenKind.INTERFACE,
    "map": TokenKind.MAP,
    "package": TokenKind.PACKAGE,
    "range": TokenKind.RANGE,
    "return": TokenKind.RETURN,
    "select": TokenKind.SELECT,
    "struct": TokenKind.STRUCT,
    "switch": TokenKind.SWITCH,
    "type": TokenKind.TYPE,
    "var": TokenKind.VAR,
}

# Longest operators first so that matching is greedy.
OPERATORS: tuple[str, ...] = (
    "<<=", ">>=", "&^=", "...",
    "&&", "||", "<-", "++", "--", "==", "!=", "<=", ">=", ":=",
    "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "<<", ">>", "&^",
    "+", "-", "*", "/", "%", "&", "|", "^", "<", ">", "=", "!", "~",
    "(", ")", "[", "]", "{", "}", ",", ";", ":", ".",
)

PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    ":": TokenKind.COLON,
    ".": TokenKind.DOT,
    "...": TokenKind.ELLIPSIS,
    "*": TokenKind.STAR,
    "<-": TokenKind.ARROW,
}

# A newline after one of these ends the statement (Go semicolon insertion).
SEMICOLON_INSERTED_AFTER: frozenset[TokenKind] = frozenset({
    TokenKind.IDENTIFIER,
    TokenKind.INT,
    TokenKind.FLOAT,
    TokenKind.IMAG,
    TokenKind.CHAR,
    TokenKind.STRING,
    TokenKind.BREAK,
    TokenKind.CONTINUE,
    TokenKind.FALLTHROUGH,
    TokenKind.RETURN,
    TokenKind.RPAREN,
    TokenKind.RBRACKET,
    TokenKind.RBRACE,
})
