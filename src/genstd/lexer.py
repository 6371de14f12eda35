"""Lexer for Go and Gno source files.

Produces a flat token stream. Newlines are not tokens; instead a
SEMICOLON is inserted where Go's semicolon rules require one, so the
parser can tell a body-less function declaration from one with a body.
"""

from __future__ import annotations

from genstd.errors import Diagnostic, DiagnosticLabel, Severity, SourceError
from genstd.source import Span
from genstd.tokens import (
    KEYWORDS,
    OPERATORS,
    PUNCTUATION,
    SEMICOLON_INSERTED_AFTER,
    Token,
    TokenKind,
)


class Lexer:
    """Tokenizes Go/Gno source code."""

    def __init__(self, source: str, filename: str = "<stdin>") -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1
        self.prev_token: Token | None = None
        self.tokens: list[Token] = []
        self.diagnostics: list[Diagnostic] = []

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list."""
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch == '\n':
                self._insert_semicolon("\n")
                self._advance()
            elif ch in (' ', '\t', '\r'):
                self._advance()
            elif ch == '/' and self._peek(1) == '/':
                self._skip_line_comment()
            elif ch == '/' and self._peek(1) == '*':
                self._skip_block_comment()
            elif ch == '"':
                self._lex_string()
            elif ch == '`':
                self._lex_raw_string()
            elif ch == "'":
                self._lex_char()
            elif ch.isdigit() or (ch == '.' and self._peek(1).isdigit()):
                self._lex_number()
            elif ch.isalpha() or ch == '_':
                self._lex_identifier()
            else:
                self._lex_operator()

        self._insert_semicolon("")
        self._emit(TokenKind.EOF, "", self.line, self.col)

        if self.diagnostics:
            raise SourceError(self.diagnostics)
        return self.tokens

    # ── Helpers ───────────────────────────────────────────────────

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _emit(self, kind: TokenKind, value: str, start_line: int, start_col: int) -> Token:
        end_col = self.col - 1 if self.col > 1 else 1
        span = Span(self.filename, start_line, start_col, self.line, end_col)
        tok = Token(kind, value, span)
        self.tokens.append(tok)
        self.prev_token = tok
        return tok

    def _error(self, message: str, line: int, col: int) -> None:
        span = Span(self.filename, line, col, line, col)
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR,
                code="E100",
                message=message,
                labels=[DiagnosticLabel(span=span, message="")],
            )
        )

    def _insert_semicolon(self, value: str) -> None:
        """Emit an implicit SEMICOLON if the previous token ends a statement."""
        prev = self.prev_token
        if prev is None:
            return
        if prev.kind in SEMICOLON_INSERTED_AFTER or (
            prev.kind == TokenKind.OPERATOR and prev.value in ("++", "--")
        ):
            self._emit(TokenKind.SEMICOLON, value, self.line, self.col)

    # ── Comments ─────────────────────────────────────────────────

    def _skip_line_comment(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] != '\n':
            self._advance()

    def _skip_block_comment(self) -> None:
        start_line = self.line
        start_col = self.col
        self._advance()
        self._advance()
        while self.pos < len(self.source):
            if self.source[self.pos] == '*' and self._peek(1) == '/':
                self._advance()
                self._advance()
                # A comment spanning lines acts like a newline.
                if self.line != start_line:
                    self._insert_semicolon("\n")
                return
            self._advance()
        self._error("comment not terminated", start_line, start_col)

    # ── Literals ─────────────────────────────────────────────────

    def _lex_string(self) -> None:
        start_line = self.line
        start_col = self.col
        start = self.pos
        self._advance()  # opening "
        while self.pos < len(self.source) and self.source[self.pos] != '"':
            if self.source[self.pos] == '\n':
                self._error("string literal not terminated", start_line, start_col)
                return
            if self.source[self.pos] == '\\' and self.pos + 1 < len(self.source):
                self._advance()
            self._advance()
        if self.pos >= len(self.source):
            self._error("string literal not terminated", start_line, start_col)
            return
        self._advance()  # closing "
        self._emit(TokenKind.STRING, self.source[start:self.pos], start_line, start_col)

    def _lex_raw_string(self) -> None:
        start_line = self.line
        start_col = self.col
        start = self.pos
        self._advance()
        while self.pos < len(self.source) and self.source[self.pos] != '`':
            self._advance()
        if self.pos >= len(self.source):
            self._error("raw string literal not terminated", start_line, start_col)
            return
        self._advance()
        self._emit(TokenKind.STRING, self.source[start:self.pos], start_line, start_col)

    def _lex_char(self) -> None:
        start_line = self.line
        start_col = self.col
        start = self.pos
        self._advance()
        while self.pos < len(self.source) and self.source[self.pos] != "'":
            if self.source[self.pos] == '\n':
                self._error("rune literal not terminated", start_line, start_col)
                return
            if self.source[self.pos] == '\\' and self.pos + 1 < len(self.source):
                self._advance()
            self._advance()
        if self.pos >= len(self.source):
            self._error("rune literal not terminated", start_line, start_col)
            return
        self._advance()
        self._emit(TokenKind.CHAR, self.source[start:self.pos], start_line, start_col)

    def _lex_number(self) -> None:
        start_line = self.line
        start_col = self.col
        start = self.pos
        is_hex = self.source[self.pos] == '0' and self._peek(1) in ('x', 'X')
        exponents = ('p', 'P') if is_hex else ('e', 'E', 'p', 'P')
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch.isalnum() or ch == '_':
                self._advance()
                if ch in exponents and self._peek() in ('+', '-'):
                    self._advance()
            elif ch == '.' and self._peek(1) != '.':
                self._advance()
            else:
                break
        text = self.source[start:self.pos]
        lowered = text.lower()
        if lowered.endswith('i'):
            kind = TokenKind.IMAG
        elif '.' in text or 'p' in lowered or (not is_hex and 'e' in lowered):
            kind = TokenKind.FLOAT
        else:
            kind = TokenKind.INT
        self._emit(kind, text, start_line, start_col)

    # ── Identifiers and operators ────────────────────────────────

    def _lex_identifier(self) -> None:
        start_line = self.line
        start_col = self.col
        start = self.pos
        while self.pos < len(self.source) and (
            self.source[self.pos].isalnum() or self.source[self.pos] == '_'
        ):
            self._advance()
        text = self.source[start:self.pos]
        self._emit(KEYWORDS.get(text, TokenKind.IDENTIFIER), text, start_line, start_col)

    def _lex_operator(self) -> None:
        start_line = self.line
        start_col = self.col
        for op in OPERATORS:
            if self.source.startswith(op, self.pos):
                for _ in op:
                    self._advance()
                self._emit(
                    PUNCTUATION.get(op, TokenKind.OPERATOR), op, start_line, start_col,
                )
                return
        ch = self._advance()
        self._error(f"unexpected character {ch!r}", start_line, start_col)
