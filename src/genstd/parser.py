"""Parser for Go/Gno source files.

Recursive descent for declarations and a precedence-climbing parser for
expressions. Function bodies, variable and constant declarations are
skipped by balanced-token scanning: only signatures are needed to link
Gno declarations to Go implementations.
"""

from __future__ import annotations

from genstd.ast_nodes import (
    ArrayType,
    BasicLit,
    BinaryExpr,
    ChanType,
    Declaration,
    Ellipsis,
    Expr,
    Field,
    File,
    FuncDecl,
    FuncType,
    Ident,
    ImportSpec,
    IndexExpr,
    InterfaceType,
    MapType,
    ParenExpr,
    QualifiedIdent,
    SelectorExpr,
    StarExpr,
    StructType,
    TypeDecl,
    UnaryExpr,
)
from genstd.errors import Diagnostic, DiagnosticLabel, Severity, SourceError
from genstd.lexer import Lexer
from genstd.source import Span
from genstd.tokens import Token, TokenKind

# Go binary operator precedence; higher binds tighter.
_BINARY_PREC: dict[str, int] = {
    "||": 1,
    "&&": 2,
    "==": 3, "!=": 3, "<": 3, "<=": 3, ">": 3, ">=": 3,
    "+": 4, "-": 4, "|": 4, "^": 4,
    "*": 5, "/": 5, "%": 5, "<<": 5, ">>": 5, "&": 5, "&^": 5,
}

_UNARY_OPS = frozenset({"+", "-", "!", "^", "&", "~"})

_LITERALS = {
    TokenKind.INT: "INT",
    TokenKind.FLOAT: "FLOAT",
    TokenKind.IMAG: "IMAG",
    TokenKind.CHAR: "CHAR",
    TokenKind.STRING: "STRING",
}

# Tokens that may begin a type, used to spot an unparenthesized result.
_TYPE_START = frozenset({
    TokenKind.IDENTIFIER,
    TokenKind.STAR,
    TokenKind.LBRACKET,
    TokenKind.MAP,
    TokenKind.CHAN,
    TokenKind.FUNC,
    TokenKind.STRUCT,
    TokenKind.INTERFACE,
    TokenKind.ARROW,
})

_OPENERS = {
    TokenKind.LPAREN: TokenKind.RPAREN,
    TokenKind.LBRACKET: TokenKind.RBRACKET,
    TokenKind.LBRACE: TokenKind.RBRACE,
}
_CLOSERS = frozenset(_OPENERS.values())


class Parser:
    """Parses a list of tokens into declarations and type expressions."""

    def __init__(self, tokens: list[Token], filename: str = "<stdin>") -> None:
        self.tokens = tokens
        self.pos = 0
        self.filename = filename

    # ── Token access ─────────────────────────────────────────────

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self.tokens[-1]  # EOF

    def _peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1]

    def _at(self, kind: TokenKind) -> bool:
        return self._current().kind == kind

    def _advance(self) -> Token:
        tok = self._current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def _expect(self, kind: TokenKind) -> Token:
        if self._current().kind == kind:
            return self._advance()
        tok = self._current()
        self._error(f"expected {kind.name}, got {tok.kind.name} ({tok.value!r})", tok.span)

    def _skip_semicolons(self) -> None:
        while self._at(TokenKind.SEMICOLON):
            self._advance()

    def _error(self, message: str, span: Span) -> None:
        raise SourceError([
            Diagnostic(
                severity=Severity.ERROR,
                code="E200",
                message=message,
                labels=[DiagnosticLabel(span=span, message="")],
            )
        ])

    def _span(self, start: Span, end: Span) -> Span:
        """Build a Span from a start span to an end span."""
        return Span(
            self.filename,
            start.start_line, start.start_col,
            end.end_line, end.end_col,
        )

    def _previous_span(self) -> Span:
        return self.tokens[max(0, self.pos - 1)].span

    # ── Top-level parsing ────────────────────────────────────────

    def parse(self) -> File:
        """Parse the entire token stream into a File."""
        self._skip_semicolons()
        self._expect(TokenKind.PACKAGE)
        package = self._expect(TokenKind.IDENTIFIER).value
        self._expect_decl_end()

        imports: list[ImportSpec] = []
        decls: list[Declaration] = []
        self._skip_semicolons()
        while not self._at(TokenKind.EOF):
            tok = self._current()
            if tok.kind == TokenKind.IMPORT:
                imports.extend(self._parse_import_decl())
            elif tok.kind == TokenKind.FUNC:
                decls.append(self._parse_func_decl())
            elif tok.kind == TokenKind.TYPE:
                decls.extend(self._parse_type_decl())
            elif tok.kind in (TokenKind.VAR, TokenKind.CONST):
                self._advance()
                if self._at(TokenKind.LPAREN):
                    self._skip_balanced()
                else:
                    self._skip_to_decl_end()
                self._expect_decl_end()
            else:
                self._error(
                    f"unexpected token at top level: {tok.kind.name} ({tok.value!r})",
                    tok.span,
                )
            self._skip_semicolons()

        return File(
            package=package,
            imports=tuple(imports),
            decls=tuple(decls),
            filename=self.filename,
        )

    def parse_single_expr(self) -> Expr:
        """Parse the token stream as exactly one expression."""
        expr = self._parse_expr()
        self._skip_semicolons()
        if not self._at(TokenKind.EOF):
            tok = self._current()
            self._error(f"unexpected {tok.kind.name} ({tok.value!r}) after expression", tok.span)
        return expr

    def _expect_decl_end(self) -> None:
        if self._at(TokenKind.SEMICOLON):
            self._advance()
        elif not self._at(TokenKind.EOF):
            tok = self._current()
            self._error(
                f"expected end of declaration, got {tok.kind.name} ({tok.value!r})",
                tok.span,
            )

    def _skip_balanced(self) -> None:
        """Skip from an opening bracket to its matching closer, inclusive."""
        open_tok = self._advance()
        close = _OPENERS[open_tok.kind]
        depth = 1
        while depth:
            tok = self._advance()
            if tok.kind == TokenKind.EOF:
                self._error(f"unbalanced {open_tok.value!r}", open_tok.span)
            if tok.kind == open_tok.kind:
                depth += 1
            elif tok.kind == close:
                depth -= 1

    def _skip_to_decl_end(self) -> None:
        """Skip to the SEMICOLON (or enclosing closer) ending a declaration."""
        depth = 0
        while not self._at(TokenKind.EOF):
            kind = self._current().kind
            if kind in _OPENERS:
                depth += 1
            elif kind in _CLOSERS:
                if depth == 0:
                    return
                depth -= 1
            elif kind == TokenKind.SEMICOLON and depth == 0:
                return
            self._advance()

    # ── Imports ──────────────────────────────────────────────────

    def _parse_import_decl(self) -> list[ImportSpec]:
        self._expect(TokenKind.IMPORT)
        specs: list[ImportSpec] = []
        if self._at(TokenKind.LPAREN):
            self._advance()
            self._skip_semicolons()
            while not self._at(TokenKind.RPAREN):
                specs.append(self._parse_import_spec())
                if not self._at(TokenKind.RPAREN):
                    self._expect(TokenKind.SEMICOLON)
                self._skip_semicolons()
            self._advance()
        else:
            specs.append(self._parse_import_spec())
        self._expect_decl_end()
        return specs

    def _parse_import_spec(self) -> ImportSpec:
        name = None
        if self._at(TokenKind.IDENTIFIER) or self._at(TokenKind.DOT):
            name = self._advance().value
        path = self._expect(TokenKind.STRING).value
        return ImportSpec(path=path[1:-1], name=name)

    # ── Declarations ─────────────────────────────────────────────

    def _parse_func_decl(self) -> FuncDecl:
        start = self._expect(TokenKind.FUNC).span

        recv = None
        if self._at(TokenKind.LPAREN):
            recv_fields = self._parse_parameters()
            if len(recv_fields) != 1:
                self._error("method has multiple receivers", start)
            recv = recv_fields[0]

        name = self._expect(TokenKind.IDENTIFIER).value

        type_params = False
        if self._at(TokenKind.LBRACKET):
            self._skip_balanced()
            type_params = True

        params, results = self._parse_signature()
        span = self._span(start, self._previous_span())

        has_body = self._at(TokenKind.LBRACE)
        if has_body:
            self._skip_balanced()
        self._expect_decl_end()

        return FuncDecl(
            name=name,
            params=params,
            results=results,
            span=span,
            recv=recv,
            type_params=type_params,
            has_body=has_body,
        )

    def _parse_type_decl(self) -> list[TypeDecl]:
        self._expect(TokenKind.TYPE)
        decls: list[TypeDecl] = []
        if self._at(TokenKind.LPAREN):
            self._advance()
            self._skip_semicolons()
            while not self._at(TokenKind.RPAREN):
                tok = self._expect(TokenKind.IDENTIFIER)
                decls.append(TypeDecl(name=tok.value, span=tok.span))
                self._skip_to_decl_end()
                self._skip_semicolons()
            self._advance()
        else:
            tok = self._expect(TokenKind.IDENTIFIER)
            decls.append(TypeDecl(name=tok.value, span=tok.span))
            self._skip_to_decl_end()
        self._expect_decl_end()
        return decls

    # ── Signatures ───────────────────────────────────────────────

    def _parse_signature(self) -> tuple[tuple[Field, ...], tuple[Field, ...]]:
        params = self._parse_parameters()
        results: tuple[Field, ...] = ()
        if self._at(TokenKind.LPAREN):
            results = self._parse_parameters()
        elif self._current().kind in _TYPE_START:
            results = (Field(names=(), type=self._parse_type()),)
        return params, results

    def _parse_parameters(self) -> tuple[Field, ...]:
        """Parse ``(a, b int, c string)`` or ``(int, string)``."""
        self._expect(TokenKind.LPAREN)
        entries: list[tuple[str | None, Expr]] = []
        while not self._at(TokenKind.RPAREN):
            if self._at(TokenKind.IDENTIFIER) and self._is_named_param():
                name = self._advance().value
                entries.append((name, self._parse_param_type()))
            else:
                entries.append((None, self._parse_param_type()))
            if not self._at(TokenKind.COMMA):
                break
            self._advance()
        self._expect(TokenKind.RPAREN)

        if not any(name is not None for name, _ in entries):
            return tuple(Field(names=(), type=typ) for _, typ in entries)

        # Mixed list: bare identifiers are names sharing the next type.
        fields: list[Field] = []
        pending: list[str] = []
        for name, typ in entries:
            if name is None:
                if not isinstance(typ, Ident):
                    self._error("mixed named and unnamed parameters", self._previous_span())
                pending.append(typ.name)
                continue
            fields.append(Field(names=(*pending, name), type=typ))
            pending = []
        if pending:
            self._error("missing parameter type", self._previous_span())
        return tuple(fields)

    def _is_named_param(self) -> bool:
        """True if the identifier at the cursor names a parameter."""
        nxt = self._peek(1).kind
        if nxt in (TokenKind.COMMA, TokenKind.RPAREN, TokenKind.DOT):
            return False
        if nxt == TokenKind.LBRACKET:
            # `a []int` names a parameter; `List[int]` is an instantiated type.
            idx = self.pos + 1
            depth = 0
            while idx < len(self.tokens):
                kind = self.tokens[idx].kind
                if kind == TokenKind.LBRACKET:
                    depth += 1
                elif kind == TokenKind.RBRACKET:
                    depth -= 1
                    if depth == 0:
                        break
                idx += 1
            after = self.tokens[min(idx + 1, len(self.tokens) - 1)].kind
            return after not in (TokenKind.COMMA, TokenKind.RPAREN)
        return True

    def _parse_param_type(self) -> Expr:
        if self._at(TokenKind.ELLIPSIS):
            self._advance()
            return Ellipsis(elt=self._parse_type())
        return self._parse_type()

    # ── Expressions ──────────────────────────────────────────────

    def _parse_type(self) -> Expr:
        return self._parse_unary()

    def _parse_expr(self, min_prec: int = 0) -> Expr:
        left = self._parse_unary()
        while True:
            tok = self._current()
            if tok.kind not in (TokenKind.STAR, TokenKind.OPERATOR):
                return left
            prec = _BINARY_PREC.get(tok.value)
            if prec is None or prec <= min_prec:
                return left
            self._advance()
            right = self._parse_expr(prec)
            left = BinaryExpr(x=left, op=tok.value, y=right)

    def _parse_unary(self) -> Expr:
        tok = self._current()
        if tok.kind == TokenKind.STAR:
            self._advance()
            return StarExpr(x=self._parse_unary())
        if tok.kind == TokenKind.ARROW:
            self._advance()
            if self._at(TokenKind.CHAN):
                self._advance()
                return ChanType(dir="<-chan", value=self._parse_type())
            return UnaryExpr(op="<-", x=self._parse_unary())
        if tok.kind == TokenKind.OPERATOR and tok.value in _UNARY_OPS:
            self._advance()
            return UnaryExpr(op=tok.value, x=self._parse_unary())
        return self._parse_primary()

    def _parse_primary(self) -> Expr:
        expr = self._parse_operand()
        while True:
            if self._at(TokenKind.DOT) and self._peek(1).kind == TokenKind.IDENTIFIER:
                self._advance()
                name = self._advance().value
                if isinstance(expr, Ident):
                    expr = QualifiedIdent(package=expr.name, name=name)
                else:
                    expr = SelectorExpr(x=expr, name=name)
            elif self._at(TokenKind.LBRACKET):
                self._advance()
                indices = [self._parse_expr()]
                while self._at(TokenKind.COMMA):
                    self._advance()
                    indices.append(self._parse_expr())
                self._expect(TokenKind.RBRACKET)
                expr = IndexExpr(x=expr, indices=tuple(indices))
            else:
                return expr

    def _parse_operand(self) -> Expr:
        tok = self._current()
        kind = tok.kind

        if kind == TokenKind.IDENTIFIER:
            self._advance()
            return Ident(name=tok.value)
        if kind in _LITERALS:
            self._advance()
            return BasicLit(kind=_LITERALS[kind], value=tok.value)
        if kind == TokenKind.LPAREN:
            self._advance()
            inner = self._parse_expr()
            self._expect(TokenKind.RPAREN)
            return ParenExpr(x=inner)
        if kind == TokenKind.LBRACKET:
            return self._parse_array_type()
        if kind == TokenKind.MAP:
            self._advance()
            self._expect(TokenKind.LBRACKET)
            key = self._parse_type()
            self._expect(TokenKind.RBRACKET)
            return MapType(key=key, value=self._parse_type())
        if kind == TokenKind.CHAN:
            self._advance()
            direction = "chan"
            if self._at(TokenKind.ARROW):
                self._advance()
                direction = "chan<-"
            return ChanType(dir=direction, value=self._parse_type())
        if kind == TokenKind.FUNC:
            self._advance()
            params, results = self._parse_signature()
            return FuncType(params=params, results=results)
        if kind == TokenKind.STRUCT:
            return self._parse_struct_type()
        if kind == TokenKind.INTERFACE:
            return self._parse_interface_type()

        self._error(f"expected expression, got {kind.name} ({tok.value!r})", tok.span)

    def _parse_array_type(self) -> ArrayType:
        self._expect(TokenKind.LBRACKET)
        if self._at(TokenKind.RBRACKET):
            self._advance()
            return ArrayType(len=None, elt=self._parse_type())
        if self._at(TokenKind.ELLIPSIS) and self._peek(1).kind == TokenKind.RBRACKET:
            self._advance()
            length: Expr = Ellipsis()
        else:
            length = self._parse_expr()
        self._expect(TokenKind.RBRACKET)
        return ArrayType(len=length, elt=self._parse_type())

    def _parse_struct_type(self) -> StructType:
        self._expect(TokenKind.STRUCT)
        self._expect(TokenKind.LBRACE)
        fields: list[Field] = []
        self._skip_semicolons()
        while not self._at(TokenKind.RBRACE):
            nxt = self._peek(1).kind
            if self._at(TokenKind.IDENTIFIER) and nxt not in (
                TokenKind.SEMICOLON, TokenKind.RBRACE, TokenKind.DOT, TokenKind.STRING,
            ):
                names = [self._advance().value]
                while self._at(TokenKind.COMMA):
                    self._advance()
                    names.append(self._expect(TokenKind.IDENTIFIER).value)
                typ = self._parse_type()
            else:
                names = []
                typ = self._parse_type()  # embedded field
            tag = None
            if self._at(TokenKind.STRING):
                tag = self._advance().value
            fields.append(Field(names=tuple(names), type=typ, tag=tag))
            if not self._at(TokenKind.RBRACE):
                self._expect(TokenKind.SEMICOLON)
            self._skip_semicolons()
        self._advance()
        return StructType(fields=tuple(fields))

    def _parse_interface_type(self) -> InterfaceType:
        self._expect(TokenKind.INTERFACE)
        self._expect(TokenKind.LBRACE)
        methods: list[Field] = []
        self._skip_semicolons()
        while not self._at(TokenKind.RBRACE):
            if self._at(TokenKind.IDENTIFIER) and self._peek(1).kind == TokenKind.LPAREN:
                name = self._advance().value
                params, results = self._parse_signature()
                methods.append(
                    Field(names=(name,), type=FuncType(params=params, results=results))
                )
            else:
                methods.append(Field(names=(), type=self._parse_expr()))
            if not self._at(TokenKind.RBRACE):
                self._expect(TokenKind.SEMICOLON)
            self._skip_semicolons()
        self._advance()
        return InterfaceType(methods=tuple(methods))


def parse_file(source: str, filename: str = "<stdin>") -> File:
    """Lex and parse a whole Go or Gno source file."""
    tokens = Lexer(source, filename).lex()
    return Parser(tokens, filename).parse()


def parse_expr(source: str) -> Expr:
    """Lex and parse a single expression, e.g. ``*[11][]rune``."""
    tokens = Lexer(source, "<expr>").lex()
    return Parser(tokens, "<expr>").parse_single_expr()
