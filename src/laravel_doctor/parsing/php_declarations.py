"""
PHP Declaration Scanner
=======================
Finds class method declarations in PHP source without a full grammar.

Only what convention checks need is extracted: the enclosing class, the
method's modifiers, doc comment, parameters (name + declared type) and
declared return type. Method bodies, expressions and statements are
skipped by brace matching.

Usage:
    class MyVisitor(DeclarationVisitor):
        def visit_method(self, node: MethodDeclaration) -> None:
            ...

    walk_declarations(source, MyVisitor())

Malformed input (unterminated string/comment/heredoc, unbalanced braces or
parentheses, a ``function`` keyword without a name or parameter list)
raises ``DeclarationParseError``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

from laravel_doctor.errors import DeclarationParseError

_IDENT = r"[A-Za-z_\x80-\uffff][\w\x80-\uffff]*"

_TOKEN_RE = re.compile(
    rf"""
      (?P<ws>\s+)
    | (?P<doc>/\*\*(?!/).*?\*/)
    | (?P<block>/\*.*?\*/)
    | (?P<bad_comment>/\*)
    | (?P<comment>(?://|\#(?!\[))[^\n]*?(?=\?>|\n|$))
    | (?P<close_tag>\?>)
    | (?P<heredoc><<<[ \t]*(?P<quote>['"]?)(?P<label>{_IDENT})(?P=quote)\r?\n)
    | (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|`(?:[^`\\]|\\.)*`)
    | (?P<bad_string>['"`])
    | (?P<var>\${_IDENT})
    | (?P<name>\\?{_IDENT}(?:\\{_IDENT})*)
    | (?P<num>\d[\w.]*)
    | (?P<punct>\#\[|::|\.\.\.|\?->|->|=>|.)
    """,
    re.S | re.X,
)

_OPEN_TAG_RE = re.compile(r"<\?(?:php\b|=)", re.I)

CLASS_KEYWORDS = frozenset({"class", "interface", "trait", "enum"})
MODIFIERS = frozenset(
    {"public", "protected", "private", "static", "abstract", "final", "readonly", "var"}
)
VISIBILITIES = ("public", "protected", "private")
CONSTRUCTOR_LIKE = frozenset({"__construct"})


class Token(NamedTuple):
    kind: str  # doc | string | var | name | num | punct
    value: str
    line: int


@dataclass(frozen=True, slots=True)
class Parameter:
    name: str
    type: Optional[str]
    line: int


@dataclass(frozen=True, slots=True)
class MethodDeclaration:
    """One method declared directly inside a class-like body."""

    class_name: str
    name: str
    line: int
    modifiers: Tuple[str, ...]
    doc_comment: Optional[str]
    parameters: Tuple[Parameter, ...]
    return_type: Optional[str]

    @property
    def visibility(self) -> str:
        for v in VISIBILITIES:
            if v in self.modifiers:
                return v
        return "public"  # PHP default

    @property
    def is_public(self) -> bool:
        return self.visibility == "public"

    @property
    def is_constructor_like(self) -> bool:
        return self.name.lower() in CONSTRUCTOR_LIKE

    @property
    def untyped_parameters(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.parameters if p.type is None)


class DeclarationVisitor:
    """Base visitor: override ``visit_method`` to inspect declarations."""

    def visit_method(self, node: MethodDeclaration) -> None:
        pass


# =============================================================================
# TOKENIZER
# =============================================================================


def tokenize(source: str) -> Iterator[Token]:
    """Yield significant tokens from the PHP regions of *source*.

    Inline HTML outside ``<?php ... ?>`` is skipped; whitespace and
    ordinary comments are dropped; doc comments are kept.
    """
    pos = 0
    line = 1
    end = len(source)
    while pos < end:
        # HTML mode: jump to the next open tag
        m = _OPEN_TAG_RE.search(source, pos)
        if m is None:
            return
        line += source.count("\n", pos, m.end())
        pos = m.end()

        # PHP mode
        while pos < end:
            m = _TOKEN_RE.match(source, pos)
            if m is None:
                raise DeclarationParseError("unexpected input", line)
            kind = m.lastgroup
            text = m.group(0)
            tok_line = line

            if kind == "bad_comment":
                raise DeclarationParseError("unterminated comment", tok_line)
            if kind == "bad_string":
                raise DeclarationParseError("unterminated string literal", tok_line)
            if kind == "heredoc":
                label = m.group("label")
                closing = re.compile(rf"^[ \t]*{re.escape(label)}\b", re.M)
                c = closing.search(source, m.end())
                if c is None:
                    raise DeclarationParseError(f"unterminated heredoc {label}", tok_line)
                text = source[pos:c.end()]
                kind = "string"

            line += text.count("\n")
            pos += len(text)

            if kind in ("ws", "block", "comment"):
                continue
            if kind == "close_tag":
                yield Token("punct", ";", tok_line)
                break
            yield Token(kind, text, tok_line)


# =============================================================================
# DECLARATION WALKER
# =============================================================================


def _split_params(tokens: Sequence[Token]) -> List[List[Token]]:
    groups: List[List[Token]] = [[]]
    depth = 0
    for tok in tokens:
        if tok.kind == "punct" and tok.value in ("(", "[", "#[", "{"):
            depth += 1
        elif tok.kind == "punct" and tok.value in (")", "]", "}"):
            depth -= 1
        if depth == 0 and tok.kind == "punct" and tok.value == ",":
            groups.append([])
            continue
        groups[-1].append(tok)
    return [g for g in groups if g]


def _strip_attributes(tokens: Sequence[Token]) -> List[Token]:
    out: List[Token] = []
    depth = 0
    for tok in tokens:
        if tok.kind == "punct" and tok.value == "#[":
            depth += 1
            continue
        if depth:
            if tok.kind == "punct" and tok.value == "[":
                depth += 1
            elif tok.kind == "punct" and tok.value == "]":
                depth -= 1
            continue
        out.append(tok)
    return out


def _parse_parameter(tokens: Sequence[Token]) -> Parameter:
    tokens = _strip_attributes(tokens)
    for idx, tok in enumerate(tokens):
        if tok.kind == "var":
            type_tokens = [
                t for t in tokens[:idx]
                if not (t.kind == "name" and t.value.lower() in MODIFIERS)
                and not (t.kind == "punct" and t.value in ("&", "..."))
            ]
            type_str = "".join(t.value for t in type_tokens) or None
            return Parameter(name=tok.value, type=type_str, line=tok.line)
    line = tokens[0].line if tokens else None
    raise DeclarationParseError("parameter without a variable name", line)


def _match_paren(tokens: Sequence[Token], open_idx: int) -> int:
    depth = 0
    for idx in range(open_idx, len(tokens)):
        tok = tokens[idx]
        if tok.kind != "punct":
            continue
        if tok.value == "(":
            depth += 1
        elif tok.value == ")":
            depth -= 1
            if depth == 0:
                return idx
    raise DeclarationParseError("unbalanced parentheses", tokens[open_idx].line)


def _parse_method(
    tokens: Sequence[Token],
    idx: int,
    class_name: str,
    modifiers: Sequence[str],
    doc: Optional[Token],
) -> MethodDeclaration:
    """Parse the method whose ``function`` keyword sits at *idx*."""
    fn_tok = tokens[idx]
    j = idx + 1
    if j < len(tokens) and tokens[j].kind == "punct" and tokens[j].value == "&":
        j += 1
    if j >= len(tokens) or tokens[j].kind != "name":
        raise DeclarationParseError("expected method name after 'function'", fn_tok.line)
    name = tokens[j].value
    j += 1
    if j >= len(tokens) or tokens[j].value != "(":
        raise DeclarationParseError(f"expected parameter list for {name}()", fn_tok.line)
    close = _match_paren(tokens, j)
    params = tuple(_parse_parameter(g) for g in _split_params(tokens[j + 1:close]))

    return_type: Optional[str] = None
    k = close + 1
    if k < len(tokens) and tokens[k].kind == "punct" and tokens[k].value == ":":
        k += 1
        parts: List[str] = []
        while k < len(tokens) and tokens[k].value not in ("{", ";"):
            parts.append(tokens[k].value)
            k += 1
        return_type = "".join(parts) or None

    return MethodDeclaration(
        class_name=class_name,
        name=name,
        line=fn_tok.line,
        modifiers=tuple(modifiers),
        doc_comment=doc.value if doc is not None else None,
        parameters=params,
        return_type=return_type,
    )


def walk_declarations(source: str, visitor: DeclarationVisitor) -> None:
    """Scan *source* and call ``visitor.visit_method`` for every method."""
    tokens = list(tokenize(source))

    depth = 0
    parens = 0
    class_stack: List[Tuple[str, int]] = []  # (class name, body depth)
    pending_class: Optional[str] = None
    doc: Optional[Token] = None
    modifiers: List[str] = []
    prev: Optional[Token] = None

    for idx, tok in enumerate(tokens):
        value = tok.value
        if tok.kind == "punct":
            if value == "(":
                parens += 1
            elif value == ")":
                parens -= 1
                if parens < 0:
                    raise DeclarationParseError("unbalanced parentheses", tok.line)
            elif value == "{":
                depth += 1
                if pending_class is not None:
                    class_stack.append((pending_class, depth))
                    pending_class = None
                doc, modifiers = None, []
            elif value == "}":
                if class_stack and class_stack[-1][1] == depth:
                    class_stack.pop()
                depth -= 1
                if depth < 0:
                    raise DeclarationParseError("unbalanced braces", tok.line)
                doc, modifiers = None, []
            elif value == ";":
                doc, modifiers = None, []
        elif tok.kind == "doc":
            doc = tok
        elif tok.kind == "name":
            lowered = value.lower()
            after_member_access = prev is not None and prev.value in ("::", "->", "?->")
            if after_member_access:
                pass
            elif lowered in CLASS_KEYWORDS:
                if prev is not None and prev.value.lower() == "new":
                    pending_class = "class@anonymous"
                elif idx + 1 < len(tokens) and tokens[idx + 1].kind == "name":
                    pending_class = tokens[idx + 1].value
            elif lowered in MODIFIERS:
                modifiers.append(lowered)
            elif lowered == "function":
                in_class_body = bool(class_stack) and class_stack[-1][1] == depth
                if in_class_body:
                    visitor.visit_method(
                        _parse_method(tokens, idx, class_stack[-1][0], modifiers, doc)
                    )
                    doc, modifiers = None, []
        prev = tok

    if depth != 0:
        raise DeclarationParseError("unbalanced braces at end of file")
    if parens != 0:
        raise DeclarationParseError("unbalanced parentheses at end of file")


class _Collector(DeclarationVisitor):
    def __init__(self) -> None:
        self.methods: List[MethodDeclaration] = []

    def visit_method(self, node: MethodDeclaration) -> None:
        self.methods.append(node)


def parse_methods(source: str) -> List[MethodDeclaration]:
    """Return every class method declared in *source*, in source order."""
    collector = _Collector()
    walk_declarations(source, collector)
    return collector.methods
