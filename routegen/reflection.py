"""Source-level reflection over handler classes.

The builder only needs two answers about a class: its own docblock and the
docblocks of its public instance methods. ``SourceReflector`` is that seam;
``PhpSourceReflector`` answers it with a narrow text scan of the PHP file
(declared methods only, so inherited methods never appear).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .annotations import COMMENT_CLOSE, COMMENT_OPEN
from .class_meta import CLASS_RE
from .config import get_php_config

CONSTRUCTOR = str(get_php_config().get("constructor") or "__construct")

METHOD_RE = re.compile(
    r"^[ \t]*(?P<mods>(?:(?:public|protected|private|static|abstract|final)\s+)*)"
    r"function\s+&?\s*(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*\(",
    re.MULTILINE,
)
HEREDOC_RE = re.compile(r"<<<[ \t]*(['\"]?)([A-Za-z_][A-Za-z0-9_]*)\1\r?\n")
HIDDEN_MODIFIERS = {"private", "protected", "static"}

Span = Tuple[str, int, int]


class SourceReflector:
    """Answers class and method docblock queries by qualified class name."""

    def index_source(self, qualified_name: str, text: str) -> Optional["ClassSource"]:
        """Offer raw source text; reflectors with their own data ignore it."""
        return None

    def get_class_comment(self, qualified_name: str) -> str:
        raise NotImplementedError

    def list_public_methods(self, qualified_name: str) -> List[Tuple[str, str]]:
        """Return ``(method_name, comment)`` pairs in declaration order."""
        raise NotImplementedError


@dataclass
class ClassSource:
    """Reflection answers for one scanned class."""
    qualified_name: str
    comment: str = ""
    methods: List[Tuple[str, str]] = field(default_factory=list)


def _string_end(text: str, start: int) -> int:
    quote = text[start]
    i = start + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        i += 1
    return len(text)


def source_spans(text: str) -> List[Span]:
    """Find comments and string literals as ``(kind, start, end)`` spans.

    Kinds are ``block``, ``line`` and ``string``; heredoc and nowdoc bodies
    count as strings. ``#[`` opens an attribute, not a line comment. An
    unterminated span runs to the end of the text.
    """
    spans: List[Span] = []
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if text.startswith("/*", i):
            close = text.find(COMMENT_CLOSE, i + 2)
            end = n if close == -1 else close + len(COMMENT_CLOSE)
            spans.append(("block", i, end))
        elif text.startswith("//", i) or (ch == "#" and not text.startswith("#[", i)):
            close = text.find("\n", i)
            end = n if close == -1 else close
            spans.append(("line", i, end))
        elif ch in "'\"":
            end = _string_end(text, i)
            spans.append(("string", i, end))
        elif text.startswith("<<<", i) and HEREDOC_RE.match(text, i):
            m = HEREDOC_RE.match(text, i)
            closing = re.compile(r"^[ \t]*" + re.escape(m.group(2)) + r"\b", re.MULTILINE)
            found = closing.search(text, m.end())
            end = n if found is None else found.end()
            spans.append(("string", i, end))
        else:
            i += 1
            continue
        i = end
    return spans


def mask_spans(text: str, spans: List[Span]) -> str:
    """Blank out the given spans, keeping offsets and newlines intact."""
    parts: List[str] = []
    last = 0
    for _, start, end in spans:
        parts.append(text[last:start])
        parts.append(re.sub(r"[^\n]", " ", text[start:end]))
        last = end
    parts.append(text[last:])
    return "".join(parts)


def preceding_docblock(text: str, end: int, spans: Optional[List[Span]] = None) -> str:
    """Return the docblock directly before ``end``, skipping attribute lines.

    Only whitespace and ``#[...]`` attributes may sit between the block and
    ``end``. A plain ``/* */`` block in that position means no docblock.
    """
    head = text[:end].rstrip()
    while head.endswith("]"):
        idx = head.rfind("#[")
        if idx == -1:
            break
        head = head[:idx].rstrip()
    if not head.endswith(COMMENT_CLOSE):
        return ""
    if spans is None:
        spans = source_spans(text)
    for kind, start, stop in reversed(spans):
        if stop > len(head):
            continue
        if kind != "block" or stop != len(head):
            return ""
        if not head.startswith(COMMENT_OPEN, start) or stop - start < len(COMMENT_OPEN) + len(COMMENT_CLOSE):
            return ""
        return head[start:stop]
    return ""


def _class_body_span(masked: str, decl_end: int) -> Tuple[int, int]:
    """Return the offsets between the class's outer braces."""
    brace_start = masked.find("{", decl_end)
    if brace_start == -1:
        return decl_end, decl_end
    depth = 0
    for i in range(brace_start, len(masked)):
        if masked[i] == "{":
            depth += 1
        elif masked[i] == "}":
            depth -= 1
            if depth == 0:
                return brace_start + 1, i
    return brace_start + 1, len(masked)


def scan_public_methods(body: str, *, constructor: str = CONSTRUCTOR) -> List[Tuple[str, str]]:
    """List public, non-static, non-constructor methods declared in a class body."""
    methods: List[Tuple[str, str]] = []
    spans = source_spans(body)
    masked = mask_spans(body, spans)
    for m in METHOD_RE.finditer(masked):
        # Only members of the class itself, not functions nested in method bodies.
        if masked.count("{", 0, m.start()) != masked.count("}", 0, m.start()):
            continue
        mods = set(m.group("mods").split())
        if mods & HIDDEN_MODIFIERS:
            continue
        name = m.group("name")
        if name.lower() == constructor.lower():
            continue
        methods.append((name, preceding_docblock(body, m.start(), spans)))
    return methods


def scan_class_source(qualified_name: str, text: str, *, constructor: str = CONSTRUCTOR) -> Optional[ClassSource]:
    """Scan one PHP file; None when it declares no class."""
    spans = source_spans(text)
    masked = mask_spans(text, spans)
    m = CLASS_RE.search(masked)
    if not m:
        return None
    # The pattern may start inside a blanked docblock; anchor on the keyword line.
    decl_start = m.end() - len(m.group(0).lstrip())
    start, end = _class_body_span(masked, m.end())
    return ClassSource(
        qualified_name=qualified_name,
        comment=preceding_docblock(text, decl_start, spans),
        methods=scan_public_methods(text[start:end], constructor=constructor),
    )


class PhpSourceReflector(SourceReflector):
    """Reflection backed by a text scan of indexed PHP sources."""

    def __init__(self, *, constructor: str = CONSTRUCTOR) -> None:
        self.constructor = constructor
        self._classes: Dict[str, ClassSource] = {}

    def index_source(self, qualified_name: str, text: str) -> Optional[ClassSource]:
        source = scan_class_source(qualified_name, text, constructor=self.constructor)
        if source is not None:
            self._classes[qualified_name] = source
        return source

    def get_class_comment(self, qualified_name: str) -> str:
        source = self._classes.get(qualified_name)
        return source.comment if source else ""

    def list_public_methods(self, qualified_name: str) -> List[Tuple[str, str]]:
        source = self._classes.get(qualified_name)
        return list(source.methods) if source else []
