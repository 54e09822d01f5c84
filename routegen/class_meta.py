"""Recover the namespace-qualified class name from PHP source text."""

from __future__ import annotations

import re
from typing import Optional

from .config import get_php_config

NAMESPACE_SEPARATOR = str(get_php_config().get("namespace_separator") or "\\")

NAMESPACE_RE = re.compile(r"^\s*namespace\s+([A-Za-z_\\][A-Za-z0-9_\\]*)\s*[;{]", re.MULTILINE)
CLASS_RE = re.compile(
    r"^\s*(?:(?:abstract|final|readonly)\s+)*class\s+([A-Za-z_][A-Za-z0-9_]*)\b",
    re.MULTILINE,
)


def extract_namespace(text: str) -> str:
    """Return the declared namespace, or an empty string."""
    m = NAMESPACE_RE.search(text)
    if not m:
        return ""
    return m.group(1).strip(NAMESPACE_SEPARATOR)


def extract_class_name(text: str) -> str:
    """Return the first declared class name, or an empty string."""
    m = CLASS_RE.search(text)
    return m.group(1) if m else ""


def extract_qualified_class_name(text: str, *, separator: str = NAMESPACE_SEPARATOR) -> Optional[str]:
    """Join namespace and class name; None when the file declares no class."""
    class_name = extract_class_name(text)
    if not class_name:
        return None
    namespace = extract_namespace(text)
    if not namespace:
        return class_name
    return f"{namespace}{separator}{class_name}"
