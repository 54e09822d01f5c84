#!/usr/bin/env python3
"""Generate a router file from annotated controller classes."""
from __future__ import annotations

from routegen.runner import main

if __name__ == "__main__":
    raise SystemExit(main())
