#!/usr/bin/env python3
# replscope/__main__.py
from __future__ import annotations

import sys

from replscope.demo import GreeterScope
from replscope.interface import run_scope


def main() -> int:
    return run_scope(GreeterScope())


if __name__ == "__main__":
    sys.exit(main())
