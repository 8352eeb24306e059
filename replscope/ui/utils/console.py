#!/usr/bin/env python3
# replscope/ui/utils/console.py
from __future__ import annotations

import threading

# Single shared print mutex for all console output (writers and logging).
PRINT_MUTEX = threading.Lock()
