#!/usr/bin/env python3
"""CapyTimer — entry point.

Run with:
    python main.py run --focus 25m --break 5m --loops 4
    python -m capytimer run
"""

from capytimer.__main__ import main


if __name__ == "__main__":
    main()
