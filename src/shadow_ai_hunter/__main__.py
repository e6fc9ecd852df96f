"""Module entrypoint.

Allows:
    python -m shadow_ai_hunter --file access.log
"""

from __future__ import annotations

from shadow_ai_hunter.cli import main

if __name__ == "__main__":
    main()
