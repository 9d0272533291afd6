"""Entry point: python -m bhombuilder

Lists the schema repository, generates bhom models into --dir.
"""

from __future__ import annotations

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
