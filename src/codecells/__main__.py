"""Allow ``python -m codecells``."""

from codecells.cli import main

raise SystemExit(main())
