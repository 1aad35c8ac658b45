from __future__ import annotations

from releasenotes.cli import main

raise SystemExit(main())
