from __future__ import annotations

from pathlib import Path

TEMPLATES_DIR: Path = Path(__file__).resolve().parent.parent / "templates"
