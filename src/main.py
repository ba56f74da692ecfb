"""`python -m main` desde `src/` (p.ej. para empaquetar con PyInstaller)."""

from __future__ import annotations

import sys

# Las consolas de Windows (cp1252) no pueden imprimir los paneles de rich.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run  # noqa: E402

if __name__ == "__main__":
    run()
