"""Package command-line entrypoint.

Enables running the application with:

    python -m vibecode_pulse

or, once installed (via the console-script declared in *pyproject.toml*), simply:

    vibecode-pulse
"""

from __future__ import annotations

import sys

from .main import main


def _run() -> None:  # pragma: no cover - thin wrapper
    """Invoke :pyfunc:`vibecode_pulse.main.main`."""

    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    _run()
