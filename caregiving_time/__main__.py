"""Module entry point: python -m caregiving_time ..."""

from __future__ import annotations

from caregiving_time.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
