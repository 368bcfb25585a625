"""Console entry point: ``ghostwriter [path] [--debug]``."""
from __future__ import annotations

from ghostwriter.app import GhostwriterApplication


def main(argv: list[str] | None = None) -> int:
    return GhostwriterApplication(argv).run()


if __name__ == "__main__":
    raise SystemExit(main())
