"""``haws check`` — validate an app's route table without serving."""

import argparse

from haws.cli._resolve import resolve_or_exit


def run_check(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and validate it.

    Exits 1 with setup guidance when the fallback route is missing.
    """
    app = resolve_or_exit(args.app)
    app.check()
    print(f"OK: {len(app.routes)} routes, fallback registered.")
