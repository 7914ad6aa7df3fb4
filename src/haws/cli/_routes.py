"""``haws routes`` — list registered routes.

Prints every route in match order with its handler name. The fallback
route is listed last and marked, whether or not it was registered last.
"""

import argparse

from haws.cli._resolve import resolve_or_exit


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for a haws app."""
    app = resolve_or_exit(args.app)

    routes = app.routes
    if not routes:
        print("No routes registered.")
        return

    # Build rows: (path, handler_name, role); fallback last
    rows: list[tuple[str, str, str]] = []
    fallback_rows: list[tuple[str, str, str]] = []
    for route in routes:
        handler_name = getattr(route.handler, "__name__", str(route.handler))
        if route.is_fallback:
            fallback_rows.append((repr(route.path), handler_name, "fallback"))
        else:
            rows.append((repr(route.path), handler_name, ""))
    rows.extend(fallback_rows)

    max_path = max(max(len(r[0]) for r in rows), 4)  # "PATH" header
    max_handler = max(max(len(r[1]) for r in rows), 7)  # "HANDLER" header

    fmt = f"{{:<{max_path}}}  {{:<{max_handler}}}  {{}}"
    print(fmt.format("PATH", "HANDLER", "ROLE").rstrip())
    print("-" * min(max_path + max_handler + 12, 80))
    for path, handler_name, role in rows:
        print(fmt.format(path, handler_name, role).rstrip())

    if not fallback_rows:
        print('\nWarning: no fallback route (".") registered; the app will not start.')
