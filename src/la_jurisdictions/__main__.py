import argparse
import json
import logging
import sys
from pathlib import Path

from la_jurisdictions.config import get_settings
from la_jurisdictions.geometry_store import LayerState
from la_jurisdictions.info_panel import render_resolution
from la_jurisdictions.map_surface import render_html
from la_jurisdictions.registry import get_resolver, get_search, get_store
from la_jurisdictions.session import MapSession


def _load_layers(log_json):
    statuses = get_store().load_all_blocking()
    if log_json:
        for status in statuses:
            print(json.dumps(status.to_dict()))
    return statuses


def _print_resolution(result):
    for res in result:
        print(f"{res.label}: {res.status.value}")
        if res.feature is not None:
            name = res.feature.name or res.feature.representative
            print(f"  {name} (#{res.feature.district}) {res.feature.website}")


def cmd_resolve(args):
    _load_layers(args.log_json)
    try:
        result = get_resolver().resolve(args.lat, args.lon)
    except ValueError as e:
        print(json.dumps({"error": str(e)}))
        return 2
    if args.json:
        print(
            json.dumps(
                {
                    "lat": result.lat,
                    "lon": result.lon,
                    "layers": [
                        {
                            "kind": r.kind.value,
                            "label": r.label,
                            "status": r.status.value,
                            "html": render_resolution(r),
                        }
                        for r in result
                    ],
                }
            )
        )
    else:
        _print_resolution(result)
    return 0


def cmd_search(args):
    _load_layers(args.log_json)
    outcome = get_search().search(" ".join(args.query))
    if args.json:
        print(json.dumps(outcome.to_dict()))
        return 0
    if outcome.status != "found":
        print(f"No location ({outcome.status})")
        return 1
    print(f"{outcome.location.display_name} ({outcome.location.lat}, {outcome.location.lon})")
    _print_resolution(outcome.result)
    return 0


def cmd_render(args):
    statuses = _load_layers(args.log_json)
    store = get_store()
    session = MapSession(store=store, search_zoom=get_settings().search_zoom)
    output = Path(args.output)
    output.write_text(render_html(session, store, resolve_url=args.resolve_url), encoding="utf-8")
    failed = [s.label for s in statuses if s.state is LayerState.FAILED]
    print(f"Wrote {output}")
    if failed:
        print(f"Unavailable layers: {', '.join(failed)}")
    return 0


def cmd_layers(args):
    statuses = _load_layers(False)
    for status in statuses:
        if args.json:
            print(json.dumps(status.to_dict()))
        else:
            line = f"{status.label}: {status.state.value} ({status.feature_count} features)"
            if status.error:
                line += f" - {status.error}"
            print(line)
    return 0


def cmd_serve(args):
    import uvicorn

    uvicorn.run(
        "la_jurisdictions.api.app:app",
        host=args.host,
        port=args.port,
        log_level=(args.log_level or "info").lower(),
    )
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="la_jurisdictions",
        description="Greater Los Angeles political jurisdictions map",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, etc.)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit one JSON line per layer after loading",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("resolve", help="List the districts containing a point")
    p.add_argument("--lat", type=float, required=True)
    p.add_argument("--lon", type=float, required=True)
    p.add_argument("--json", action="store_true", help="Print JSON instead of text")
    p.set_defaults(func=cmd_resolve)

    p = sub.add_parser("search", help="Geocode an address and list its districts")
    p.add_argument("query", nargs="+")
    p.add_argument("--json", action="store_true", help="Print JSON instead of text")
    p.set_defaults(func=cmd_search)

    p = sub.add_parser("render", help="Write the interactive map to an HTML file")
    p.add_argument("--output", default="la_jurisdictions.html")
    p.add_argument(
        "--resolve-url",
        default=None,
        help="Resolve endpoint the search box should call (omit for a static page)",
    )
    p.set_defaults(func=cmd_render)

    p = sub.add_parser("layers", help="Load every layer and report its state")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_layers)

    p = sub.add_parser("serve", help="Run the web app")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.set_defaults(func=cmd_serve)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=(args.log_level or "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return args.func(args)


def _safe_main():
    try:
        code = main()
    except SystemExit:
        raise
    except Exception as exc:
        print(json.dumps({"error": str(exc)}))
        raise SystemExit(1)
    raise SystemExit(code)


if __name__ == "__main__":
    _safe_main()
