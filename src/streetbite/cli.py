"""
StreetBite CLI entrypoint.

This CLI is intended for quick local demos and debugging without the web UI.
It loads the configured catalog + live-location snapshots, overlays live locations,
and delegates to the search/rank/aggregate functions.
"""

from __future__ import annotations

import argparse
import json
import random
from typing import Any

from streetbite.catalog.loader import load_snapshot
from streetbite.catalog.merge import merge_live_locations
from streetbite.config.settings import get_settings
from streetbite.core.geo import GeoPoint
from streetbite.core.logging import configure_logging
from streetbite.domain.models import Vendor
from streetbite.proximity.search import all_of, is_available, matches_food_type, matches_search_term, search
from streetbite.quality.report import build_quality_report
from streetbite.recommender.rank import random_trending, rank, trending_food_types
from streetbite.scoring.explain import format_distance_km, one_line_summary
from streetbite.stats.aggregate import aggregate


def _origin(args: argparse.Namespace) -> GeoPoint | None:
    if args.lat is None and args.lon is None:
        return None
    if args.lat is None or args.lon is None:
        raise ValueError("--lat and --lon must be given together")
    return GeoPoint(latitude=float(args.lat), longitude=float(args.lon))


def _merged_catalog() -> list[Vendor]:
    vendors, reports = load_snapshot(get_settings())
    return merge_live_locations(vendors, reports)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _cmd_search(args: argparse.Namespace) -> int:
    settings = get_settings()
    catalog = _merged_catalog()
    predicate = all_of(
        matches_search_term(args.query),
        matches_food_type(args.food_type),
        is_available() if args.available_only else None,
    )
    radius = args.radius_km if args.radius_km is not None else settings.proximity.default_radius_km
    results = search(catalog, _origin(args), predicate=predicate, radius_km=radius, settings=settings.proximity)

    if args.json:
        _print_json([r.model_dump(mode="json", by_alias=True) for r in results])
        return 0
    if not results:
        print("No vendors found.")
        return 0
    for r in results:
        v = r.vendor
        status = "open" if v.availability else "closed"
        badge = " [verified]" if v.is_verified else ""
        print(f"- {v.name}{badge} ({v.food_type}, {status})  {format_distance_km(r.distance_km)}")
    return 0


def _cmd_recommend(args: argparse.Namespace) -> int:
    settings = get_settings()
    catalog = _merged_catalog()

    trending: set[str] = set(args.trending or [])
    if args.seed is not None:
        trending |= random_trending(catalog, random.Random(args.seed), settings=settings.ranking)

    results = rank(catalog, _origin(args), args.top_n, trending=trending, settings=settings.ranking)

    if args.json:
        _print_json([{**c.model_dump(mode="json", by_alias=True), "reason": c.reason} for c in results])
        return 0
    if not results:
        print("No recommendations available at the moment.")
        return 0
    for i, c in enumerate(results, start=1):
        print(f"{i:>2}. {c.vendor.name} ({c.vendor.food_type})  {one_line_summary(c)}")
        print(f"    {c.reason}")
    return 0


def _cmd_trending(args: argparse.Namespace) -> int:
    vendors, _ = load_snapshot(get_settings())
    foods = trending_food_types(vendors, args.limit)
    if args.json:
        _print_json(foods)
    else:
        for f in foods:
            print(f)
    return 0


def _cmd_stats(args: argparse.Namespace) -> int:
    vendors, _ = load_snapshot(get_settings())
    stats = aggregate(vendors)
    if args.json:
        _print_json(stats.as_dict())
        return 0
    print(f"Total vendors:     {stats.total_count}")
    print(f"Verified:          {stats.verified_count} ({stats.verified_ratio:.0%} of total)")
    print(f"Open now:          {stats.available_count}")
    print(f"Food types:        {stats.food_type_count}")
    for food, count in stats.category_histogram.items():
        print(f"  {food}: {count}")
    return 0


def _cmd_quality_report(_: argparse.Namespace) -> int:
    _print_json(build_quality_report(get_settings()))
    return 0


def _add_origin_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--lat", type=float, default=None, help="Origin latitude (decimal degrees)")
    p.add_argument("--lon", type=float, default=None, help="Origin longitude (decimal degrees)")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the StreetBite CLI."""
    parser = argparse.ArgumentParser(prog="streetbite")
    sub = parser.add_subparsers(dest="command", required=True)

    s = sub.add_parser("search", help="List vendors, nearest first when an origin is given.")
    _add_origin_args(s)
    s.add_argument("--query", type=str, default="", help="Substring of vendor name or food type")
    s.add_argument("--food-type", type=str, default=None, help="Exact food type ('all' for any)")
    s.add_argument("--radius-km", type=float, default=None)
    s.add_argument("--available-only", action="store_true")
    s.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    s.set_defaults(func=_cmd_search)

    rec = sub.add_parser("recommend", help="Rank open vendors by proximity, verification, and menu size.")
    _add_origin_args(rec)
    rec.add_argument("--top-n", type=int, default=None)
    rec.add_argument(
        "--trending", action="append", default=[], help="Repeatable. Vendor id or food type to boost."
    )
    rec.add_argument("--seed", type=int, default=None, help="Seed for a random trending boost")
    rec.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    rec.set_defaults(func=_cmd_recommend)

    t = sub.add_parser("trending", help="Distinct food types in catalog order.")
    t.add_argument("--limit", type=int, default=None)
    t.add_argument("--json", action="store_true")
    t.set_defaults(func=_cmd_trending)

    st = sub.add_parser("stats", help="Catalog statistics for operators.")
    st.add_argument("--json", action="store_true")
    st.set_defaults(func=_cmd_stats)

    q = sub.add_parser("quality-report", help="Offline data quality report for the catalog snapshot.")
    q.set_defaults(func=_cmd_quality_report)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m streetbite.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
