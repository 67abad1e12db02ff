"""Command-line demo: rank a query against a localized breed picker list.

Example:
    RECENT_BACKEND=json python main.py "לבר" --pet-type dog --locale he --select dog-1
"""
import argparse
import sys

from picker.catalog import get_localized_breeds
from picker.config import settings
from picker.logging_config import setup_logging
from picker.pipelines.normalization import map_spans_to_original
from picker.pipelines.ranking import get_suggestions
from picker.recent import RecentSelectionsManager, recent_namespace
from picker.schemas import MatchSpan, RankingOptions


def render(name: str, spans: tuple[MatchSpan, ...]) -> str:
    """Wrap matched parts of ``name`` in brackets."""
    out = []
    cursor = 0
    for span in map_spans_to_original(name, spans):
        out.append(name[cursor:span.start])
        out.append(f"[{name[span.start:span.end]}]")
        cursor = span.end
    out.append(name[cursor:])
    return "".join(out)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=settings.app_name)
    parser.add_argument("query", nargs="?", default="", help="search text (empty lists everything)")
    parser.add_argument("--pet-type", default="dog")
    parser.add_argument("--locale", choices=["en", "he"], default="he")
    parser.add_argument("--limit", type=int, default=settings.ranking.limit, help="0 = no cap")
    parser.add_argument("--min-score", type=float, default=settings.ranking.min_score)
    parser.add_argument("--no-recent", action="store_true", help="ignore recent selections")
    parser.add_argument("--select", metavar="ID", help="record ID as selected before ranking")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()

    items = get_localized_breeds(args.pet_type, args.locale)
    recent = RecentSelectionsManager(recent_namespace(args.pet_type, args.locale))
    if args.select:
        recent.add_recent(args.select)

    options = RankingOptions(limit=args.limit, include_recent=not args.no_recent, min_score=args.min_score)
    matches = get_suggestions(args.query, items, recent.get_recent(), options)

    print(f"{settings.app_name} v{settings.version}: {len(matches)} of {len(items)} {args.pet_type} breeds")
    print("-" * 50)
    for rank, match in enumerate(matches, start=1):
        flags = [match.kind.value]
        if match.is_strong:
            flags.append("strong")
        if match.is_recent:
            flags.append("recent")
        print(f"{rank:>2}. {render(match.item.name, match.spans)}  ({match.score:g}, {', '.join(flags)})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
