import argparse
import json
import logging
import sys

from .analyzer import LogAnalyzer
from .reader import LogReaderError

logger = logging.getLogger(__name__)


def main(argv=None):
    p = argparse.ArgumentParser(description="Hourly, daily and monthly web access statistics")
    p.add_argument("--file", "-f", help="Path to log file (.gz allowed, '-' for stdin); defaults to the bundled sample")
    p.add_argument("--hourly", action="store_true", help="Print the hourly counts table")
    p.add_argument("--monthly", action="store_true", help="Print the monthly counts table")
    p.add_argument("--json", action="store_true", help="Output JSON summary")
    p.add_argument("--verbose", "-v", action="store_true", help="Log debug details to stderr")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("access_stats").setLevel(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        summary = LogAnalyzer(args.file).analyze()
    except (LogReaderError, OSError) as exc:
        logger.error("cannot analyse %s: %s", args.file or "sample log", exc)
        return 1

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
        return 0

    print(f"Total accesses: {summary.total}")
    print(f"Busiest hour: {summary.busiest_hour()}")
    print(f"Quietest hour: {summary.quietest_hour()}")
    print(f"Busiest two hours from: {summary.busiest_two_hour()}")
    print(f"Busiest day: {summary.busiest_day()}")
    print(f"Quietest day: {summary.quietest_day()}")
    print(f"Busiest month: {summary.busiest_month()}")
    print(f"Quietest month: {summary.quietest_month()}")
    if args.hourly:
        summary.print_hourly_counts()
    if args.monthly:
        summary.print_monthly_counts()
    return 0


if __name__ == "__main__":
    sys.exit(main())
