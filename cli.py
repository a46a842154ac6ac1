import argparse
import json
import sys
from typing import List, Optional

from dotenv import load_dotenv

from api.services.aspects import aspect_definitions
from api.services.chart import calculate_chart, to_record
from api.services.config import get_config


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Compute a birth chart and print it as JSON.")
    parser.add_argument("date", help="Birth date, YYYY-MM-DD")
    parser.add_argument("time", help="Birth time, HH:MM (24h, local)")
    parser.add_argument("place", help='Birth place, e.g. "Miami, FL, USA"')
    parser.add_argument("--house-system", default=None, help="One-letter house system code (default: P)")
    parser.add_argument("--extended-aspects", action="store_true", help="Include Quincunx, Semi-Square and Semi-Sextile")
    args = parser.parse_args(argv)
    try:
        config = get_config()
    except ValueError as exc:
        parser.error(str(exc))

    aspects = aspect_definitions("extended") if args.extended_aspects else None
    outcome = calculate_chart(args.date, args.time, args.place, args.house_system, config=config, aspects=aspects)
    if outcome.error is not None:
        print(json.dumps(outcome.error.to_dict(), ensure_ascii=False), file=sys.stderr)
        return 1
    print(json.dumps(to_record(outcome.chart), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    load_dotenv()
    sys.exit(main())
