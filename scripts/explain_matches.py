#!/usr/bin/env python3
"""
Explain ranked matches for a request.

Run: python scripts/explain_matches.py {flight_companion|pickup} REQUEST_ID [--max-results 10] [--json]

Prints each ranked offer with its factor breakdown, bonuses and
recommendation reason. With --json, prints the scoring breakdown payloads.

Exit codes:
  0 - Matches listed (possibly none)
  1 - Request not found
  2 - Database not configured
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import app.database as database
from app.services.match_repository import SqlAlchemyMatchRepository
from app.services.matching import RequestNotFoundError
from app.services.matching.snapshots import ServiceType
from app.services.matching_engine import DEFAULT_MAX_RESULTS, MatchingEngine


def format_results(service_type: ServiceType, request_id: int, results) -> str:
    """
    Format ranked matches as human-readable text

    Args:
        service_type: Service the request belongs to
        request_id: Request that was matched
        results: Ranked MatchResult list from MatchingEngine

    Returns:
        Formatted report string
    """
    lines = []
    lines.append("=" * 80)
    lines.append(f"{service_type.value.upper().replace('_', ' ')} MATCHES FOR REQUEST {request_id}")
    lines.append("=" * 80)

    if not results:
        lines.append("No matches (request already matched, or no eligible offers).")
        lines.append("=" * 80)
        return "\n".join(lines)

    for result in results:
        details = result.scoring_details
        lines.append("")
        lines.append(f"#{details['rank']}  Offer {result.offer.id} (provider {result.offer.user_id})")
        lines.append("-" * 80)
        for name, factor in details["factors"].items():
            lines.append(
                f"  {name:<20} {factor['score']:>7.2f} x {factor['weight']:.2f} = {factor['weighted_score']:>7.2f}"
            )
        lines.append(f"  {'weighted':<20} {details['weighted_score']:>7.2f}")
        bonuses = ", ".join(details["bonuses_applied"]) or "none"
        lines.append(f"  {'bonuses':<20} {bonuses}")
        lines.append(f"  {'overall':<20} {details['overall_score']:>7.2f}")
        lines.append(f"  Reason: {result.recommendation_reason}")

    lines.append("")
    lines.append("=" * 80)
    return "\n".join(lines)


def main():
    """Explain script entry point"""
    parser = argparse.ArgumentParser(description="Show ranked matches and their scoring breakdown")
    parser.add_argument(
        "service_type",
        choices=[service_type.value for service_type in ServiceType],
        help="Marketplace service the request belongs to"
    )
    parser.add_argument("request_id", type=int, help="Request ID to match")
    parser.add_argument(
        "--max-results",
        type=int,
        default=DEFAULT_MAX_RESULTS,
        help=f"Maximum offers to show (default: {DEFAULT_MAX_RESULTS})"
    )
    parser.add_argument("--json", action="store_true", help="Print scoring breakdowns as JSON")
    args = parser.parse_args()

    database.init_db()
    if database.SessionLocal is None:
        print("ERROR: Database not configured. Set DATABASE_URL environment variable.")
        sys.exit(2)

    service_type = ServiceType(args.service_type)
    db = database.SessionLocal()
    try:
        engine = MatchingEngine(SqlAlchemyMatchRepository(db))
        if service_type == ServiceType.FLIGHT_COMPANION:
            results = engine.find_flight_companion_matches(args.request_id, args.max_results)
        else:
            results = engine.find_pickup_matches(args.request_id, args.max_results)
    except RequestNotFoundError as e:
        print(f"ERROR: {e}")
        sys.exit(1)
    finally:
        db.close()

    if args.json:
        print(json.dumps([result.scoring_details for result in results], indent=2))
    else:
        print(format_results(service_type, args.request_id, results))


if __name__ == "__main__":
    main()
