#!/usr/bin/env python3
"""
Find the pair of employees who worked together the longest from a CSV file.

Reads rows of EmployeeID, ProjectID, DateFrom, DateTo and prints the winning
pair, either as a one-line summary or with the overlap on each common project.

Usage:
    uv run python src/scripts/analyze_csv.py <input_file.csv> [--format simple|detail]

Example:
    uv run python src/scripts/analyze_csv.py data/assignments.csv --today 2024-06-30
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.errors import AnalysisError, ParseError
from services.collaboration import find_longest_collaborating_pair
from services.csv_parser import parse_assignments_bytes


def main():
    parser = argparse.ArgumentParser(
        description="Find the employee pair who worked together the longest"
    )
    parser.add_argument(
        "input_file",
        type=Path,
        help="Path to the assignments CSV file",
    )
    parser.add_argument(
        "--format",
        choices=["simple", "detail"],
        default="detail",
        help="Output format (default: detail)",
    )
    parser.add_argument(
        "--today",
        help="Date used for open-ended assignments (YYYY-MM-DD, default: today)",
    )

    args = parser.parse_args()

    today = None
    if args.today:
        try:
            today = datetime.strptime(args.today, "%Y-%m-%d").date()
        except ValueError:
            parser.error(f"Invalid --today date: {args.today}")

    if not args.input_file.exists():
        print(f"\nError: Input file not found: {args.input_file}", file=sys.stderr)
        sys.exit(1)

    try:
        records = parse_assignments_bytes(args.input_file.read_bytes())
        result = find_longest_collaborating_pair(records, today=today)
    except ParseError as e:
        print(f"\nCSV parsing error: {e}", file=sys.stderr)
        sys.exit(1)
    except AnalysisError as e:
        print(f"\nAnalysis error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.format == "simple":
        print(result.summary())
        return

    print(f"Parsed {len(records)} assignment records from {args.input_file}")
    print(
        f"\nEmployees {result.employee1_id} and {result.employee2_id} "
        f"worked together for {result.total_days_worked_together} days"
    )
    print("\nCommon projects:")
    for overlap in result.common_projects:
        print(
            f"  - Project {overlap.project_id}: "
            f"{overlap.overlap_start.isoformat()} to {overlap.overlap_end.isoformat()} "
            f"({overlap.days} days)"
        )


if __name__ == "__main__":
    main()
