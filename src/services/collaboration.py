"""
Collaboration Analysis Service

Finds the pair of employees who worked together on common projects for the
longest time. Records are grouped by project, every pair inside a project is
checked for an overlapping date range, and the overlaps of each pair are
merged across projects so that days spent together on two projects at once
are only counted once.

A pair's total is the length of its longest merged block of consecutive days.
"""

from collections import defaultdict
from datetime import date, timedelta

from core.errors import AnalysisError
from models.assignments import AssignmentInterval, Overlap, PairResult


ONE_DAY = timedelta(days=1)


# =============================================================================
# OVERLAPS
# =============================================================================


def canonical_pair(employee_a: int, employee_b: int) -> tuple[int, int]:
    """Order a pair of employee ids smaller-first."""
    return (employee_a, employee_b) if employee_a < employee_b else (employee_b, employee_a)


def calculate_overlap(
    first: AssignmentInterval, second: AssignmentInterval, today: date
) -> Overlap | None:
    """Return the shared date range of two records on the same project, if any."""
    if first.project_id != second.project_id:
        return None
    if first.employee_id == second.employee_id:
        return None

    overlap_start = max(first.start_date, second.start_date)
    overlap_end = min(first.effective_end(today), second.effective_end(today))

    if overlap_start > overlap_end:
        return None

    employee1_id, employee2_id = canonical_pair(first.employee_id, second.employee_id)
    return Overlap(
        project_id=first.project_id,
        employee1_id=employee1_id,
        employee2_id=employee2_id,
        overlap_start=overlap_start,
        overlap_end=overlap_end,
    )


def find_overlaps_in_project(
    project_records: list[AssignmentInterval], today: date
) -> list[Overlap]:
    """Check every pair of records in one project group."""
    overlaps = []
    for i, first in enumerate(project_records):
        for second in project_records[i + 1:]:
            overlap = calculate_overlap(first, second, today)
            if overlap is not None and overlap.days > 0:
                overlaps.append(overlap)
    return overlaps


# =============================================================================
# MERGING
# =============================================================================


def merge_ranges(ranges: list[tuple[date, date]]) -> list[tuple[date, date]]:
    """
    Coalesce inclusive date ranges that overlap or touch.

    Ranges are merged when the next start is at most one day after the
    current end, so 1-10 Jan and 11-20 Jan become 1-20 Jan.
    """
    if not ranges:
        return []

    ordered = sorted(ranges, key=lambda r: r[0])
    merged = []
    current_start, current_end = ordered[0]

    for start, end in ordered[1:]:
        if start <= current_end + ONE_DAY:
            current_end = max(current_end, end)
        else:
            merged.append((current_start, current_end))
            current_start, current_end = start, end

    merged.append((current_start, current_end))
    return merged


def unique_days_worked_together(overlaps: list[Overlap]) -> int:
    """Length in days of the longest merged block among a pair's overlaps."""
    if not overlaps:
        return 0

    merged = merge_ranges([(o.overlap_start, o.overlap_end) for o in overlaps])
    return max((end - start).days + 1 for start, end in merged)


# =============================================================================
# ANALYSIS
# =============================================================================


def group_by_project(
    records: list[AssignmentInterval],
) -> dict[int, list[AssignmentInterval]]:
    """Group records by project id, keeping first-seen order."""
    groups: dict[int, list[AssignmentInterval]] = defaultdict(list)
    for record in records:
        groups[record.project_id].append(record)
    return groups


def collect_pair_overlaps(
    records: list[AssignmentInterval], today: date
) -> dict[tuple[int, int], list[Overlap]]:
    """Collect the overlaps of every canonical pair across all projects."""
    collaborations: dict[tuple[int, int], list[Overlap]] = defaultdict(list)

    for project_records in group_by_project(records).values():
        if len(project_records) < 2:
            continue
        for overlap in find_overlaps_in_project(project_records, today):
            key = (overlap.employee1_id, overlap.employee2_id)
            collaborations[key].append(overlap)

    return collaborations


def find_longest_collaborating_pair(
    records: list[AssignmentInterval], today: date | None = None
) -> PairResult:
    """
    Find the pair of employees with the most days worked together.

    Open-ended assignments run until ``today`` (defaults to the current date).
    Ties go to the smallest employee1_id, then the smallest employee2_id.

    Raises:
        AnalysisError: if there are fewer than 2 records or no pair overlaps
    """
    if records is None or len(records) < 2:
        raise AnalysisError("insufficient records: at least 2 employee records are required")

    if today is None:
        today = date.today()

    collaborations = collect_pair_overlaps(records, today)
    if not collaborations:
        raise AnalysisError(
            "no collaborating pairs: no employees worked together on common projects"
        )

    results = [
        PairResult(
            employee1_id=employee1_id,
            employee2_id=employee2_id,
            total_days_worked_together=unique_days_worked_together(overlaps),
            common_projects=overlaps,
        )
        for (employee1_id, employee2_id), overlaps in collaborations.items()
    ]

    return min(
        results,
        key=lambda r: (-r.total_days_worked_together, r.employee1_id, r.employee2_id),
    )
