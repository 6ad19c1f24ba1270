"""
Data models for assignment records and collaboration results.

Plain frozen dataclasses: records are built once by the parser and never
mutated. The API layer converts them to Pydantic response models.
"""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class AssignmentInterval:
    """One CSV row: an employee's tenure on a project."""

    employee_id: int
    project_id: int
    start_date: date
    end_date: date | None = None  # None = still active

    def effective_end(self, today: date) -> date:
        return self.end_date if self.end_date is not None else today

    def total_days(self, today: date) -> int:
        """Inclusive number of days on the project."""
        return (self.effective_end(today) - self.start_date).days + 1


@dataclass(frozen=True)
class Overlap:
    """Inclusive date range two employees shared on one project."""

    project_id: int
    employee1_id: int
    employee2_id: int
    overlap_start: date
    overlap_end: date

    @property
    def days(self) -> int:
        return (self.overlap_end - self.overlap_start).days + 1


@dataclass(frozen=True)
class PairResult:
    """The pair of employees who worked together the longest."""

    employee1_id: int
    employee2_id: int
    total_days_worked_together: int
    common_projects: list[Overlap] = field(default_factory=list)

    def summary(self) -> str:
        """Format as 'employee1, employee2, days'."""
        return f"{self.employee1_id}, {self.employee2_id}, {self.total_days_worked_together}"
