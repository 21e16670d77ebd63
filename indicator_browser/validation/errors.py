from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    message: str


class ValidationError(Exception):
    """Collects every problem found in one config instead of stopping at the first"""

    def __init__(self, issues: List[ValidationIssue]):
        self.issues = issues
        super().__init__("\n".join(f"{i.code}: {i.message}" for i in issues))

    @property
    def codes(self) -> List[str]:
        return [i.code for i in self.issues]
