"""
Ordered stage list for one enhancement run.

A pipeline is built fresh per run by build_pipeline() and consumed once by
the executor; stages run in insertion order.
"""

from dataclasses import dataclass, field
from typing import List

from .filters import ProcessingFilter


@dataclass
class ProcessingPipeline:
    """Sequence of stage descriptors with their progress milestones."""

    filters: List[ProcessingFilter] = field(default_factory=list)
    enabled: bool = True
    name: str = ""

    def add_filter(self, filter: ProcessingFilter) -> None:
        """Append a stage; its order is its position."""
        filter.order = len(self.filters)
        self.filters.append(filter)

    def validate(self) -> tuple[bool, List[str]]:
        """
        Check every stage's parameters and the milestone sequence.

        Milestones must lie in 0-100 and never decrease along the enabled
        stages. Returns (is_valid, errors).
        """
        errors = []
        for filter in self.filters:
            is_valid, filter_errors = filter.validate_parameters()
            if not is_valid:
                errors.extend(f"Stage {filter.order} ({filter.name}): {e}" for e in filter_errors)

        previous = -1
        for filter in self.get_enabled_filters():
            if filter.milestone is None:
                continue
            if not 0 <= filter.milestone <= 100 or filter.milestone < previous:
                errors.append(
                    f"Stage {filter.order} ({filter.name}): milestone {filter.milestone} "
                    f"must be within 0-100 and not below {max(previous, 0)}"
                )
            previous = max(previous, filter.milestone)
        return len(errors) == 0, errors

    def is_empty(self) -> bool:
        return len(self.filters) == 0

    def get_enabled_filters(self) -> List[ProcessingFilter]:
        """Enabled stages in execution order."""
        if not self.enabled:
            return []
        return [f for f in self.filters if f.enabled]

    def filter_ids(self) -> List[str]:
        """IDs of the enabled stages, in execution order."""
        return [f.filter_id for f in self.get_enabled_filters()]

    def milestones(self) -> List[int]:
        """Progress values the enabled stages will report, in order."""
        return [f.milestone for f in self.get_enabled_filters() if f.milestone is not None]

    def __len__(self) -> int:
        return len(self.filters)
