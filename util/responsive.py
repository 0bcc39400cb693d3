from dataclasses import dataclass, field
from typing import Dict, List, Optional

# Minimum widths of the table view cells.
BASE_MIN_WIDTHS: Dict[str, int] = {
    'status': 7,
    'priority': 3,
    'created': 10,
    'project': 8,
    'context': 8,
    'meta': 8,
    'description': 16,
}
SHRINK_LIMITS: Dict[str, int] = {
    'status': 4,
    'priority': 1,
    'created': 10,
    'project': 4,
    'context': 4,
    'meta': 4,
    'description': 6,
}
FLEX_WEIGHTS: Dict[str, int] = {'description': 4, 'project': 1, 'context': 1, 'meta': 1}


@dataclass
class ColumnLayout:
    """Responsive table layout definition."""
    min_width: int
    columns: List[str]
    overrides: Dict[str, int] = field(default_factory=dict)

    def has_column(self, name: str) -> bool:
        return name in self.columns

    def _base_min_widths(self, desired: Optional[Dict[str, int]] = None) -> Dict[str, int]:
        result: Dict[str, int] = {}
        for col in self.columns:
            width = self.overrides.get(col, BASE_MIN_WIDTHS.get(col, 8))
            if desired and col in desired:
                width = max(width, desired[col])
            result[col] = max(1, width)
        return result

    def required_width(self, desired: Optional[Dict[str, int]] = None) -> int:
        widths = self._base_min_widths(desired)
        return sum(widths.values()) + len(self.columns) + 1

    def calculate_widths(self, term_width: int, desired: Optional[Dict[str, int]] = None) -> Dict[str, int]:
        """Compute column widths that fit into the terminal (one separator between cells and at each edge)."""
        separators = len(self.columns) + 1
        usable_width = max(len(self.columns), term_width - separators)
        widths = self._base_min_widths(desired)
        min_total = sum(widths.values())

        if min_total <= usable_width:
            remaining = usable_width - min_total
            flex_cols = [c for c in self.columns if c in FLEX_WEIGHTS] or list(self.columns)
            total_weight = max(1, sum(FLEX_WEIGHTS.get(c, 1) for c in flex_cols))
            distributed = 0
            for col in flex_cols:
                share = (remaining * FLEX_WEIGHTS.get(col, 1)) // total_weight
                widths[col] += share
                distributed += share
            leftover = remaining - distributed
            if leftover and flex_cols:
                widths[flex_cols[0]] += leftover
        else:
            deficit = min_total - usable_width
            while deficit > 0:
                progressed = False
                for col in self.columns:
                    if widths[col] > SHRINK_LIMITS.get(col, 2):
                        widths[col] -= 1
                        deficit -= 1
                        progressed = True
                        if deficit == 0:
                            break
                if not progressed:
                    break

        total = sum(widths.values()) + separators
        if total > term_width:
            overflow = total - term_width
            for col in reversed(self.columns):
                reducible = max(0, widths[col] - 1)
                if reducible <= 0:
                    continue
                take = min(reducible, overflow)
                widths[col] -= take
                overflow -= take
                if overflow == 0:
                    break

        return widths


ALL_COLUMNS = ['status', 'priority', 'created', 'project', 'context', 'meta', 'description']


class ResponsiveLayoutManager:
    """Picks which table columns to show for a terminal width; description is always kept."""

    LAYOUTS = [
        ColumnLayout(min_width=110, columns=list(ALL_COLUMNS), overrides={'project': 12, 'context': 10, 'meta': 12}),
        ColumnLayout(min_width=90, columns=list(ALL_COLUMNS)),
        ColumnLayout(min_width=72, columns=['status', 'priority', 'created', 'project', 'description']),
        ColumnLayout(min_width=50, columns=['status', 'priority', 'description']),
        ColumnLayout(min_width=0, columns=['priority', 'description'], overrides={'description': 8}),
    ]

    @classmethod
    def select_layout(cls, term_width: int) -> ColumnLayout:
        for layout in cls.LAYOUTS:
            effective_min = max(layout.min_width, layout.required_width())
            if term_width >= effective_min:
                return layout
        return cls.LAYOUTS[-1]
