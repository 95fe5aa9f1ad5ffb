"""Run configuration - options collected from the command line and passed to every stage."""

from dataclasses import dataclass
from typing import Optional

# Destination naming schemes
LAYOUT_MONTH = 'month'  # 2021/3 - March
LAYOUT_DAY = 'day'      # 2021_03_15
LAYOUTS = (LAYOUT_MONTH, LAYOUT_DAY)

DEFAULT_OUTPUT_DIR = 'out'


@dataclass
class OrganizeOptions:
    dry_run: bool = False
    move: bool = False
    recursive: bool = False
    layout: str = LAYOUT_MONTH
    # Photos taken before this hour belong to the previous day
    day_start_hour: int = 0
    workers: Optional[int] = None

    def __post_init__(self):
        if self.layout not in LAYOUTS:
            raise ValueError(f"Unknown layout '{self.layout}', expected one of {', '.join(LAYOUTS)}")
        if not 0 <= self.day_start_hour <= 23:
            raise ValueError(f"day_start_hour must be between 0 and 23, got {self.day_start_hour}")

    @property
    def operation(self) -> str:
        return 'move' if self.move else 'copy'
