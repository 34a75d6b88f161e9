from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Overlay chrome measurements, in canvas pixels.
TOP_BAR_HEIGHT = 44.0
BOTTOM_BAR_HEIGHT = 56.0
SHEET_HEADER_HEIGHT = 34.0
SHEET_ROW_HEIGHT = 56.0
SHEET_MAX_HEIGHT_FRACTION = 0.40
SPACING_SM = 8.0
SPACING_LG = 16.0


@dataclass(frozen=True)
class PlanMode:
    """Browse the plan (room_id None) or focus a single room."""

    room_id: Optional[str] = None

    @property
    def is_room(self) -> bool:
        return self.room_id is not None

    @classmethod
    def browse(cls) -> "PlanMode":
        return cls()

    @classmethod
    def room(cls, room_id: str) -> "PlanMode":
        return cls(room_id)


@dataclass(frozen=True)
class RoomSheetLayout:
    """Sizes the room item sheet and the insets used to frame a focused room."""

    safe_top: float
    safe_bottom: float
    screen_height: float

    def sheet_height(self, item_count: int) -> float:
        available = (
            self.screen_height - self.safe_top - self.safe_bottom - SPACING_LG
            - TOP_BAR_HEIGHT - BOTTOM_BAR_HEIGHT - SPACING_SM * 2
        )
        max_height = available * SHEET_MAX_HEIGHT_FRACTION
        rows = max(1, item_count)
        padding = SPACING_LG * 2 + SPACING_SM
        content = SHEET_HEADER_HEIGHT + rows * SHEET_ROW_HEIGHT + padding
        min_height = SHEET_HEADER_HEIGHT + SHEET_ROW_HEIGHT + padding
        return min(max_height, max(min_height, content))

    @property
    def top_inset(self) -> float:
        return self.safe_top + TOP_BAR_HEIGHT

    def bottom_inset(self, item_count: int) -> float:
        return (
            self.safe_bottom + SPACING_LG + self.sheet_height(item_count)
            + BOTTOM_BAR_HEIGHT + SPACING_SM
        )
