from dataclasses import dataclass, field
from datetime import date

from ..domain.entities import Notice


@dataclass(frozen=True)
class PurgeResult:
    removed: int

    @property
    def nothing_removed(self) -> bool:
        return self.removed == 0

    @property
    def message(self) -> str:
        if self.nothing_removed:
            return "No old notices exist."
        return f"Old notices deleted successfully. {self.removed} notices removed."


@dataclass(frozen=True)
class BoardNotice:
    notice: Notice
    can_delete: bool


@dataclass(frozen=True)
class DayBucket:
    day: date
    is_today: bool
    can_post: bool
    notices: list[BoardNotice] = field(default_factory=list)
