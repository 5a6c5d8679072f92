from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CompacterConfig:
    # Work stack starts with this many slots and grows by the same amount
    stack_unit: int = 2048
    # Hard cap on pending sub-ranges, None for no cap
    max_stack_items: Optional[int] = None

    def __post_init__(self) -> None:
        if self.stack_unit < 1:
            raise ValueError(f"stack_unit must be >= 1, got {self.stack_unit}")
        if self.max_stack_items is not None and self.max_stack_items < 1:
            raise ValueError(f"max_stack_items must be >= 1, got {self.max_stack_items}")
