"""Domain models for the missed-day tracker."""

from dataclasses import dataclass

X_STATE = "X"
DOT_STATE = "dot"


@dataclass(frozen=True)
class TogglePrompt:
    """Confirmation shown before flipping today's state."""

    day_index: int
    current_state: str
    target_state: str

    @property
    def day_number(self) -> int:
        return self.day_index + 1

    @property
    def title(self) -> str:
        return "toggle today"

    @property
    def message(self) -> str:
        return (
            f"day {self.day_number} is currently: {self.current_state}\n"
            "what would you like to change it to?"
        )

    @property
    def actions(self) -> list[str]:
        return [f"change to {self.target_state}", f"keep as {self.current_state}"]


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of toggling a single day."""

    day_index: int
    is_x: bool
    x_days: list[int]

    @property
    def state(self) -> str:
        return X_STATE if self.is_x else DOT_STATE
