"""
Validation module interface.

Forms depend on IValidationEngine, not the concrete validator.
"""

from typing import Callable, Protocol, runtime_checkable

from .models import ValidationState

StateListener = Callable[[ValidationState], None]


@runtime_checkable
class IValidationEngine(Protocol):
    """
    Turns a changing text value into a debounced, race-free verdict.
    """

    def on_input_changed(self, value: str) -> None:
        """
        Accept the latest candidate.

        Never performs remote work synchronously. Must be called from a
        running event loop.
        """
        ...

    def current_state(self) -> ValidationState:
        """Return the verdict for the most recent input."""
        ...

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called with every new state.

        Returns:
            A callable that removes the listener
        """
        ...

    def close(self) -> None:
        """Cancel pending work; no further transitions are published."""
        ...
