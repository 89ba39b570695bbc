"""Pure editing operations for function sets and expression text.

Nothing here holds state: the function list, the target id and the
caret position are always passed in, and new values are returned.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from .config import FUNCTION_NAMES, PALETTE
from .types import FunctionDefinition, ValidationError

# Keypad label -> (text to insert, caret offset from the end of the insertion)
KEY_INSERTIONS: dict[str, tuple[str, int]] = {
    "x²": ("^2", 0),
    "x^y": ("^", 0),
    "√": ("sqrt()", -1),
    "|a|": ("||", -1),
    "÷": ("/", 0),
    "×": ("*", 0),
    "−": ("-", 0),
}

DELETE_KEY = "DEL"
LEFT_KEY = "←"
RIGHT_KEY = "→"
ENTER_KEY = "ENTER"


def function_name(function_id: int) -> str:
    """Display name for a function slot: f(x), g(x), ... then f7(x), f8(x)."""
    if 1 <= function_id <= len(FUNCTION_NAMES):
        return f"{FUNCTION_NAMES[function_id - 1]}(x)"
    return f"f{function_id}(x)"


def function_color(function_id: int) -> str:
    return PALETTE[(function_id - 1) % len(PALETTE)]


def new_function_set() -> list[FunctionDefinition]:
    """The set a session starts with: a single empty f(x)."""
    return [FunctionDefinition(1, function_name(1), "", function_color(1))]


def add_function(
    definitions: Sequence[FunctionDefinition], raw_expression: str = ""
) -> list[FunctionDefinition]:
    """Return ``definitions`` plus a new slot with the next free id."""
    next_id = max((d.id for d in definitions), default=0) + 1
    added = FunctionDefinition(next_id, function_name(next_id), raw_expression, function_color(next_id))
    return [*definitions, added]


def find_function(definitions: Sequence[FunctionDefinition], target_id: int) -> FunctionDefinition:
    for definition in definitions:
        if definition.id == target_id:
            return definition
    raise ValidationError(f"No function with id {target_id}", "UNKNOWN_FUNCTION")


def update_function(
    definitions: Sequence[FunctionDefinition],
    target_id: int,
    raw_expression: str | None = None,
    color: str | None = None,
) -> list[FunctionDefinition]:
    """Return a copy of ``definitions`` with the target's text and/or color changed.

    Raises:
        ValidationError: If no definition has ``target_id``
    """
    find_function(definitions, target_id)
    changes = {}
    if raw_expression is not None:
        changes["raw_expression"] = raw_expression
    if color is not None:
        changes["color"] = color
    return [replace(d, **changes) if d.id == target_id else d for d in definitions]


@dataclass(frozen=True)
class EditState:
    """Expression text plus caret position."""

    text: str = ""
    cursor: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "cursor", max(0, min(self.cursor, len(self.text))))


def insert_at_cursor(state: EditState, insertion: str, selection_end: int | None = None) -> EditState:
    """Replace the selection [cursor, selection_end) with ``insertion``.

    The caret ends up right after the inserted text.
    """
    start = state.cursor
    end = start if selection_end is None else max(start, min(selection_end, len(state.text)))
    text = state.text[:start] + insertion + state.text[end:]
    return EditState(text, start + len(insertion))


def press_key(state: EditState, label: str, selection_end: int | None = None) -> EditState:
    """Apply a keypad press to ``state``.

    DEL removes the last character of the text (not the one before the
    caret). ENTER is left to the caller, which triggers the plot.
    """
    if label == DELETE_KEY:
        return EditState(state.text[:-1], state.cursor)
    if label == LEFT_KEY:
        return EditState(state.text, state.cursor - 1)
    if label == RIGHT_KEY:
        return EditState(state.text, state.cursor + 1)
    if label == ENTER_KEY:
        return state
    insertion, offset = KEY_INSERTIONS.get(label, (label, 0))
    inserted = insert_at_cursor(state, insertion, selection_end)
    return EditState(inserted.text, inserted.cursor + offset)
