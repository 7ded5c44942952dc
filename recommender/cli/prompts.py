"""Terminal prompts with a bounded number of retries."""
from __future__ import annotations

from ..engine.constraints import UNCONSTRAINED, Constraint, describe, number_constraint, parse_set_constraint

MAX_ATTEMPTS = 3
KEEP_TOKEN = "-"


def ask(prompt: str) -> str:
    return input(prompt).strip()


def ask_yes_no(prompt: str) -> bool:
    return ask(prompt).lower() in {"y", "yes"}


def _parse_number(raw: str, integer: bool) -> float | int:
    return int(raw) if integer else float(raw)


def ask_number(
    prompt: str,
    *,
    default: float | int | None = None,
    minimum: float | None = None,
    maximum: float | None = None,
    integer: bool = False,
    attempts: int = MAX_ATTEMPTS,
) -> float | int | None:
    """Ask for a number within bounds.

    Blank input returns ``default``. Invalid input is re-asked; after
    ``attempts`` failures ``default`` is returned.
    """
    for _ in range(attempts):
        raw = ask(prompt)
        if not raw:
            return default
        try:
            value = _parse_number(raw, integer)
        except ValueError:
            print("Please enter a number.")
            continue
        if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
            print(f"Please enter a value between {minimum} and {maximum}.")
            continue
        return value
    print("Too many invalid attempts; keeping the current value.")
    return default


def ask_set_constraint(label: str, current: Constraint, unset_label: str = "Any") -> Constraint:
    """Comma-separated input; blank clears the field, ``-`` keeps it."""
    raw = ask(f"{label} (comma-separated, Enter for {unset_label}, '-' to keep: {describe(current, unset_label)}): ")
    if raw == KEEP_TOKEN:
        return current
    return parse_set_constraint(raw)


def ask_number_constraint(
    label: str,
    current: Constraint,
    *,
    minimum: float | None = None,
    maximum: float | None = None,
    integer: bool = True,
    attempts: int = MAX_ATTEMPTS,
) -> Constraint:
    """Optional numeric bound; blank clears the field, ``-`` keeps it."""
    prompt = f"{label} (Enter for none, '-' to keep: {describe(current, 'none')}): "
    for _ in range(attempts):
        raw = ask(prompt)
        if raw == KEEP_TOKEN:
            return current
        if not raw:
            return UNCONSTRAINED
        try:
            value = _parse_number(raw, integer)
        except ValueError:
            print("Please enter a number.")
            continue
        if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
            print(f"Please enter a value between {minimum} and {maximum}.")
            continue
        return number_constraint(value)
    print("Too many invalid attempts; keeping the current value.")
    return current


def ask_menu_index(prompt: str, size: int) -> int | None:
    """1-based selection from a list of ``size`` items; ``None`` on cancel."""
    choice = ask_number(prompt, minimum=0, maximum=size, integer=True, default=0)
    if not choice:
        return None
    return int(choice) - 1
