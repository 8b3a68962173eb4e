"""Strategies deciding whether a transaction touched a given package."""

import json
from typing import Any, Callable

InteractionDetector = Callable[[dict[str, Any], str], bool]


def _normalize_id(object_id: str) -> str:
    """Lowercase hex id with leading zeros stripped, so 0x02 matches 0x2."""
    value = object_id.lower()
    if value.startswith("0x"):
        value = value[2:]
    return value.lstrip("0") or "0"


def substring_detector(transaction: dict[str, Any], package_id: str) -> bool:
    """
    Match if the package id appears anywhere in the serialized record.

    This is a coarse heuristic: it also matches ids that only show up in
    inputs, events or object types of unrelated calls.
    """
    return package_id in json.dumps(transaction)


def move_call_detector(transaction: dict[str, Any], package_id: str) -> bool:
    """Match only if a MoveCall command in the transaction targets the package."""
    kind = (
        transaction.get("transaction", {})
        .get("data", {})
        .get("transaction", {})
    )
    if kind.get("kind") != "ProgrammableTransaction":
        return False

    target = _normalize_id(package_id)
    for command in kind.get("transactions", []):
        move_call = command.get("MoveCall") if isinstance(command, dict) else None
        if move_call and _normalize_id(move_call.get("package", "")) == target:
            return True
    return False


DETECTORS: dict[str, InteractionDetector] = {
    "substring": substring_detector,
    "move_call": move_call_detector,
}


def get_detector(name: str) -> InteractionDetector:
    """Look up a detection strategy by name."""
    try:
        return DETECTORS[name]
    except KeyError:
        raise ValueError(
            f"Unknown detection strategy: {name} (expected one of {', '.join(DETECTORS)})"
        )
