"""
Planner participants: one invitee's ability to contribute, with every default resolved up front.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Set, Tuple

from cookout.config import settings

STATUS_PENDING = "pending"


def _clamp(value: Any, low: int, high: int, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = default
    return max(low, min(number, high))


def clamp_max_items_per_person(value: Any) -> int:
    """Request-level default capacity; 3 when absent, clamped to the per-request limit."""
    default = settings.default_max_items_per_person
    return _clamp(value, 0, settings.max_items_per_person_limit, default)


@dataclass(frozen=True)
class Participant:
    username: str
    status: str = STATUS_PENDING
    can_bring: bool = True
    max_items: int = 0
    # Ordered: the first matching entry is quoted in explanations.
    pantry_ingredients: Tuple[str, ...] = ()

    @property
    def is_eligible(self) -> bool:
        return self.can_bring and self.max_items > 0

    @classmethod
    def from_record(
        cls,
        username: str,
        status: Optional[str],
        pantry_ingredients: Iterable[str],
        default_max_items: int,
        override: Optional[Mapping[str, Any]] = None,
    ) -> "Participant":
        override = override or {}
        can_bring = override.get("can_bring")
        max_items = override.get("max_items")
        if max_items is None:
            max_items = default_max_items
        return cls(
            username=username,
            status=status or STATUS_PENDING,
            can_bring=True if can_bring is None else bool(can_bring),
            max_items=_clamp(max_items, 0, settings.participant_max_items_limit, default_max_items),
            pantry_ingredients=tuple(dict.fromkeys(pantry_ingredients)),
        )


def build_participants(
    rows: Iterable[Tuple[str, Optional[str]]],
    pantry_by_user: Mapping[str, Iterable[str]],
    default_max_items: int,
    overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> List[Participant]:
    """
    rows: (username, status) pairs as stored for the invitation.
    pantry_by_user: username -> pantry food names in load order.
    overrides: username -> {can_bring, max_items, ...}; other keys are ignored.
    """
    overrides = overrides or {}
    out: List[Participant] = []
    seen: Set[str] = set()
    for username, status in rows:
        if not username or username in seen:
            continue
        seen.add(username)
        out.append(
            Participant.from_record(
                username=username,
                status=status,
                pantry_ingredients=pantry_by_user.get(username, ()),
                default_max_items=default_max_items,
                override=overrides.get(username),
            )
        )
    return out
