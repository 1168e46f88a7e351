from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set

from cookout.services.planning.ingredient_matching import find_first_match, normalize
from cookout.services.planning.participants import STATUS_PENDING, Participant

# Scoring terms for the greedy pick; lower total score wins.
PANTRY_MISS_PENALTY = 1000
LOAD_PENALTY = 10
PENDING_PENALTY = 3

MAX_EXPLANATION_LINES = 4

SOURCE_PANTRY = "pantry"
SOURCE_SHOPPING = "shopping"


@dataclass(frozen=True)
class RequiredIngredient:
    index: int
    name: str


@dataclass
class AssignedItem:
    ingredient_index: int
    ingredient_name: str
    source: str
    explanation: List[str] = field(default_factory=list)


@dataclass
class ShoppingItem:
    ingredient_index: int
    ingredient_name: str
    explanation: List[str] = field(default_factory=list)


@dataclass
class UnassignedItem:
    ingredient_index: int
    ingredient_name: str


@dataclass
class PlanMetrics:
    total: int
    already_covered: int
    assigned_from_pantry: int
    assigned_to_shopping: int
    coverage_pct: int


@dataclass
class Plan:
    assignments_by_user: Dict[str, List[AssignedItem]]
    shopping_list: List[ShoppingItem]
    metrics: PlanMetrics
    unassigned_due_to_capacity: List[UnassignedItem]

    def to_dict(self) -> dict:
        return asdict(self)


def required_ingredients(slots: Iterable[Optional[str]]) -> List[RequiredIngredient]:
    """Flatten recipe ingredient slots; blank slots are dropped and the rest numbered in order."""
    names = [s for s in slots if isinstance(s, str) and s.strip()]
    return [RequiredIngredient(index=i, name=name) for i, name in enumerate(names)]


def coverage_pct(numerator: int, denominator: int) -> int:
    """Percentage rounded half up; 100 when there is nothing to cover."""
    if denominator <= 0:
        return 100
    return (200 * numerator + denominator) // (2 * denominator)


def pick_score(has_pantry_match: bool, assigned_count: int, status: str) -> int:
    score = 0 if has_pantry_match else PANTRY_MISS_PENALTY
    score += LOAD_PENALTY * assigned_count
    if status == STATUS_PENDING:
        score += PENDING_PENALTY
    return score


def _name_key(name: Optional[str]) -> tuple:
    name = name if isinstance(name, str) else ""
    return (normalize(name), name)


def build_plan(
    required: Sequence[RequiredIngredient],
    covered_indices: Iterable[int],
    participants: Sequence[Participant],
) -> Plan:
    """
    Decide who brings what for a cookout.

    Greedy, single pass, hardest ingredient first:
      - ingredients that fewer eligible participants stock are placed first
      - each goes to the lowest scoring participant with spare capacity
        (pantry miss >> current load >> pending status), ties by username
      - when nobody has capacity left it lands on the shopping list and in
        unassigned_due_to_capacity
    Assignments are never revisited. Output lists are sorted by ingredient name.
    """
    required = list(required or ())
    participants = list(participants or ())
    covered = set(covered_indices or ())
    total = len(required)
    covered_in_range: Set[int] = {ing.index for ing in required if ing.index in covered}
    uncovered = [ing for ing in required if ing.index not in covered_in_range]

    eligible = sorted(
        (p for p in participants if p.is_eligible),
        key=lambda p: p.username,
    )
    assigned_count: Dict[str, int] = {p.username: 0 for p in eligible}
    assignments_by_user: Dict[str, List[AssignedItem]] = {p.username: [] for p in eligible}

    matching_users: Dict[int, List[str]] = {}
    for ing in uncovered:
        matching_users[ing.index] = sorted(
            p.username for p in eligible if find_first_match(ing.name, p.pantry_ingredients)
        )

    uncovered.sort(key=lambda ing: (len(matching_users[ing.index]),) + _name_key(ing.name))

    shopping: Dict[int, ShoppingItem] = {}
    unassigned: List[UnassignedItem] = []

    for ing in uncovered:
        best: Optional[Participant] = None
        best_score = 0
        best_match: Optional[str] = None
        for p in eligible:
            current = assigned_count[p.username]
            if current >= p.max_items:
                continue
            matched = find_first_match(ing.name, p.pantry_ingredients)
            score = pick_score(matched is not None, current, p.status)
            # eligible is username-ordered, so strict < keeps the smaller username on ties
            if best is None or score < best_score:
                best, best_score, best_match = p, score, matched

        if best is None:
            shopping[ing.index] = ShoppingItem(
                ingredient_index=ing.index,
                ingredient_name=ing.name,
                explanation=[
                    "No participant capacity remaining for assignment.",
                    "Add this item to the shopping list.",
                ],
            )
            unassigned.append(UnassignedItem(ingredient_index=ing.index, ingredient_name=ing.name))
            continue

        assigned_count[best.username] += 1
        explanation: List[str] = []
        if best_match is not None:
            source = SOURCE_PANTRY
            explanation.append(f"Matched in pantry: {best_match}")
        else:
            source = SOURCE_SHOPPING
            others = matching_users[ing.index]
            if not others:
                explanation.append("No pantry match found for any participant.")
            else:
                explanation.append(
                    f"No pantry match for {best.username}; others match: {', '.join(others)}"
                )
            explanation.append("This item likely requires shopping.")
            # Intentionally both assigned and on the shopping list: the assignee
            # is responsible for it but has to buy it.
            shopping[ing.index] = ShoppingItem(
                ingredient_index=ing.index,
                ingredient_name=ing.name,
                explanation=["Uncovered by pantry; include on shopping list."],
            )

        if best.status == STATUS_PENDING:
            explanation.append("Assigned to a pending participant (adjust if they decline).")
        explanation.append(
            f"Load balancing: {best.username} now has {assigned_count[best.username]} assigned item(s)."
        )

        assignments_by_user[best.username].append(
            AssignedItem(
                ingredient_index=ing.index,
                ingredient_name=ing.name,
                source=source,
                explanation=explanation[:MAX_EXPLANATION_LINES],
            )
        )

    for items in assignments_by_user.values():
        items.sort(key=lambda item: _name_key(item.ingredient_name))
    shopping_list = sorted(shopping.values(), key=lambda item: _name_key(item.ingredient_name))

    assigned_from_pantry = sum(
        1 for items in assignments_by_user.values() for item in items if item.source == SOURCE_PANTRY
    )
    already_covered = len(covered_in_range)

    return Plan(
        assignments_by_user=assignments_by_user,
        shopping_list=shopping_list,
        metrics=PlanMetrics(
            total=total,
            already_covered=already_covered,
            assigned_from_pantry=assigned_from_pantry,
            assigned_to_shopping=len(shopping_list),
            coverage_pct=coverage_pct(already_covered + assigned_from_pantry, total),
        ),
        unassigned_due_to_capacity=unassigned,
    )
