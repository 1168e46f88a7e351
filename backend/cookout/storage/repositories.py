from datetime import datetime, timezone
from typing import Iterable

from sqlmodel import Session, col, select

from cookout.logging import get_logger
from cookout.storage.models import (
    Cookout,
    CookoutCreatorIngredient,
    CookoutParticipant,
    CookoutParticipantIngredient,
    Food,
    PantryItem,
    Recipe,
)

logger = get_logger(__name__)


def get_cookout(session: Session, invitation_id: int) -> Cookout | None:
    return session.exec(select(Cookout).where(Cookout.invitation_id == invitation_id)).first()


def get_recipe(session: Session, recipe_id: int) -> Recipe | None:
    return session.exec(select(Recipe).where(Recipe.id == recipe_id)).first()


def get_creator_ingredients(session: Session, invitation_id: int) -> list[CookoutCreatorIngredient]:
    return list(
        session.exec(
            select(CookoutCreatorIngredient)
            .where(CookoutCreatorIngredient.invitation_id == invitation_id)
            .order_by(CookoutCreatorIngredient.id)
        )
    )


def get_confirmed_participant_ingredients(
    session: Session, invitation_id: int
) -> list[CookoutParticipantIngredient]:
    return list(
        session.exec(
            select(CookoutParticipantIngredient)
            .where(
                CookoutParticipantIngredient.invitation_id == invitation_id,
                CookoutParticipantIngredient.confirmed == True,  # noqa: E712
            )
            .order_by(CookoutParticipantIngredient.id)
        )
    )


def get_covered_indices(session: Session, invitation_id: int) -> set[int]:
    """Creator-provided slots plus slots a participant has confirmed they will bring."""
    covered = {ci.ingredient_index for ci in get_creator_ingredients(session, invitation_id)}
    covered.update(pi.ingredient_index for pi in get_confirmed_participant_ingredients(session, invitation_id))
    return covered


def get_participants(
    session: Session, invitation_id: int, accepted_only: bool = False
) -> list[CookoutParticipant]:
    query = select(CookoutParticipant).where(CookoutParticipant.invitation_id == invitation_id)
    if accepted_only:
        query = query.where(CookoutParticipant.status == "accepted")
    return list(session.exec(query.order_by(CookoutParticipant.id)))


def get_participant(session: Session, invitation_id: int, username: str) -> CookoutParticipant | None:
    return session.exec(
        select(CookoutParticipant).where(
            CookoutParticipant.invitation_id == invitation_id,
            CookoutParticipant.username == username,
        )
    ).first()


def get_pantry_names_by_user(session: Session, usernames: Iterable[str]) -> dict[str, list[str]]:
    """username -> food names in the order the pantry rows were added."""
    names = list(usernames)
    pantry: dict[str, list[str]] = {u: [] for u in names}
    if not names:
        return pantry
    rows = session.exec(
        select(PantryItem.username, Food.name)
        .join(Food, Food.id == PantryItem.food_id)
        .where(col(PantryItem.username).in_(names))
        .order_by(PantryItem.id)
    )
    for username, food_name in rows:
        if not username or not food_name:
            continue
        bucket = pantry.setdefault(username, [])
        if food_name not in bucket:
            bucket.append(food_name)
    return pantry


def accept_participant(session: Session, participant: CookoutParticipant) -> CookoutParticipant:
    participant.status = "accepted"
    participant.confirmed_at = datetime.now(timezone.utc)
    session.add(participant)
    session.commit()
    session.refresh(participant)
    logger.info(
        "participant.accepted invitation=%s username=%s",
        participant.invitation_id,
        participant.username,
    )
    return participant


def replace_participant_ingredients(
    session: Session,
    invitation_id: int,
    username: str,
    ingredients: Iterable[tuple[int, str]],
) -> list[CookoutParticipantIngredient]:
    """Drop the user's previous confirmations and store the new (index, name) pairs."""
    previous = session.exec(
        select(CookoutParticipantIngredient).where(
            CookoutParticipantIngredient.invitation_id == invitation_id,
            CookoutParticipantIngredient.username == username,
        )
    )
    for row in list(previous):
        session.delete(row)
    session.flush()
    now = datetime.now(timezone.utc)
    created = [
        CookoutParticipantIngredient(
            invitation_id=invitation_id,
            username=username,
            ingredient_index=index,
            ingredient_name=name,
            confirmed=True,
            confirmed_at=now,
        )
        for index, name in ingredients
    ]
    session.add_all(created)
    session.commit()
    logger.info(
        "participant_ingredients.replaced invitation=%s username=%s count=%s",
        invitation_id,
        username,
        len(created),
    )
    return created
