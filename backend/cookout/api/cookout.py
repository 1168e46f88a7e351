"""
Cookout invitation endpoints: invitation detail, accepting, confirming what you will bring,
and the "who brings what" plan recommendation.
"""

from fastapi import APIRouter, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from cookout.logging import get_logger
from cookout.schemas.cookout import (
    ConfirmIngredientsRequest,
    ParticipantActionRequest,
    PlanConstraints,
    PlanRecommendationRequest,
    PlanRecommendationResponse,
)
from cookout.services.planning.participants import (
    STATUS_PENDING,
    build_participants,
    clamp_max_items_per_person,
)
from cookout.services.planning.plan_builder import build_plan, required_ingredients
from cookout.storage.db import get_session
from cookout.storage.models import Cookout, Recipe
from cookout.storage.repositories import (
    accept_participant,
    get_confirmed_participant_ingredients,
    get_cookout,
    get_covered_indices,
    get_creator_ingredients,
    get_pantry_names_by_user,
    get_participant,
    get_participants,
    get_recipe,
    replace_participant_ingredients,
)
from cookout.utils.timing import time_span

router = APIRouter()
logger = get_logger(__name__)


def _require_invitation_id(invitation_id: int) -> None:
    if invitation_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid invitation_id")


def _load_cookout_and_recipe(session: Session, invitation_id: int) -> tuple[Cookout, Recipe]:
    cookout = get_cookout(session, invitation_id)
    if not cookout:
        raise HTTPException(status_code=404, detail="Invitation not found")
    recipe = get_recipe(session, cookout.recipe_id)
    if not recipe:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return cookout, recipe


def _database_error(action: str, invitation_id: int, error: SQLAlchemyError) -> HTTPException:
    logger.exception("cookout.%s.db_failed invitation=%s error=%s", action, invitation_id, error)
    return HTTPException(status_code=500, detail=f"Database error during {action}")


@router.get("/cookout/invitation/{invitation_id}")
def get_invitation(invitation_id: int) -> dict:
    """
    Invitation detail with per-ingredient coverage.
    Each ingredient reports whether the creator provides it and which participants confirmed it.
    """
    _require_invitation_id(invitation_id)
    try:
        with get_session() as session:
            cookout, recipe = _load_cookout_and_recipe(session, invitation_id)
            required = required_ingredients(recipe.ingredient_slots())
            creator_indices = {ci.ingredient_index for ci in get_creator_ingredients(session, invitation_id)}
            provided_by: dict[int, list[str]] = {}
            for pi in get_confirmed_participant_ingredients(session, invitation_id):
                users = provided_by.setdefault(pi.ingredient_index, [])
                if pi.username not in users:
                    users.append(pi.username)
            participants = get_participants(session, invitation_id)

            ingredients = [
                {
                    "index": ing.index,
                    "name": ing.name,
                    "is_creator_provided": ing.index in creator_indices,
                    "provided_by": provided_by.get(ing.index, []),
                    "is_covered": ing.index in creator_indices or bool(provided_by.get(ing.index)),
                }
                for ing in required
            ]
            return {
                "invitation": {
                    "invitation_id": cookout.invitation_id,
                    "creator_username": cookout.creator_username,
                    "recipe_id": cookout.recipe_id,
                    "recipe_name": recipe.name,
                    "cookout_date": cookout.cookout_date.isoformat() if cookout.cookout_date else None,
                    "created_at": cookout.created_at.isoformat(),
                    "ingredients": ingredients,
                    "participants": [{"username": p.username, "status": p.status} for p in participants],
                }
            }
    except SQLAlchemyError as e:
        raise _database_error("invitation", invitation_id, e)


@router.post("/cookout/accept")
def post_accept(body: ParticipantActionRequest) -> dict:
    _require_invitation_id(body.invitation_id)
    if not body.username.strip():
        raise HTTPException(status_code=400, detail="Missing required fields")
    try:
        with get_session() as session:
            participant = get_participant(session, body.invitation_id, body.username)
            if not participant:
                raise HTTPException(status_code=404, detail="Participant not found")
            accept_participant(session, participant)
    except SQLAlchemyError as e:
        raise _database_error("accept", body.invitation_id, e)
    return {"success": True}


@router.post("/cookout/confirm-ingredients")
def post_confirm_ingredients(body: ConfirmIngredientsRequest) -> dict:
    """
    Replace the ingredients a participant has confirmed they will bring.
    Out-of-range indices are dropped. A pending participant who confirms is accepted.
    """
    _require_invitation_id(body.invitation_id)
    if not body.username.strip():
        raise HTTPException(status_code=400, detail="Missing required fields")
    try:
        with get_session() as session:
            participant = get_participant(session, body.invitation_id, body.username)
            if not participant:
                raise HTTPException(status_code=404, detail="Participant not found")
            _, recipe = _load_cookout_and_recipe(session, body.invitation_id)
            names = {ing.index: ing.name for ing in required_ingredients(recipe.ingredient_slots())}
            chosen = [(idx, names[idx]) for idx in dict.fromkeys(body.ingredient_indices) if idx in names]
            replace_participant_ingredients(session, body.invitation_id, body.username, chosen)
            if participant.status == STATUS_PENDING:
                accept_participant(session, participant)
    except SQLAlchemyError as e:
        raise _database_error("confirm_ingredients", body.invitation_id, e)
    return {"success": True, "confirmed": len(chosen)}


@router.post("/cookout/plan-recommendation", response_model=PlanRecommendationResponse)
def post_plan_recommendation(body: PlanRecommendationRequest) -> PlanRecommendationResponse:
    """
    Suggest who brings which uncovered ingredient.
    Expects: { "invitation_id", "viewer_username"?, "constraints"?: { "include_pending_participants",
    "max_items_per_person", "participant_overrides": { username: { "can_bring", "max_items", ... } } } }
    Returns the full plan plus the viewer's own assignments.
    """
    _require_invitation_id(body.invitation_id)
    constraints = body.constraints or PlanConstraints()
    max_items_per_person = clamp_max_items_per_person(constraints.max_items_per_person)
    overrides = {u: o.model_dump() for u, o in constraints.participant_overrides.items()}

    try:
        with get_session() as session:
            _, recipe = _load_cookout_and_recipe(session, body.invitation_id)
            required = required_ingredients(recipe.ingredient_slots())
            covered = get_covered_indices(session, body.invitation_id)
            rows = get_participants(
                session,
                body.invitation_id,
                accepted_only=not constraints.include_pending_participants,
            )
            pantry = get_pantry_names_by_user(session, [p.username for p in rows])
            participant_rows = [(p.username, p.status) for p in rows]
    except SQLAlchemyError as e:
        raise _database_error("plan_recommendation", body.invitation_id, e)

    participants = build_participants(participant_rows, pantry, max_items_per_person, overrides)
    with time_span(
        "cookout.plan.build",
        invitation=body.invitation_id,
        required=len(required),
        participants=len(participants),
    ):
        plan = build_plan(required, covered, participants)

    logger.info(
        "plan.built invitation=%s total=%s covered=%s pantry=%s shopping=%s coverage_pct=%s",
        body.invitation_id,
        plan.metrics.total,
        plan.metrics.already_covered,
        plan.metrics.assigned_from_pantry,
        plan.metrics.assigned_to_shopping,
        plan.metrics.coverage_pct,
    )
    payload = plan.to_dict()
    viewer = payload["assignments_by_user"].get(body.viewer_username, []) if body.viewer_username else []
    return PlanRecommendationResponse(plan=payload, viewer=viewer)
