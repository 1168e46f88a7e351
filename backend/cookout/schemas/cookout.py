from typing import Any

from pydantic import BaseModel, Field


class ParticipantOverride(BaseModel):
    can_bring: bool | None = None
    max_items: int | None = None
    # Accepted but not used by the planner yet.
    allergens: list[str] | None = None
    budget_cents: int | None = None
    travel_penalty: float | None = None


class PlanConstraints(BaseModel):
    include_pending_participants: bool = True
    max_items_per_person: int | None = None  # clamped to 0..20, default 3
    participant_overrides: dict[str, ParticipantOverride] = Field(default_factory=dict)


class PlanRecommendationRequest(BaseModel):
    invitation_id: int
    viewer_username: str | None = None
    constraints: PlanConstraints | None = None


class PlanRecommendationResponse(BaseModel):
    plan: dict[str, Any]
    viewer: list[dict[str, Any]] = []


class ParticipantActionRequest(BaseModel):
    invitation_id: int
    username: str


class ConfirmIngredientsRequest(ParticipantActionRequest):
    ingredient_indices: list[int] = []  # slot indices (0-9) the user will bring
