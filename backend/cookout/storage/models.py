from datetime import date, datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Recipe(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    # Ten fixed ingredient slots, read in the order i1..i9, i0.
    i1: Optional[str] = None
    i2: Optional[str] = None
    i3: Optional[str] = None
    i4: Optional[str] = None
    i5: Optional[str] = None
    i6: Optional[str] = None
    i7: Optional[str] = None
    i8: Optional[str] = None
    i9: Optional[str] = None
    i0: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)

    def ingredient_slots(self) -> list[Optional[str]]:
        return [self.i1, self.i2, self.i3, self.i4, self.i5, self.i6, self.i7, self.i8, self.i9, self.i0]


class Food(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str


class PantryItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True)
    food_id: int = Field(foreign_key="food.id")
    created_at: datetime = Field(default_factory=_utcnow)


class Cookout(SQLModel, table=True):
    invitation_id: Optional[int] = Field(default=None, primary_key=True)
    creator_username: str
    recipe_id: int = Field(foreign_key="recipe.id")
    cookout_date: Optional[date] = None
    created_at: datetime = Field(default_factory=_utcnow)


class CookoutParticipant(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    invitation_id: int = Field(foreign_key="cookout.invitation_id", index=True)
    username: str
    status: str = "pending"  # pending | accepted | declined
    confirmed_at: Optional[datetime] = None


class CookoutCreatorIngredient(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    invitation_id: int = Field(foreign_key="cookout.invitation_id", index=True)
    ingredient_index: int
    ingredient_name: str


class CookoutParticipantIngredient(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    invitation_id: int = Field(foreign_key="cookout.invitation_id", index=True)
    username: str
    ingredient_index: int
    ingredient_name: str
    confirmed: bool = True
    confirmed_at: Optional[datetime] = None
