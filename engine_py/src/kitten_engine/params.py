"""
Effect parameter models for single plays and combos.

Each reactive card and combo kind accepts exactly one parameter shape, so a
parameter that does not belong to a play is rejected instead of ignored.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from .constants import COMBO_FIVE_DISTINCT, COMBO_FOUR, COMBO_THREE, COMBO_TWO
from .models import CardType, CatName


class BaseParams(BaseModel):
    """Base parameter model."""
    model_config = {"extra": "forbid", "frozen": True}


class NoParams(BaseParams):
    """Plays that take no parameters."""
    kind: Literal["none"] = "none"


class TargetParams(BaseParams):
    """Targeted attack and favor: optional explicit target."""
    kind: Literal["target"] = "target"
    target_id: Optional[str] = Field(default=None, min_length=1)


class AlterFutureParams(BaseParams):
    """Alter the future: optional new order for the top cards."""
    kind: Literal["alter_future"] = "alter_future"
    order: Optional[List[str]] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def check_unique(self):
        if self.order is not None and len(set(self.order)) != len(self.order):
            raise ValueError("order must not repeat card ids")
        return self


class StealDeclaredParams(BaseParams):
    """Three of a kind: name a card to take from a target."""
    kind: Literal["steal_declared"] = "steal_declared"
    target_id: str = Field(..., min_length=1)
    declared_name: CatName


class RetrieveParams(BaseParams):
    """Five distinct cats: pick a card back from the discard pile."""
    kind: Literal["retrieve"] = "retrieve"
    card_id: Optional[str] = Field(default=None, min_length=1)
    card_type: Optional[CardType] = None
    card_name: Optional[CatName] = None

    @model_validator(mode="after")
    def check_descriptor(self):
        if self.card_id is None and self.card_type is None:
            raise ValueError("either card_id or card_type is required")
        if self.card_name is not None and self.card_type not in (None, CardType.NORMAL):
            raise ValueError("card_name only applies to NORMAL cards")
        return self


PlayParams = Union[NoParams, TargetParams, AlterFutureParams]
ComboParams = Union[NoParams, StealDeclaredParams, RetrieveParams]

PLAY_PARAM_MODELS = {
    CardType.TARGETED_ATTACK: TargetParams,
    CardType.FAVOR: TargetParams,
    CardType.ALTER_FUTURE: AlterFutureParams,
}

COMBO_PARAM_MODELS = {
    COMBO_TWO: NoParams,
    COMBO_THREE: StealDeclaredParams,
    COMBO_FOUR: NoParams,
    COMBO_FIVE_DISTINCT: RetrieveParams,
}


def _parse(model, data: Optional[Dict[str, Any]]):
    payload = dict(data or {})
    payload.pop("kind", None)
    try:
        return model(**payload)
    except ValidationError as e:
        raise ValueError(f"Invalid parameters: {e.errors(include_url=False)}")


def parse_play_params(card_type: CardType, data: Optional[Dict[str, Any]] = None) -> PlayParams:
    """
    Parse the parameters of a single card play.

    Raises:
        ValueError: If the data does not fit the card's parameter shape
    """
    if isinstance(data, BaseParams):
        data = data.model_dump(exclude={"kind"})
    model = PLAY_PARAM_MODELS.get(card_type, NoParams)
    return _parse(model, data)


def parse_combo_params(combo_kind: str, data: Optional[Dict[str, Any]] = None) -> ComboParams:
    """
    Parse the parameters of a combo play.

    Raises:
        ValueError: If the combo kind is unknown or the data does not fit
    """
    if isinstance(data, BaseParams):
        data = data.model_dump(exclude={"kind"})
    model = COMBO_PARAM_MODELS.get(combo_kind)
    if model is None:
        raise ValueError(f"Unknown combo kind: {combo_kind}")
    return _parse(model, data)
