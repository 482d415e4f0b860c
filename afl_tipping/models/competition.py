from datetime import datetime
from typing import Any, Literal, Optional, Union
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CompetitionSettings(BaseModel):
    """
    Scoring configuration of a competition.

    Every option has a default, so a partial (or empty) stored document still
    resolves to a complete settings object through `with_defaults`. The
    scoring functions expect an already resolved instance.

    - correct_tip_points: points for picking the winner
    - confidence_enabled: correct-tip points are multiplied by the tip's confidence
    - margin_bonus_*: bonus added on a correct tip when
      |actual margin - predicted margin| <= threshold
    - all_correct_bonus*: bonus once per user per round when every completed tip was correct
    - margin_mode: how the UI asks for margins (none | all | first), not used for scoring
    """

    correct_tip_points: int = 1

    confidence_enabled: bool = False

    margin_bonus_enabled: bool = False
    margin_bonus_threshold: int = 10
    margin_bonus_points: int = 1

    all_correct_bonus: bool = False
    all_correct_bonus_points: int = 0

    margin_mode: Literal["none", "all", "first"] = "none"

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"

    @classmethod
    def with_defaults(
        cls,
        raw: Union["CompetitionSettings", dict[str, Any], None] = None,
        **overrides: Any,
    ) -> "CompetitionSettings":
        """Merge stored (snake_case or camelCase) settings over the defaults."""
        if isinstance(raw, CompetitionSettings):
            data = raw.model_dump()
        else:
            data = {k: v for k, v in (raw or {}).items() if v is not None}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(data)

    def merged(self, changes: dict[str, Any]) -> "CompetitionSettings":
        """Settings with `changes` applied on top of the current values."""
        current = self.model_dump()
        update = CompetitionSettings.with_defaults(changes).model_dump(exclude_unset=True)
        current.update(update)
        return CompetitionSettings.model_validate(current)


class Competition(BaseModel):
    id: str = Field(..., alias="_id")
    name: str
    code: Optional[str] = None

    is_active: bool = True
    settings: CompetitionSettings = Field(default_factory=CompetitionSettings)

    member_ids: list[str] = []

    created_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class RoundBonus(BaseModel):
    """All-correct bonus ledger entry for one user in one round"""

    user_id: str
    competition_id: str
    round: int
    points: int
