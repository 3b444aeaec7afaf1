from datetime import date
from pydantic import BaseModel, Field, ValidationInfo, model_validator
from gravemanager.models.body import Gender


class BodyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    gender: Gender | None = None
    born: date | None = None
    died: date | None = None
    vampire: bool | None = False

    model_config = {"from_attributes": True, "strict": True}

    @model_validator(mode="after")
    def check_dates(self, info: ValidationInfo) -> "BodyBase":
        if self.born is not None and self.died is not None and self.died < self.born:
            raise ValueError("died is before born")
        # "today" is only passed in when validating before a write
        today = (info.context or {}).get("today")
        if today is not None:
            if self.born is not None and self.born > today:
                raise ValueError("born is in future")
            if self.died is not None and self.died > today:
                raise ValueError("died is in future")
        return self


class BodyResponse(BodyBase):
    id: int
    grave_id: int | None = None
