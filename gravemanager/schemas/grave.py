from pydantic import BaseModel, Field


class GraveBase(BaseModel):
    column: int = Field(..., ge=0)
    row: int = Field(..., ge=0)
    capacity: int = Field(..., ge=1)
    note: str | None = None

    model_config = {"from_attributes": True, "strict": True}


class GraveResponse(GraveBase):
    id: int
