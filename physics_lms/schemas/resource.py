"""Learning resource schemas."""

from pydantic import BaseModel, ConfigDict


class LearningResourceCreate(BaseModel):
    title: str
    description: str
    url: str
    resource_type: str
    module_id: int
    career_path: str


class LearningResourceResponse(LearningResourceCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
