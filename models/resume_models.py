from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ats_score: int = Field(alias="atsScore", ge=0, le=100)
    skills_found: List[str] = Field(alias="skillsFound")
    missing_skills: List[str] = Field(alias="missingSkills")
    suggestions: List[str]


class ApiResponse(BaseModel):
    success: bool
    data: Optional[AnalysisResult] = None
    message: Optional[str] = None

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
