"""
Profile analysis schema - output of the first model call.
"""
from typing import List
from pydantic import BaseModel, Field


class Experiences(BaseModel):
    companies: List[str] = Field(default_factory=list)
    projects: List[str] = Field(default_factory=list)
    roles: List[str] = Field(default_factory=list)


class PsychologicalProfile(BaseModel):
    traits: List[str] = Field(default_factory=list)
    motivations: List[str] = Field(default_factory=list)
    work_style: List[str] = Field(default_factory=list, alias="workStyle")
    strengths: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class ConfidenceSources(BaseModel):
    files: int = 0
    web: int = 0


class AnalysisConfidence(BaseModel):
    overall: float = 0.5
    sources: ConfidenceSources = Field(default_factory=ConfidenceSources)


class ProfileAnalysis(BaseModel):
    """Evidence the generation prompt builds on. Everything is optional."""
    experiences: Experiences = Field(default_factory=Experiences)
    challenges: List[str] = Field(default_factory=list)
    lessons: List[str] = Field(default_factory=list)
    psychological_profile: PsychologicalProfile = Field(
        default_factory=PsychologicalProfile, alias="psychologicalProfile"
    )
    confidence: AnalysisConfidence = Field(default_factory=AnalysisConfidence)
    limitations: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True
