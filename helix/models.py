from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from helix.config import DEFAULT_GIFT_DAYS


class Complexity(str, Enum):
    SIMPLE = "Simple"
    MEDIUM = "Medium"
    COMPLEX = "Complex"


class SearchResult(BaseModel):
    """
    One organic result returned by the search API.
    """
    title: str = ""
    snippet: str = ""
    link: str = ""


class CandidateIdea(BaseModel):
    """
    A discovered painpoint awaiting (or having) an analysis.
    """
    id: Optional[str] = None
    title: str
    description: str = ""
    source: str = "Web"
    url: str = ""
    date_discovered: str
    category: str
    painpoint_description: str = ""
    delivery_timeline_weeks: int = 2
    technical_stack_required: str = ""
    monetization_model: str = ""
    is_new_entry: bool = False
    severity_indicators: List[str] = Field(default_factory=list)
    analysis_id: Optional[str] = None
    overall_score: Optional[float] = None

    def to_record(self) -> Dict[str, Any]:
        """Firestore payload without the document id."""
        return self.model_dump(exclude={"id"})


class AnalysisPayload(BaseModel):
    """
    Shape of the JSON object the LLM is asked to return.
    """
    painpoint_severity_score: float = Field(ge=0, le=100)
    technical_feasibility: float = Field(ge=0, le=100)
    build_complexity: Complexity
    revenue_potential_monthly: str = ""
    competition_gap_score: float = Field(ge=0, le=100)
    saas_viability_score: float = Field(ge=0, le=100)
    overall_score: Optional[float] = Field(default=None, ge=0, le=100)
    explanation: str = ""


class Analysis(BaseModel):
    """
    Scored output attached to exactly one idea.
    """
    id: Optional[str] = None
    idea_id: str
    painpoint_severity_score: float
    technical_feasibility: float
    build_complexity: Complexity
    revenue_potential_monthly: str
    competition_gap_score: float
    saas_viability_score: float
    overall_score: float
    explanation: str
    analysis_date: str
    source: str = "llm"

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"id"}, mode="json")


class ReportSummary(BaseModel):
    avg_delivery_time: float = 0.0
    most_common_tech_stack: str = ""
    highest_revenue_potential: str = ""
    easiest_builds: int = 0
    trending_keywords: List[Dict[str, Any]] = Field(default_factory=list)


class DailyReport(BaseModel):
    """
    Denormalized snapshot of the top ideas for one day and report type.
    """
    report_date: str
    report_type: str
    total_ideas: int
    new_ideas: int
    top_score: float
    summary: ReportSummary
    top_opportunities: List[Dict[str, Any]] = Field(default_factory=list)
    generated_at: str

    @property
    def report_id(self) -> str:
        return f"{self.report_date}_{self.report_type}"


class UserProfile(BaseModel):
    id: str
    email: Optional[str] = None
    current_tier: str = "free"
    subscription_tier: str = "free"
    daily_usage_count: int = 0
    gift_tier_expiry: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class HiddenIdeaRequest(BaseModel):
    idea_id: str
    status: str = "hidden"
    notes: str = ""
    progress_percentage: int = 0
    priority: str = "medium"
    estimated_budget: Optional[float] = None
    target_launch_date: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    private_notes: str = ""


class HiddenIdeaUpdate(BaseModel):
    status: Optional[str] = None
    notes: Optional[str] = None
    progress_percentage: Optional[int] = None
    priority: Optional[str] = None
    estimated_budget: Optional[float] = None
    target_launch_date: Optional[str] = None
    tags: Optional[List[str]] = None
    private_notes: Optional[str] = None


class GrantAccessRequest(BaseModel):
    email: str
    tier_level: str
    duration_days: int = Field(default=DEFAULT_GIFT_DAYS, gt=0)
