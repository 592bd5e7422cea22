"""
Pydantic models for the Lesson Plan Upgrade service
Define schemas for lesson configuration, uploaded documents and generated plans
"""
from typing import List, Dict, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field


SchoolLevel = Literal["primary", "secondary", "high", "university"]
ClassSize = Literal["small", "medium", "large"]
TimeConstraint = Literal["45", "90", "135", "180", "225", "270"]

GRADE_OPTIONS: Dict[str, List[str]] = {
    "primary": ["1", "2", "3", "4", "5"],
    "secondary": ["6", "7", "8", "9"],
    "high": ["10", "11", "12"],
    "university": [],
}


# ============= CONFIGURATION MODELS =============

class Resources(BaseModel):
    """Equipment available in the classroom"""
    projector: bool = True
    internet: bool = True
    materials: bool = False


class LessonConfig(BaseModel):
    """Teacher's choices for the lesson being upgraded"""
    school_level: SchoolLevel = Field(default="secondary", description="Education level")
    grade: str = Field(default="6", description="Grade, must belong to the school level")
    subject: str = Field(default="", description="Subject name, required before submission")
    class_size: ClassSize = "medium"
    resources: Resources = Field(default_factory=Resources)
    custom_resource: str = Field(default="", description="Other equipment / materials")
    time_constraint: TimeConstraint = Field(default="45", description="Time allotment in minutes")
    teaching_focus: List[str] = Field(
        default_factory=lambda: ["Giải quyết vấn đề"],
        description="Selected competency labels"
    )
    custom_competency: str = ""
    tech_apps: str = Field(default="", description="Desired technology tools (Kahoot, Padlet, ...)")
    integration: str = Field(default="", description="Cross-subject integration notes")
    simulation_topic: Optional[str] = Field(default=None, description="Optional simulation idea")

    def with_school_level(self, level: SchoolLevel) -> "LessonConfig":
        """Switch school level and reset the grade to the first one of that level"""
        grades = GRADE_OPTIONS.get(level) or []
        return self.model_copy(update={
            "school_level": level,
            "grade": grades[0] if grades else ""
        })

    def grade_options(self) -> List[str]:
        return GRADE_OPTIONS.get(self.school_level, [])

    def competencies(self) -> List[str]:
        """Selected competencies with the custom addition appended"""
        labels = list(self.teaching_focus)
        if self.custom_competency and self.custom_competency.strip():
            labels.append(self.custom_competency)
        return labels


class DocumentUpload(BaseModel):
    """An uploaded lesson plan file; data_base64 stays empty while encoding"""
    file_name: str
    mime_type: Optional[str] = None
    data_base64: Optional[str] = Field(default=None, description="Base64 payload or data URL")

    @property
    def is_encoded(self) -> bool:
        return bool(self.data_base64)


class LessonInput(BaseModel):
    """Configuration plus the optional uploaded document"""
    config: LessonConfig
    document: Optional[DocumentUpload] = None


# ============= GENERATED PLAN MODELS =============

class AnalysisSummary(BaseModel):
    """Analysis of the uploaded lesson plan"""
    subject: str
    topic: str
    weakness: str = Field(description="Detected weakness of the original plan")
    proposal: str = Field(description="Proposed improvement")


class TeachingMethod(BaseModel):
    """An active teaching method (Think-Pair-Share, Jigsaw, ...)"""
    name: str
    description: str
    steps: List[str]


class Game(BaseModel):
    """An educational game"""
    name: str
    duration: str = Field(description="Duration label, e.g. '5 phút'")
    type: str
    objective: str
    steps: List[str]


class Simulation(BaseModel):
    """Standalone HTML/JS simulation"""
    title: str = ""
    description: str = ""
    code: str = ""


class LessonPlanResponse(BaseModel):
    """Structured answer returned by the model"""
    model_config = ConfigDict(populate_by_name=True)

    summary: AnalysisSummary
    methods: List[TeachingMethod]
    games: List[Game]
    simulation: Optional[Simulation] = None
    full_plan_html: str = Field(alias="fullPlanHtml", description="Change blocks as HTML <div> fragments")


# ============= REQUEST MODELS =============

class BinaryPart(BaseModel):
    """Decoded document bytes sent alongside the prompt"""
    data: bytes
    mime_type: str


class GenerationRequest(BaseModel):
    """Everything the remote service needs for a single generation call"""
    binary_part: Optional[BinaryPart] = None
    prompt: str
    system_instruction: str
    response_schema: Dict
    temperature: float = 0.5

    def log_summary(self) -> Dict:
        return {
            "has_document": self.binary_part is not None,
            "mime_type": self.binary_part.mime_type if self.binary_part else None,
            "prompt_chars": len(self.prompt),
            "temperature": self.temperature,
        }
