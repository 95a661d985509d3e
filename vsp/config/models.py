from pathlib import Path
from typing import Dict, Optional
from pydantic import BaseModel, Field, field_validator
from vsp.domain.models import ProcessingMode, VideoFilter

def _default_cost_modifiers() -> Dict[VideoFilter, float]:
    return {
        VideoFilter.NONE: 1.0,
        VideoFilter.GRAYSCALE: 1.0,
        VideoFilter.SEPIA: 1.2,
        VideoFilter.BLUR: 1.5,
    }

class EngineConfig(BaseModel):
    segment_length_s: float = Field(default=10.0, gt=0)
    base_cost_ms: float = Field(default=800.0, gt=0)
    min_cost_ms: float = Field(default=500.0, ge=0)
    jitter_ms: float = Field(default=100.0, ge=0)
    merge_overhead_ms: float = Field(default=400.0, gt=0)
    progress_steps: int = Field(default=20, ge=1)
    stagger_ms: float = Field(default=30.0, ge=0)
    filter_cost_modifiers: Dict[VideoFilter, float] = Field(default_factory=_default_cost_modifiers)

    @field_validator('filter_cost_modifiers')
    @classmethod
    def validate_modifiers(cls, v: Dict[VideoFilter, float]) -> Dict[VideoFilter, float]:
        for video_filter, modifier in v.items():
            if modifier <= 0:
                raise ValueError(f"Invalid cost modifier {modifier} for filter {video_filter.value}. Must be positive.")
        return v

    def cost_modifier(self, video_filter: VideoFilter) -> float:
        return self.filter_cost_modifiers.get(video_filter, 1.0)

class PhaseConfig(BaseModel):
    convert_delay_ms: float = Field(default=800.0, ge=0)
    split_delay_ms: float = Field(default=600.0, ge=0)
    merge_delay_ms: float = Field(default=400.0, ge=0)

class GeneralConfig(BaseModel):
    mode: ProcessingMode = ProcessingMode.PARALLEL
    video_filter: VideoFilter = VideoFilter.GRAYSCALE
    cpu_cores: Optional[int] = Field(default=None, gt=0)
    dashboard: bool = True
    debug: bool = False
    log_file: Optional[Path] = None

class AppConfig(BaseModel):
    general: GeneralConfig = Field(default_factory=GeneralConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    phases: PhaseConfig = Field(default_factory=PhaseConfig)
