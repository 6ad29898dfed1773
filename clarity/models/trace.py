"""Ranking trace models for observability."""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from .recommendation import ReasonType
from .task import Task


@dataclass
class ScoredCandidate:
    """Computed scores for one candidate task during ranking."""
    
    task: Task
    pressure: float
    energy_fit: float
    duration_fit: float
    score: float
    days_until_due: Optional[float]
    reason_type: ReasonType


@dataclass
class RankingTrace:
    """Complete trace of a ranking run."""
    
    run_id: str
    timestamp: datetime
    energy: str
    available_minutes: int
    window_source: Optional[str]
    excluded_ids: List[str]
    weights: Dict[str, float] = field(default_factory=dict)
    candidates: List[ScoredCandidate] = field(default_factory=list)
    selected_task_id: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert trace to dictionary for JSON export."""
        data = asdict(self)
        for candidate in data['candidates']:
            candidate['task']['task_type'] = candidate['task']['task_type'].value
            candidate['reason_type'] = candidate['reason_type'].value
        return data
    
    def to_human_readable(self) -> str:
        """Generate human-readable log format."""
        lines = [
            f"=== Ranking Run: {self.run_id} ===",
            f"Timestamp: {self.timestamp}",
            f"Energy: {self.energy}",
            f"Available minutes: {self.available_minutes}",
            f"Window source: {self.window_source or 'unspecified'}",
            f"Excluded: {', '.join(self.excluded_ids) or 'none'}",
            "",
            "Candidates:",
        ]
        
        for candidate in self.candidates:
            days = candidate.days_until_due
            lines.append(f"  {candidate.task.task_id} ({candidate.task.title}):")
            lines.append(f"    Due in: {'none' if days is None else f'{days:.2f} days'}")
            lines.append(f"    Pressure: {candidate.pressure:.2f} x {self.weights.get('pressure')}")
            lines.append(f"    Energy fit: {candidate.energy_fit:.2f} x {self.weights.get('energy_fit')}")
            lines.append(f"    Duration fit: {candidate.duration_fit:.2f} x {self.weights.get('duration_fit')}")
            lines.append(f"    Score: {candidate.score:.2f} ({candidate.reason_type.value})")
        
        lines.extend([
            "",
            f"Selected: {self.selected_task_id or 'nothing'}",
            "=" * 50,
        ])
        
        return "\n".join(lines)
