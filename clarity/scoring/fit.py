"""Energy and duration fit scorers."""

from ..models.task import EnergyLevel, Task


def compute_energy_fit(task: Task, energy: EnergyLevel) -> float:
    """Suitability (0-100) of a task's length for the declared energy level."""
    minutes = task.estimated_minutes
    
    if energy is EnergyLevel.LOW:
        # Shorter is lighter
        if minutes <= 20:
            return 100
        if minutes <= 30:
            return 70
        if minutes <= 45:
            return 40
        return 10
    
    if energy is EnergyLevel.MEDIUM:
        if 20 <= minutes <= 45:
            return 100
        if 15 <= minutes <= 60:
            return 80
        return 50
    
    if energy is EnergyLevel.HIGH:
        if minutes >= 30:
            return 100
        if minutes >= 20:
            return 80
        return 60
    
    raise ValueError(f"Unknown energy level: {energy}")


def compute_duration_fit(task: Task, available_minutes: float) -> float:
    """Suitability (0-100) of a task's length for the available time.
    
    Over-budget tasks are penalized rather than excluded.
    """
    task_minutes = task.estimated_minutes
    
    if task_minutes <= available_minutes * 0.9:
        return 100
    
    if task_minutes <= available_minutes:
        return 70
    
    overage = task_minutes - available_minutes
    return max(10, 60 - overage * 2)
