"""Load task and goal snapshots from YAML or JSON files."""

import json
import yaml
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ..models.task import Goal, Task

_REQUIRED_TASK_FIELDS = ('id', 'title', 'estimated_minutes')
_REQUIRED_GOAL_FIELDS = ('id', 'title')
_TRUE_STRINGS = ('true', 'yes', '1')
_FALSE_STRINGS = ('false', 'no', '0', '')


def _parse_goal(item: Dict[str, Any], index: int) -> Goal:
    missing = [name for name in _REQUIRED_GOAL_FIELDS if not item.get(name)]
    if missing:
        raise ValueError(f"Goal {index}: missing required fields {missing}")
    
    return Goal(
        goal_id=str(item['id']),
        title=str(item['title']),
        description=item.get('description'),
    )


def _parse_bool(value: Any, field: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValueError(f"invalid {field} value {value!r}")


def _parse_task(item: Dict[str, Any], index: int) -> Task:
    missing = [name for name in _REQUIRED_TASK_FIELDS if item.get(name) in (None, '')]
    if missing:
        raise ValueError(f"Task {index}: missing required fields {missing}")
    
    try:
        return Task(
            task_id=str(item['id']),
            title=str(item['title']),
            estimated_minutes=int(item['estimated_minutes']),
            deadline=str(item.get('deadline') or ''),
            task_type=item.get('task_type', 'general'),
            goal_id=str(item['goal_id']) if item.get('goal_id') else None,
            completed=_parse_bool(item.get('completed', False), 'completed'),
        )
    except ValueError as exc:
        raise ValueError(f"Task {index}: {exc}") from exc


def load_snapshot(snapshot_path: str) -> Tuple[List[Task], List[Goal]]:
    """Read tasks and goals from a snapshot file."""
    path = Path(snapshot_path)
    
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {snapshot_path}")
    
    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() in ['.yaml', '.yml']:
            payload = yaml.safe_load(f)
        elif path.suffix.lower() == '.json':
            payload = json.load(f)
        else:
            raise ValueError(f"Unsupported snapshot file format: {path.suffix}")
    
    if not isinstance(payload, dict):
        raise ValueError("Snapshot must be a mapping with 'tasks' and 'goals' lists")
    
    goals = [_parse_goal(item, i) for i, item in enumerate(payload.get('goals') or [], start=1)]
    tasks = [_parse_task(item, i) for i, item in enumerate(payload.get('tasks') or [], start=1)]
    return tasks, goals
