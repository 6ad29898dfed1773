"""Main entry point for the Clarity recommendation engine."""

import argparse
import json
import logging
import sys
from datetime import timedelta
from pathlib import Path

from clarity.engine.recommender import Recommender
from clarity.engine.session import RecommendationSession
from clarity.models.task import EnergyLevel
from clarity.models.window import WindowValidationError
from clarity.scoring.observers import CompositeObserver, LoggingObserver, TraceRecorder
from clarity.scoring.ranker import CompositeRanker, reminder_tasks
from clarity.utils.config import load_config, get_default_config
from clarity.utils.snapshot import load_snapshot


def _load_config(config_path: str) -> dict:
    return load_config(config_path) if Path(config_path).exists() else get_default_config()


def run_recommendation(args) -> int:
    """Negotiate a window from the command-line arguments and recommend one task."""
    config = _load_config(args.config)
    tasks, goals = load_snapshot(args.tasks)
    
    recorder = TraceRecorder()
    ranker = CompositeRanker(config, observer=CompositeObserver([LoggingObserver(), recorder]))
    session = RecommendationSession(
        tasks,
        goals,
        energy=EnergyLevel(args.energy),
        config=config,
        recommender=Recommender(ranker=ranker, config=config),
    )
    
    negotiator = session.ask()
    if args.until:
        result = session.confirm(clock_text=args.until)
    elif args.minutes is not None:
        result = session.confirm(end_time=session.clock() + timedelta(minutes=args.minutes))
    else:
        print(negotiator.hint(session.clock()))
        result = session.confirm()
    
    if isinstance(result, WindowValidationError):
        print(json.dumps(result.to_dict(), indent=2) if args.json else result.message)
        return 1
    
    recommendation = session.get_recommendation()
    if args.trace and recorder.latest:
        print(recorder.latest.to_human_readable())
        print()
    
    if recommendation is None:
        print("Nothing to suggest right now. Your task list has no open tasks.")
        return 0
    
    if args.json:
        print(json.dumps({
            'task_id': recommendation.task.task_id,
            'title': recommendation.task.title,
            'reason_type': recommendation.reason_type.value,
            'explanation': recommendation.explanation,
            'duration': recommendation.duration,
            'window': {
                'start_time': result.start_time.isoformat(),
                'end_time': result.end_time.isoformat(),
                'source': result.source.value,
            },
        }, indent=2))
    else:
        print(f"{recommendation.task.title} ({recommendation.duration} min)")
        print(recommendation.explanation)
    
    session.accept_recommendation()
    return 0


def run_reminders(args) -> int:
    """List reminder tasks, which are never recommended."""
    tasks, _ = load_snapshot(args.tasks)
    reminders = reminder_tasks(tasks)
    
    if not reminders:
        print("No reminders.")
    for task in reminders:
        print(f"- {task.title}")
    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Clarity: pick one task for right now"
    )
    parser.add_argument(
        'command',
        choices=['recommend', 'reminders'],
        help='Command to run'
    )
    parser.add_argument(
        '--tasks',
        type=str,
        required=True,
        help='Path to a YAML or JSON snapshot of tasks and goals'
    )
    parser.add_argument(
        '--config',
        type=str,
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '--energy',
        type=str,
        choices=[level.value for level in EnergyLevel],
        default='medium',
        help='Current energy level (default: medium)'
    )
    window = parser.add_mutually_exclusive_group()
    window.add_argument(
        '--minutes',
        type=int,
        help='Uninterrupted minutes available from now'
    )
    window.add_argument(
        '--until',
        type=str,
        help='End of the available time as HH:MM'
    )
    parser.add_argument('--trace', action='store_true', help='Print the scoring trace')
    parser.add_argument('--json', action='store_true', help='Print the recommendation as JSON')
    parser.add_argument('--verbose', action='store_true', help='Log score breakdowns')
    
    args = parser.parse_args()
    
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )
    
    if args.command == 'recommend':
        return run_recommendation(args)
    elif args.command == 'reminders':
        return run_reminders(args)


if __name__ == "__main__":
    sys.exit(main())
