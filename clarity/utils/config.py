"""Configuration management."""

import copy
import json
import math
import yaml
from pathlib import Path
from typing import Dict, Any


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML or JSON file, layered over the defaults."""
    path = Path(config_path)
    
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    
    with open(path, 'r') as f:
        if path.suffix.lower() in ['.yaml', '.yml']:
            loaded = yaml.safe_load(f)
        elif path.suffix.lower() == '.json':
            loaded = json.load(f)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")
    
    config = merge_config(get_default_config(), loaded or {})
    validate_config(config)
    return config


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config: Dict[str, Any]) -> None:
    """Reject configurations the engine cannot honour."""
    weights = config.get('scoring', {}).get('weights', {})
    total = sum(weights.values())
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise ValueError(f"Scoring weights must sum to 1.0, got {total}")
    
    window = config.get('window', {})
    if window.get('minimum_minutes', 10) <= 0:
        raise ValueError("window.minimum_minutes must be positive")
    if window.get('default_minutes', 45) < window.get('minimum_minutes', 10):
        raise ValueError("window.default_minutes must not be below window.minimum_minutes")


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        'scoring': {
            'weights': {
                'pressure': 0.5,
                'energy_fit': 0.3,
                'duration_fit': 0.2,
            },
            # Labels a core obligation as core-pressure; independent of the composite score.
            'core_pressure_threshold': 50,
        },
        'pressure': {
            'minimum': 20,
            'steepness': 2.0,
            'growth': 10,
            'general': 5,
            'default_days': 7,
        },
        'window': {
            'default_minutes': 45,
            'minimum_minutes': 10,
            'presets': [20, 40, 60],
            'short_notice_minutes': 15,
        },
        'session': {
            'advisory_timeout_seconds': 2.0,
        },
    }
