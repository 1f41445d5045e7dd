"""
File-backed bracket store: one YAML file per bracket under ``<data_dir>/brackets``.

The generators never touch storage; callers save the finished graph in one go.
"""
import logging
import os
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml
from filelock import FileLock

from .models import Participant, Match

logger = logging.getLogger(__name__)

BRACKETS_SUBDIR = 'brackets'
LOCK_TIMEOUT = 10


def _brackets_dir(data_dir: str) -> str:
    return os.path.join(data_dir, BRACKETS_SUBDIR)


def _bracket_file(data_dir: str, bracket_id: str) -> str:
    return os.path.join(_brackets_dir(data_dir), f"{bracket_id}.yaml")


def _lock(data_dir: str) -> FileLock:
    os.makedirs(_brackets_dir(data_dir), exist_ok=True)
    return FileLock(os.path.join(_brackets_dir(data_dir), '.lock'), timeout=LOCK_TIMEOUT)


def bracket_to_dict(bracket: Dict) -> Dict:
    data = {key: value for key, value in bracket.items() if key not in ('participants', 'matches')}
    data['participants'] = [p.to_dict() for p in bracket['participants']]
    data['matches'] = [m.to_dict() for m in bracket['matches']]
    return data


def bracket_from_dict(data: Dict) -> Dict:
    bracket = {key: value for key, value in data.items() if key not in ('participants', 'matches')}
    bracket['participants'] = [Participant.from_dict(p) for p in data.get('participants', [])]
    bracket['matches'] = [Match.from_dict(m) for m in data.get('matches', [])]
    return bracket


def _is_valid_id(bracket_id: str) -> bool:
    return bool(bracket_id) and all(c.isalnum() or c in '-_' for c in str(bracket_id))


def _read_bracket(data_dir: str, bracket_id: str) -> Optional[Dict]:
    path = _bracket_file(data_dir, bracket_id)
    if not os.path.exists(path):
        return None
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    return bracket_from_dict(data) if data else None


def _write_bracket(data_dir: str, bracket: Dict):
    with open(_bracket_file(data_dir, bracket['bracket_id']), 'w', encoding='utf-8') as f:
        yaml.safe_dump(bracket_to_dict(bracket), f, default_flow_style=False, sort_keys=False)


def save_bracket(data_dir: str, bracket: Dict) -> str:
    """Save a bracket, assigning a ``bracket_id`` if it has none. Returns the id."""
    if not bracket.get('bracket_id'):
        bracket['bracket_id'] = uuid.uuid4().hex
        for match in bracket['matches']:
            match.bracket_id = bracket['bracket_id']
    bracket_id = bracket['bracket_id']
    if not _is_valid_id(bracket_id):
        raise ValueError(f"Invalid bracket id: {bracket_id!r}")

    with _lock(data_dir):
        _write_bracket(data_dir, bracket)

    logger.debug("Saved bracket %s", bracket_id)
    return bracket_id


def load_bracket(data_dir: str, bracket_id: str) -> Optional[Dict]:
    """Load a bracket, or None if it does not exist."""
    if not _is_valid_id(bracket_id):
        return None
    with _lock(data_dir):
        return _read_bracket(data_dir, bracket_id)


def update_bracket(data_dir: str, bracket_id: str, update: Callable[[Dict], Any]) -> Optional[Tuple[Dict, Any]]:
    """
    Load a bracket, apply ``update`` to it and save it, all under one lock.

    Returns (bracket, whatever ``update`` returned), or None if the bracket
    does not exist. Nothing is written when ``update`` raises.
    """
    if not _is_valid_id(bracket_id):
        return None
    with _lock(data_dir):
        bracket = _read_bracket(data_dir, bracket_id)
        if bracket is None:
            return None
        result = update(bracket)
        _write_bracket(data_dir, bracket)

    logger.debug("Updated bracket %s", bracket_id)
    return bracket, result


def list_brackets(data_dir: str) -> List[Dict]:
    """Summaries of stored brackets, sorted by name."""
    directory = _brackets_dir(data_dir)
    if not os.path.isdir(directory):
        return []

    summaries = []
    for filename in os.listdir(directory):
        if not filename.endswith('.yaml'):
            continue
        bracket = load_bracket(data_dir, filename[:-len('.yaml')])
        if bracket is None:
            continue
        summaries.append({
            'bracket_id': bracket['bracket_id'],
            'name': bracket.get('name'),
            'bracket_type': bracket['bracket_type'],
            'status': bracket.get('status'),
            'champion': bracket.get('champion'),
            'participant_count': len(bracket['participants']),
        })
    return sorted(summaries, key=lambda s: (s['name'] or '', s['bracket_id']))
