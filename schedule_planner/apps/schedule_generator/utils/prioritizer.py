'''
Name: apps/schedule_generator/utils/prioritizer.py
Description: Orders pending tasks for placement.
Authors: Schedule planner maintainers
Created: October 7, 2026
Last Modified: October 19, 2026
'''

import logging
from datetime import datetime, timedelta
from typing import List, Tuple, Optional

from .constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


def remaining_effort(task: dict) -> timedelta:
    """expected_completion_time (minutes) scaled by the incomplete fraction."""
    minutes = float(task["expected_completion_time"]) * (1 - float(task.get("completion_level", 0)) / 100)
    return timedelta(minutes=max(minutes, 0.0))


def is_satisfied(task: dict) -> bool:
    return remaining_effort(task) <= timedelta(0)


def _creation_key(task: dict) -> Tuple:
    # stamped records first, in creation order; ints compare numerically, other ids as strings
    created = task.get("created_at")
    task_id = task.get("id")
    created_key = (0, created) if created is not None else (1, None)
    id_key = (0, task_id) if isinstance(task_id, int) else (1, str(task_id))
    return created_key + id_key


def task_sort_key(task: dict) -> Tuple:
    # Earlier deadline first, then higher priority, then creation order
    return (task["deadline"], -float(task.get("priority", 0))) + _creation_key(task)


def split_completed(tasks: List[dict]) -> Tuple[List[dict], List[dict]]:
    """Partition tasks into (pending, completed), both in input order."""
    pending, completed = [], []
    for task in tasks:
        (completed if is_satisfied(task) else pending).append(task)
    return pending, completed


def rank(tasks: List[dict], now: Optional[datetime] = None) -> List[dict]:
    """
    Return the tasks with remaining effort, in the order they should be placed.
    `now` does not change the order: overdue tasks are still ranked by deadline.
    The order does not depend on the order of `tasks`.
    """
    pending, completed = split_completed(tasks)
    ranked = sorted(pending, key=task_sort_key)
    logger.debug("rank: now=%s pending=%d completed=%d order=%r",
                  now, len(ranked), len(completed), [t.get("id") for t in ranked])
    return ranked
