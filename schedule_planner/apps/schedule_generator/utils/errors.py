'''
Name: apps/schedule_generator/utils/errors.py
Description: Exceptions raised by the schedule generation core.
Authors: Schedule planner maintainers
Created: October 7, 2026
Last Modified: October 12, 2026
'''

from .constants import (
    KIND_COMPLEXITY, KIND_INFEASIBLE, KIND_PRECONDITION,
    MSG_COMPLEXITY, MSG_INFEASIBLE,
)


class ScheduleGenerationError(Exception):
    """Base class. `kind` is the error kind reported back to callers."""
    kind = None
    default_message = None

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InfeasibleScheduleError(ScheduleGenerationError):
    kind = KIND_INFEASIBLE
    default_message = MSG_INFEASIBLE

    def __init__(self, message=None, task=None):
        super().__init__(message)
        self.task = task


class ComplexityLimitExceededError(ScheduleGenerationError):
    kind = KIND_COMPLEXITY
    default_message = MSG_COMPLEXITY


class PreconditionViolatedError(ScheduleGenerationError):
    kind = KIND_PRECONDITION
