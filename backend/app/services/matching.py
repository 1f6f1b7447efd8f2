"""Greedy first-come rider-to-driver assignment.

Drivers are visited in registration order and each takes riders off the
front of a FIFO queue until its seats are full. No attempt is made to
minimise cars or balance loads: first to sign up is first to be seated.
"""
from collections import deque
from dataclasses import dataclass, field
from typing import Sequence


@dataclass
class Assignment:
    driver_rsvp_id: str
    rider_rsvp_ids: list[str] = field(default_factory=list)


@dataclass
class MatchResult:
    assignments: list[Assignment]
    unassigned_rsvp_ids: list[str]

    @property
    def riders_assigned(self) -> int:
        return sum(len(a.rider_rsvp_ids) for a in self.assignments)

    @property
    def riders_unassigned(self) -> int:
        return len(self.unassigned_rsvp_ids)


def assign_riders_to_drivers(drivers: Sequence, riders: Sequence) -> MatchResult:
    """Fill each driver's ``capacity`` from the rider queue, in order.

    Every driver gets an Assignment, even when no riders are left for it.
    """
    queue = deque(rider.rsvp_id for rider in riders)
    assignments = []
    for driver in drivers:
        seats = driver.capacity or 0
        assignment = Assignment(driver_rsvp_id=driver.rsvp_id)
        while seats > 0 and queue:
            assignment.rider_rsvp_ids.append(queue.popleft())
            seats -= 1
        assignments.append(assignment)
    return MatchResult(assignments=assignments, unassigned_rsvp_ids=list(queue))
