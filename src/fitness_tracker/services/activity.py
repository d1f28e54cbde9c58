"""Activity goal progress from sensed and manual values."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from fitness_tracker.domain.days import ActivityMetric, ActivityTally, Day
from fitness_tracker.services.accounts import AccountService
from fitness_tracker.services.days import DayService


def progress(current: float, goal: float) -> float:
    """Return the completed share of a goal in ``[0, 1]``."""
    if goal <= 0:
        return 0.0
    return min(max(current / goal, 0.0), 1.0)


def manual_delta(tally: ActivityTally) -> float:
    """Return the part of the displayed total that was entered by hand."""
    return tally.total - tally.sensed


def apply_sensed_reading(tally: ActivityTally, sensed: float) -> ActivityTally:
    """Replace the sensed amount while keeping the manual delta."""
    delta = manual_delta(tally)
    reading = max(sensed, 0.0)
    return ActivityTally(total=max(reading + delta, 0.0), sensed=reading)


def apply_manual_adjustment(tally: ActivityTally, delta: float) -> ActivityTally:
    """Add a manual change to the displayed total."""
    return ActivityTally(total=max(tally.total + delta, 0.0), sensed=tally.sensed)


def tally_for(day: Day, metric: ActivityMetric) -> ActivityTally:
    """Return the tally for a metric, empty when never recorded."""
    return day.activity.get(metric, ActivityTally())


@dataclass
class ActivityService:
    """Service that records activity values and reports goal progress."""

    days: DayService
    accounts: AccountService

    def record_reading(
        self,
        account_id: UUID,
        day: date | datetime,
        metric: ActivityMetric,
        sensed: float,
    ) -> Day:
        """Store a new sensor reading for a metric."""
        current = self.days.get_day(account_id, day)
        current.activity[metric] = apply_sensed_reading(
            tally_for(current, metric), sensed
        )
        self.days.commit(account_id, current)
        return current

    def adjust(
        self,
        account_id: UUID,
        day: date | datetime,
        metric: ActivityMetric,
        delta: float,
    ) -> Day:
        """Apply a manual adjustment to a metric."""
        current = self.days.get_day(account_id, day)
        current.activity[metric] = apply_manual_adjustment(
            tally_for(current, metric), delta
        )
        self.days.commit(account_id, current)
        return current

    def set_goal(self, account_id: UUID, metric: ActivityMetric, goal: float) -> None:
        """Store a daily goal for a metric."""
        account = self.accounts.ensure_account(account_id)
        account.activity_goals[metric] = max(goal, 0.0)
        self.accounts.save(account)

    def get_progress(
        self, account_id: UUID, day: date | datetime
    ) -> dict[ActivityMetric, float]:
        """Return progress towards each activity goal for a day."""
        account = self.accounts.ensure_account(account_id)
        current = self.days.get_day(account_id, day)
        return {
            metric: progress(tally_for(current, metric).total, goal)
            for metric, goal in account.activity_goals.items()
        }
