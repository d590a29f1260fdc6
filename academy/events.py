"""
Random decision events.

Templates are loaded once and never mutated. Each trigger produces a fresh
EventInstance whose options are parameterized against live state (e.g. a
transfer offer sized to one specific player's value).
"""

import itertools
from typing import Optional, Union

from academy.config import (
    EVENT_FIRST_DELAY,
    EVENT_INTERVAL_RANGE,
    EVENT_REFERENCE_OFFER,
    EVENT_RETRY_DELAY,
    EVENT_TEMPLATES,
    REGIONS,
    TRANSFER_TARGET_AGES,
    TRANSFER_TARGET_MIN_POTENTIAL,
)
from academy.economy import round_half_up
from academy.models import EventInstance, EventOutcome, Player, RandomEventTemplate, SimulationState
from academy.randomness import RandomValueProvider
from academy.rejections import Rejection, invalid, not_found
from academy.tasks import TaskScheduler

TASK_KEY = "event:next"

# Base offer for a transfer target is its value times U[0.5, 1.5]
OFFER_NOISE = (0.5, 1.5)

STATUS_BOUNDS = (0, 100)


def load_templates() -> list[RandomEventTemplate]:
    return [RandomEventTemplate(**t) for t in EVENT_TEMPLATES]


def _clamp_status(value: int) -> int:
    low, high = STATUS_BOUNDS
    return max(low, min(high, value))


class RandomEventEngine:
    """Selects, parameterizes and resolves decision events on a recurring cadence."""

    def __init__(self, state: SimulationState, rng: RandomValueProvider, scheduler: TaskScheduler):
        self.state = state
        self.rng = rng
        self.scheduler = scheduler
        self.templates = load_templates()
        self._ids = itertools.count(1)

    # --- Cadence ---

    def start(self) -> None:
        self.scheduler.schedule(TASK_KEY, EVENT_FIRST_DELAY, self.trigger)

    def schedule_next(self) -> float:
        return self.scheduler.schedule(TASK_KEY, self.rng.uniform(*EVENT_INTERVAL_RANGE), self.trigger)

    def schedule_retry(self) -> float:
        return self.scheduler.schedule(TASK_KEY, EVENT_RETRY_DELAY, self.trigger)

    # --- Trigger ---

    def find_transfer_target(self) -> Optional[Player]:
        min_age, max_age = TRANSFER_TARGET_AGES
        return next(
            (
                p for p in self.state.players
                if p.potential >= TRANSFER_TARGET_MIN_POTENTIAL and min_age <= p.age <= max_age
            ),
            None,
        )

    def trigger(self) -> Optional[EventInstance]:
        """
        Pick a template and build an instance for it.

        Returns None when an event is already waiting for an answer, or when the
        picked template needs a transfer target and none exists (a retry is scheduled).
        """
        if self.state.pending_event is not None:
            return None
        if self.state.phase != "season_in_progress":
            self.schedule_next()
            return None

        template = self.rng.choice(self.templates)
        target = None
        if template.requires_transfer_target:
            target = self.find_transfer_target()
            if target is None:
                print(f"[Events] No suitable player for '{template.id}' — retrying shortly")
                self.schedule_retry()
                return None

        instance = self._instantiate(template, target)
        self.state.pending_event = instance
        print(f"[Events] {instance.title}")
        return instance

    def _instantiate(self, template: RandomEventTemplate, target: Optional[Player]) -> EventInstance:
        options = [opt.model_copy(deep=True) for opt in template.options]
        description = template.description
        if "{region}" in description:
            region = self.rng.choice(REGIONS)
            description = description.replace("{region}", region["name"])

        if target is not None:
            description = description.replace(
                "{player}", f"our {target.age}-year-old {target.position_name.lower()} {target.name}"
            )
            base_offer = target.value * self.rng.uniform(*OFFER_NOISE)
            for opt in options:
                if opt.budget:
                    opt.budget = round_half_up(base_offer * (opt.budget / EVENT_REFERENCE_OFFER))
                if opt.transfer == "full":
                    opt.text = f"Sell the player (€{opt.budget:,})"
                elif opt.transfer == "partial":
                    opt.text = f"Deal with bonuses (€{opt.budget:,} + sell-on %)"

        return EventInstance(
            id=f"event_{next(self._ids)}",
            template_id=template.id,
            title=template.title,
            description=description,
            options=options,
            target_player_id=target.id if target else None,
            triggered_at=self.scheduler.now,
        )

    # --- Resolution ---

    def apply_option(self, event_id: str, option_index: int) -> Union[EventOutcome, Rejection]:
        instance = self.state.pending_event
        if instance is None or instance.id != event_id:
            return not_found("Event", event_id)
        if not 0 <= option_index < len(instance.options):
            return invalid(
                "InvalidOption",
                f"Option index must be between 0 and {len(instance.options) - 1}",
                option_index=option_index,
            )

        option = instance.options[option_index]
        target = None
        if option.transfer in ("full", "partial"):
            target = self.state.find_player(instance.target_player_id) if instance.target_player_id else None
            if target is None:
                return not_found("Player", instance.target_player_id)

        # --- checks passed, commit ---
        outcome = EventOutcome(event_id=event_id, option_index=option_index)

        if option.budget:
            self.state.budget += option.budget
            outcome.budget_delta = option.budget
            verb = "increased" if option.budget > 0 else "decreased"
            outcome.messages.append(f"Budget {verb} by €{abs(option.budget):,}")

        if option.transfer == "full":
            self.state.players.remove(target)
            self.state.achievements.revenue_from_transfers += option.budget
            outcome.removed_player_id = target.id
            outcome.messages.append(f"{target.name} sold for €{option.budget:,}")
        elif option.transfer == "partial":
            self.state.achievements.revenue_from_transfers += option.budget
            outcome.messages.append(f"Deal agreed: €{option.budget:,} plus future bonuses")
        elif option.transfer == "retain":
            outcome.messages.append("The talented player stays at the academy")

        if option.coaching_level > 0:
            if self.rng.random() * 100 < option.chance:
                self.state.coaching_level = _clamp_status(self.state.coaching_level + option.coaching_level)
                outcome.coaching_applied = True
                outcome.messages.append("Coaching staff level raised")
            else:
                outcome.messages.append("The coach turned the offer down")

        if option.infrastructure > 0 and self.state.facilities:
            facility = self.rng.choice(self.state.facilities)
            improvement = min(option.infrastructure, facility.max_level - facility.level)
            outcome.facility_id = facility.id
            if improvement > 0:
                facility.level += improvement
                outcome.facility_improvement = improvement
                outcome.messages.append(f"{facility.name} improved by {improvement}%")
            else:
                outcome.messages.append(f"{facility.name} is already at its maximum level")

        if option.injuries:
            self.state.injury_risk = _clamp_status(self.state.injury_risk + option.injuries)
        if option.reputation:
            self.state.reputation = _clamp_status(self.state.reputation + option.reputation)
        if option.morale:
            self.state.morale = _clamp_status(self.state.morale + option.morale)
        if option.experience:
            self.state.team_experience = _clamp_status(self.state.team_experience + option.experience)

        self.state.pending_event = None
        self.schedule_next()
        print(f"[Events] Decision on '{instance.title}': {option.text}")
        return outcome

    def dismiss(self, event_id: str) -> Optional[Rejection]:
        """Close a pending event without choosing an option."""
        instance = self.state.pending_event
        if instance is None or instance.id != event_id:
            return not_found("Event", event_id)
        self.state.pending_event = None
        self.schedule_next()
        return None

    def cancel(self) -> None:
        """Drop the cadence task and any unanswered event."""
        self.scheduler.cancel(TASK_KEY)
        self.state.pending_event = None
