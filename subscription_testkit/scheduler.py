"""
Job scheduling

In-memory one-shot job scheduler and the registry of job hooks a fixture
manager clears between tests.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


# Subscription job hooks
TRIAL_END_HOOK = "woocommerce_scheduled_subscription_trial_end"
PAYMENT_HOOK = "woocommerce_scheduled_subscription_payment"
EXPIRATION_HOOK = "woocommerce_scheduled_subscription_expiration"
END_OF_PREPAID_TERM_HOOK = "woocommerce_scheduled_subscription_end_of_prepaid_term"
PAYMENT_RETRY_HOOK = "woocommerce_subscription_payment_retry"

DEFAULT_JOB_HOOKS = (
    TRIAL_END_HOOK,
    PAYMENT_HOOK,
    EXPIRATION_HOOK,
    END_OF_PREPAID_TERM_HOOK,
    PAYMENT_RETRY_HOOK,
)


@dataclass
class ScheduledAction:
    """A pending one-shot job"""
    action_id: int
    timestamp: int
    hook: str
    args: Dict[str, Any] = field(default_factory=dict)


class JobRegistry:
    """Job hooks a fixture manager unschedules on set up and tear down"""

    def __init__(self, hooks: Optional[Iterable[str]] = None):
        self._hooks: List[str] = []
        self.register(*(DEFAULT_JOB_HOOKS if hooks is None else hooks))

    def register(self, *hooks: str) -> None:
        for hook in hooks:
            if hook and hook not in self._hooks:
                self._hooks.append(hook)

    def unregister(self, hook: str) -> None:
        if hook in self._hooks:
            self._hooks.remove(hook)

    @property
    def hooks(self) -> List[str]:
        return list(self._hooks)

    def __contains__(self, hook: str) -> bool:
        return hook in self._hooks

    def __len__(self) -> int:
        return len(self._hooks)


class InMemoryJobScheduler:
    """Records scheduled jobs without running them"""

    def __init__(self):
        self._actions: List[ScheduledAction] = []
        self._next_id = 1

    def schedule_single_action(
        self, timestamp: int, hook: str, args: Optional[Dict[str, Any]] = None
    ) -> ScheduledAction:
        action = ScheduledAction(
            action_id=self._next_id,
            timestamp=int(timestamp),
            hook=hook,
            args=dict(args or {}),
        )
        self._next_id += 1
        self._actions.append(action)
        logger.debug(f"Scheduled {hook} at {action.timestamp} with {action.args}")
        return action

    def unschedule_all_actions(self, hook: str) -> int:
        before = len(self._actions)
        self._actions = [a for a in self._actions if a.hook != hook]
        return before - len(self._actions)

    def get_scheduled_actions(self, hook: Optional[str] = None) -> List[ScheduledAction]:
        if hook is None:
            return list(self._actions)
        return [a for a in self._actions if a.hook == hook]

    def next_scheduled(self, hook: str, args: Optional[Dict[str, Any]] = None) -> Optional[int]:
        """Timestamp of the earliest pending job for hook (and args, if given)"""
        timestamps = [
            a.timestamp for a in self._actions
            if a.hook == hook and (args is None or a.args == args)
        ]
        return min(timestamps) if timestamps else None
