"""
Subscription Testkit Factory

Factory functions for building a FixtureManager with its backend strategy,
scheduler and job registry. This is the ONLY place that picks a backend.

Usage:
    from subscription_testkit.factory import create_fixture_manager
    manager = create_fixture_manager(config)
"""
from typing import Any, Optional

from .assertions import SubscriptionAssertions
from .backends import create_backend
from .clock import FixtureClock
from .config import TestkitConfig, get_settings
from .lifecycle import FixtureManager
from .protocols import AssertionSurfaceProtocol, JobSchedulerProtocol
from .scheduler import InMemoryJobScheduler, JobRegistry


def create_fixture_manager(
    config: Optional[TestkitConfig] = None,
    host: Optional[Any] = None,
    scheduler: Optional[JobSchedulerProtocol] = None,
    clock: Optional[FixtureClock] = None,
    surface: Optional[AssertionSurfaceProtocol] = None,
) -> FixtureManager:
    """
    Create a FixtureManager wired to the configured backend.

    Args:
        config: Testkit configuration (defaults to settings from env)
        host: Host capability object for the host backend
        scheduler: Job scheduler; an InMemoryJobScheduler when omitted
        clock: Shared fixture clock
        surface: Assertion surface for failures (raises AssertionError by default)

    Returns:
        Configured FixtureManager (not yet set up)
    """
    config = config or get_settings()
    clock = clock or FixtureClock()

    backend = create_backend(config, host=host, clock=clock)

    return FixtureManager(
        backend=backend,
        scheduler=scheduler if scheduler is not None else InMemoryJobScheduler(),
        job_registry=JobRegistry(config.job_hooks),
        config=config,
        clock=clock,
        assertions=SubscriptionAssertions(surface),
    )
