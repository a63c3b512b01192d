#!/usr/bin/env python3
"""Fixture library configuration

Backend selection, factory defaults and the job hooks cleared between tests.
"""
import os
from dataclasses import dataclass, field
from typing import List

from ..scheduler import DEFAULT_JOB_HOOKS

BACKEND_MEMORY = "memory"
BACKEND_HOST = "host"


def _bool(val: str) -> bool:
    return val.lower() == "true"


def _list(val: str) -> List[str]:
    return [item.strip() for item in val.split(",") if item.strip()]


@dataclass
class TestkitConfig:
    """Fixture factory and lifecycle settings"""
    __test__ = False

    # memory: in-process store, host: delegate to an injected host object
    backend: str = BACKEND_MEMORY

    # Raise instead of dropping trial_length/trial_period supplied alone
    strict_trial_args: bool = False

    created_via: str = "unit-test"
    job_hooks: List[str] = field(default_factory=lambda: list(DEFAULT_JOB_HOOKS))

    @classmethod
    def from_env(cls) -> 'TestkitConfig':
        """Load testkit config from environment"""
        hooks = os.getenv("TESTKIT_JOB_HOOKS")
        return cls(
            backend=os.getenv("TESTKIT_BACKEND", BACKEND_MEMORY).lower(),
            strict_trial_args=_bool(os.getenv("TESTKIT_STRICT_TRIAL_ARGS", "false")),
            created_via=os.getenv("TESTKIT_CREATED_VIA", "unit-test"),
            job_hooks=_list(hooks) if hooks is not None else list(DEFAULT_JOB_HOOKS),
        )
