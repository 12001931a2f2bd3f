"""Test utilities for homing routers.

Provides a guard recorder and navigation assertions::

    from homing.testing import GuardRecorder, assert_navigation_failure
"""

from homing.testing.assertions import assert_navigation_failure, assert_route
from homing.testing.recorder import GuardCall, GuardRecorder

__all__ = [
    "GuardCall",
    "GuardRecorder",
    "assert_navigation_failure",
    "assert_route",
]
