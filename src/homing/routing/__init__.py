"""Routing — route configuration compiled into a matchable table.

Records are registered up front (or added later through the router)
and matched in priority order: depth-first, children before parents,
the ``*`` wildcard last.
"""
