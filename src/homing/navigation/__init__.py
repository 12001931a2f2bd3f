"""Navigation — the transition engine and its location backends.

A transition walks an ordered queue of guards, each of which must call
``next`` before the queue advances.  Any newer navigation cancels the
pending one at its next step.
"""
