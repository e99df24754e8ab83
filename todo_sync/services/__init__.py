"""Services Layer: the controller that runs core-planned effects against the remote store.

Invariants:
    - Services orchestrate async IO around pure core functions
    - Remote failures stop here; only programming errors propagate further
"""
