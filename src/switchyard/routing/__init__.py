"""Routing — facet-indexed routers composed into a tree.

Routers are built during setup, frozen, and then read concurrently.
Per-request path consumption lives in a RoutingContext passed by
parameter through every level.
"""

from switchyard.routing.actions import Action, Delegate, Handle, Select, Split, as_action
from switchyard.routing.context import RoutingContext, split_path
from switchyard.routing.entry import RoutingEntry
from switchyard.routing.router import Router, pattern_predicate

__all__ = [
    "Action",
    "Delegate",
    "Handle",
    "Router",
    "RoutingContext",
    "RoutingEntry",
    "Select",
    "Split",
    "as_action",
    "pattern_predicate",
    "split_path",
]
