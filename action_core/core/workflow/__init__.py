"""Workflow decision logic for Switch, Merge and Loop nodes.

Condition routing and loop aggregation are pure functions; merge
synchronization is the only stateful piece.
"""

from .conditions import evaluate_switch, get_switch_output_ports, route_switch_node
from .loop import aggregate_loop_results, get_aggregation_key
from .merge import MergeSynchronizer

__all__ = [
    "MergeSynchronizer",
    "aggregate_loop_results",
    "evaluate_switch",
    "get_aggregation_key",
    "get_switch_output_ports",
    "route_switch_node",
]
