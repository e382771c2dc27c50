"""
Hard-tier agent.
"""

from typing import Any, Dict, Optional

from agents.heuristic_agent import HeuristicAgent


class OptimalAgent(HeuristicAgent):
    """
    Hard-tier agent. Scores candidates exactly like the greedy agent with
    little jitter; subclasses may override ``select_action`` to add lookahead.
    """

    def __init__(self, seed: Optional[int] = None, randomness_factor: float = 0.05,
                 aggressive_weight: float = 1.0, defensive_weight: float = 0.5):
        super().__init__(seed=seed, randomness_factor=randomness_factor,
                         aggressive_weight=aggressive_weight, defensive_weight=defensive_weight)

    def get_action_info(self) -> Dict[str, Any]:
        info = super().get_action_info()
        info.update(name="OptimalAgent", type="optimal",
                    description="Hard tier; greedy scoring with minimal jitter")
        return info
