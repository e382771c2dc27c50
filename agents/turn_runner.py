"""
Async turn loop for automated seats.
"""

import asyncio
import logging
import time
from typing import Dict, Optional

from engine.game import BlokusGame, PlacementOutcome
from engine.scoring import GameResult

from agents.gameplay_protocol import GameplayAgentProtocol

logger = logging.getLogger(__name__)


class TurnRunner:
    """
    Drives agent turns for a game.

    Behavior:
    - The agent waits out its thinking delay, then decides in a worker
      thread under a timeout.
    - The decision is committed only after it completes; a cancelled or
      superseded decision never touches the board.
    - If the agent finds nothing to place, times out, raises, or returns a
      rejected move, the turn is skipped.

    Cancelling or timing out cannot stop the worker thread: an abandoned
    ``decide`` runs to completion against the live board and its result is
    dropped. It shares the agent's RNG with later decisions on that seat,
    so seeded play is only reproducible when no decision is abandoned.
    """

    def __init__(self, game: BlokusGame, agents: Dict[int, GameplayAgentProtocol], agent_timeout: float = 5.0):
        self.game = game
        self.agents = dict(agents)
        self.agent_timeout = agent_timeout
        self._pending: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def is_thinking(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def _decide(self, agent: GameplayAgentProtocol, player_id: int):
        if agent.thinking_time > 0:
            await asyncio.sleep(agent.thinking_time)
        loop = asyncio.get_running_loop()
        return await asyncio.wait_for(
            loop.run_in_executor(None, agent.decide, self.game, player_id),
            timeout=self.agent_timeout,
        )

    async def run_agent_turn(self, player_id: Optional[int] = None) -> Optional[PlacementOutcome]:
        """
        Play one turn for an automated seat.

        Returns:
            The committed outcome (placement or skip), or None if the game is
            over or the decision was cancelled.

        Raises:
            ValueError: if the seat has no agent
        """
        game = self.game
        if player_id is None:
            player_id = game.current_player
        if game.game_over:
            return None
        agent = self.agents.get(player_id)
        if agent is None:
            raise ValueError(f"Player {player_id} has no agent")

        generation = self._generation
        start = time.perf_counter()
        self._pending = asyncio.ensure_future(self._decide(agent, player_id))
        try:
            move = await self._pending
        except asyncio.CancelledError:
            if generation != self._generation:
                logger.info(f"AGENT TURN cancelled: player={player_id}")
                return None
            raise
        except asyncio.TimeoutError:
            logger.warning(f"AGENT TURN: {agent!r} timed out after {self.agent_timeout}s for player {player_id}")
            return game.skip_turn(player_id)
        except Exception as e:
            logger.error(f"AGENT TURN: {agent!r} raised exception for player {player_id}: {e}")
            return game.skip_turn(player_id)
        finally:
            self._pending = None

        if generation != self._generation:
            logger.info(f"AGENT TURN discarded stale decision: player={player_id}")
            return None

        if move is None:
            logger.info(f"AGENT TURN: No legal moves for player {player_id}, skipping turn")
            return game.skip_turn(player_id)

        outcome = game.place(move.to_request(player_id))
        if not outcome.success:
            logger.warning(f"AGENT TURN: Invalid move {move} from {agent!r} for player {player_id}: "
                           f"{outcome.validation.violated_rule.name}")
            return game.skip_turn(player_id)

        logger.info(f"AGENT TURN: player={player_id} placed piece {move.piece_id} at {move.anchor} "
                    f"in {time.perf_counter() - start:.4f}s")
        return outcome

    def cancel(self) -> bool:
        """
        Abort a pending decision. The board is left as it was.

        Returns:
            True if a decision was pending
        """
        self._generation += 1
        if self.is_thinking:
            self._pending.cancel()
            return True
        return False

    def reset(self) -> None:
        """Cancel any pending decision and restart the game."""
        self.cancel()
        self.game.reset()
        for agent in self.agents.values():
            agent.reset()

    async def run_until_game_over(self, max_turns: int = 1000) -> GameResult:
        """
        Play agent turns until the game ends, a human seat is reached or
        ``max_turns`` turns have been played.
        """
        turns = 0
        while not self.game.game_over and turns < max_turns:
            player_id = self.game.current_player
            if player_id not in self.agents:
                logger.info(f"Waiting for human move from player {player_id}")
                break
            outcome = await self.run_agent_turn(player_id)
            if outcome is None:
                break
            turns += 1
        return self.game.get_game_result()
