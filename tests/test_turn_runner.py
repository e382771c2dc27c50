"""
Tests for the async turn runner.

Agents that time out, raise, or return an illegal move pass their turn;
cancelling a pending decision leaves the board untouched.
"""

import asyncio
import time
import unittest
from unittest.mock import Mock

import numpy as np

from agents.registry import build_agent
from agents.turn_runner import TurnRunner
from engine.board import EMPTY, Position
from engine.game import BlokusGame
from engine.move_generator import Move


def _mock_agent(thinking_time=0.0, **kwargs):
    agent = Mock(**kwargs)
    agent.thinking_time = thinking_time
    return agent


class TestTurnRunner(unittest.TestCase):

    def setUp(self):
        self.game = BlokusGame(2)
        self.agents = {
            0: build_agent("random", seed=1, thinking_time=0),
            1: build_agent("heuristic", seed=2, thinking_time=0),
        }
        self.runner = TurnRunner(self.game, self.agents, agent_timeout=5.0)

    def test_agent_success_places_move(self):
        async def run_test():
            outcome = await self.runner.run_agent_turn()
            self.assertTrue(outcome.success)
            self.assertEqual(self.game.board.count_cells(0), len(outcome.cells))
            self.assertEqual(self.game.current_player, 1)

        asyncio.run(run_test())

    def test_agent_exception_passes_turn(self):
        self.runner.agents[0] = _mock_agent(decide=Mock(side_effect=Exception("Agent error")))

        async def run_test():
            outcome = await self.runner.run_agent_turn(0)
            self.assertTrue(outcome.skipped)
            self.assertEqual(self.game.current_player, 1)
            self.assertTrue(np.all(self.game.board.grid == EMPTY))

        asyncio.run(run_test())

    def test_agent_timeout_passes_turn(self):
        self.runner.agent_timeout = 0.05
        self.runner.agents[0] = _mock_agent(decide=Mock(side_effect=lambda game, player_id: time.sleep(0.3)))

        async def run_test():
            outcome = await self.runner.run_agent_turn(0)
            self.assertTrue(outcome.skipped)
            self.assertEqual(self.game.current_player, 1)
            self.assertTrue(np.all(self.game.board.grid == EMPTY))

        asyncio.run(run_test())

    def test_no_move_passes_turn(self):
        self.runner.agents[0] = _mock_agent(decide=Mock(return_value=None))

        async def run_test():
            outcome = await self.runner.run_agent_turn(0)
            self.assertTrue(outcome.skipped)

        asyncio.run(run_test())

    def test_illegal_move_passes_turn(self):
        illegal = Move(1, 0, False, Position(5, 5), frozenset({Position(5, 5)}))
        self.runner.agents[0] = _mock_agent(decide=Mock(return_value=illegal))

        async def run_test():
            outcome = await self.runner.run_agent_turn(0)
            self.assertTrue(outcome.skipped)
            self.assertIsNone(self.game.board.owner_at(Position(5, 5)))

        asyncio.run(run_test())

    def test_cancel_leaves_board_unchanged(self):
        self.runner.agents[0] = _mock_agent(thinking_time=0.5, decide=Mock(side_effect=AssertionError))

        async def run_test():
            task = asyncio.ensure_future(self.runner.run_agent_turn(0))
            await asyncio.sleep(0.05)
            self.assertTrue(self.runner.is_thinking)
            self.assertTrue(self.runner.cancel())
            self.assertIsNone(await task)

        asyncio.run(run_test())
        self.assertTrue(np.all(self.game.board.grid == EMPTY))
        self.assertEqual(self.game.current_player, 0)
        self.assertEqual(self.game.history, [])
        self.runner.agents[0].decide.assert_not_called()

    def test_cancel_without_pending_decision(self):
        self.assertFalse(self.runner.cancel())

    def test_reset(self):
        async def run_test():
            await self.runner.run_agent_turn()
            await self.runner.run_agent_turn()

        asyncio.run(run_test())
        self.runner.reset()
        self.assertTrue(np.all(self.game.board.grid == EMPTY))
        self.assertEqual(self.game.move_count, 0)

    def test_human_seat(self):
        runner = TurnRunner(self.game, {1: self.agents[1]})

        async def run_test():
            with self.assertRaises(ValueError):
                await runner.run_agent_turn(0)
            result = await runner.run_until_game_over()
            self.assertEqual(self.game.move_count, 0)
            return result

        result = asyncio.run(run_test())
        self.assertFalse(self.game.game_over)
        self.assertEqual(set(result.scores), {0, 1})

    def test_run_until_game_over(self):
        placements = []
        self.game.subscribe(lambda outcome: placements.append(outcome) if outcome.success else None)

        result = asyncio.run(self.runner.run_until_game_over(max_turns=200))

        self.assertTrue(self.game.game_over)
        self.assertTrue(self.game.is_game_over())
        self.assertEqual(len(placements), self.game.move_count)
        self.assertEqual(set(result.scores), {0, 1})
        for player_id in (0, 1):
            self.assertEqual(self.game.board.count_cells(player_id),
                             self.game.players[player_id].placed_cell_count)

    def test_random_seats_finish_the_game(self):
        for seed in range(5):
            with self.subTest(seed=seed):
                game = BlokusGame(2)
                agents = {pid: build_agent("random", seed=seed + pid, thinking_time=0) for pid in (0, 1)}
                runner = TurnRunner(game, agents)
                skips = []
                game.subscribe(lambda outcome: skips.append(outcome) if outcome.skipped else None)

                asyncio.run(runner.run_until_game_over(max_turns=200))

                self.assertTrue(game.game_over)
                for player_id in (0, 1):
                    self.assertFalse(game.rule_engine.can_player_continue(player_id))
                # The turn only reaches seats that can still place.
                self.assertEqual(skips, [])


if __name__ == '__main__':
    unittest.main()
