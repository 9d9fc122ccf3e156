"""hunted_thief/env.py — Gymnasium environment wrapper.

Thin adapter: each step is one discrete key press turned into a single
move_player call. Rejected moves leave the state untouched.
"""

from __future__ import annotations

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from hunted_thief.errors import SokobanError
from hunted_thief.grids import load_level
from hunted_thief.kernel import EscapedEvent, SokobanKernel
from hunted_thief.observation import NUM_PLANES, extract_observation
from hunted_thief.tiles import Direction

ACTIONS: list[Direction] = [Direction.LEFT, Direction.UP, Direction.RIGHT, Direction.DOWN]
NUM_ACTIONS = len(ACTIONS)


class HuntedThiefEnv(gym.Env):
    """Gymnasium environment around SokobanKernel."""

    metadata = {"render_modes": []}

    def __init__(
        self,
        level: str = "demo",
        render_mode: str | None = None,
        max_steps: int = 200,
    ) -> None:
        super().__init__()
        self.level_name = level
        self.render_mode = render_mode
        self.max_steps = max_steps

        spec = load_level(level)
        self.observation_space = spaces.Box(
            low=0,
            high=3,
            shape=(NUM_PLANES, spec.height, spec.width),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(NUM_ACTIONS)

        self.kernel: SokobanKernel | None = None
        self._step_count = 0
        self._rejected = 0

    def reset(
        self,
        *,
        seed: int | None = None,
        options: dict | None = None,
    ) -> tuple[np.ndarray, dict]:
        super().reset(seed=seed)
        self.kernel = SokobanKernel.from_map(*load_level(self.level_name).as_args())
        self._step_count = 0
        self._rejected = 0
        return self._get_obs(), self._get_info(error=None)

    def step(
        self, action: int
    ) -> tuple[np.ndarray, float, bool, bool, dict]:
        error = None
        events = []
        try:
            events = self.kernel.move_player(ACTIONS[action])
        except SokobanError as e:
            error = type(e).__name__
            self._rejected += 1
        self._step_count += 1

        reward = 1.0 if any(isinstance(e, EscapedEvent) for e in events) else 0.0
        terminated = bool(self.kernel.escaped or self.kernel.player_position() is None)
        truncated = self._step_count >= self.max_steps

        return self._get_obs(), reward, terminated, truncated, self._get_info(error=error)

    def _get_obs(self) -> np.ndarray:
        return extract_observation(self.kernel)

    def _get_info(self, error: str | None) -> dict:
        return {
            "step": self._step_count,
            "player": self.kernel.player_position(),
            "chest_collected": self.kernel.chest_collected,
            "escaped": self.kernel.escaped,
            "rejected": self._rejected,
            "error": error,
        }
