"""hunted_thief/env_registration.py — Register Hunted Thief envs with Gymnasium.

Import this module to register all environments::

    import hunted_thief.env_registration
    env = gymnasium.make("hunted_thief/Demo-v0")
"""

import gymnasium as gym

gym.register(
    id="hunted_thief/Demo-v0",
    entry_point="hunted_thief.env:HuntedThiefEnv",
    kwargs={"level": "demo", "max_steps": 200},
    max_episode_steps=200,
)

gym.register(
    id="hunted_thief/Corridor-v0",
    entry_point="hunted_thief.env:HuntedThiefEnv",
    kwargs={"level": "corridor", "max_steps": 50},
    max_episode_steps=50,
)
