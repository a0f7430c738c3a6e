"""
tetris_game Package
===================

Falling-block puzzle engine: the rules, the game state machine and the
agent/human front ends built on top of it.

- Piece shapes and rotation
- Collision, wall kicks and line clears
- Scoring and level progression
- Gravity cadence

All tunable parameters are in game_config.yaml.
"""
