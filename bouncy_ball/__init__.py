"""
Bouncy Ball Package
===================

A small physics puzzle: drop a ball from the funnel and bounce it off the
barriers so it passes through every target.

- Shapes, scene and physics wiring live in ``bouncy_ball.core``
- All tunable parameters (scene size, physics, layout, colors) are in
  game_config.yaml
"""
