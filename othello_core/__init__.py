"""
Othello core Python package.

This package contains the game-rules engine, the move evaluator and the
difficulty-tiered AI, plus the thin session/persistence layers that the CLI
and the Flask app drive.
Modules:
- board.py: Board, Cell, Coord
- state.py: GameState
- rules.py: flips, legal moves, move application, turn advance, scoring
- evaluate.py: static move evaluation and the best-move hint
- ai.py: Easy / Normal / Hard move selection
- scheduler.py: deferred task runners for the AI thinking delay
- session.py: GameSession orchestrator
- events.py, settings.py, stats.py, db.py: collaborator-facing models and storage
"""
