"""
Tests for the branching-tree front end.

Test organization:
- test_models.py: Tree, Node and position helpers
- test_parser.py: Box-drawing, ASCII and indented notations, malformed input
- test_validator.py: Structural invariants and their error types
- test_paths.py: Root-to-leaf path enumeration
- test_renderer.py: Canonical rendering and round trips
"""
