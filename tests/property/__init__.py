# tests/property/__init__.py
"""Property-based tests for equalscheck.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of. Scrambling is only useful to an
equality verifier if its laws hold for every object it is handed.

Test categories:
- core/: clone, scramble and prefab laws
"""
