# tests/fixtures/__init__.py
"""Shared test fixtures for equalscheck tests.

Available modules:
- domain: sample classes covering the shapes user classes take
"""
