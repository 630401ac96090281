"""
Test suite for ndtensor

Contains:
- tests/unit/          : Unit tests for individual modules
"""
