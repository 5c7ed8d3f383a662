"""
Test suite for probability-space

Contains:
- tests/unit/          : Unit tests for the probability space, numerical
                         safeguards, contracts and the check harness
"""
