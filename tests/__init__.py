"""
algokit Testing Package.

Test Organization:
    unit/: Unit tests for individual components
    conftest.py: Shared fixtures (fake clock, fake memory probe, trackers)
"""
