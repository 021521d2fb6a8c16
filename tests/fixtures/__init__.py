"""Test fixtures for Historian.

- contexts: tracked objects and recording contexts for replay tests
"""
