"""
Test suite for mtext_layout project.

This module contains all unit tests for the mtext_layout package.
"""
