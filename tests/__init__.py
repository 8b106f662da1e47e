# Userbase Test Suite
"""
Test suite for the Userbase API.

Key principle: Test through API, not internals.
"""
