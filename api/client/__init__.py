"""
Async client and state stores for driving the admin API from Python.
"""
