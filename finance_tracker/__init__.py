"""
Finance Tracker - Source Package

A single-user cashflow form: cash, bank balances, income and fixed
expenses go in, a monthly remainder split into spending jars comes out.

DESIGN PRINCIPLES:
1. One record per user, replaced wholesale on load and save
2. Derived figures are pure functions of the state
3. Malformed input degrades to zero, never to an exception
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
