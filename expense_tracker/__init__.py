"""
Personal Expense Tracker - Source Package

A single-user monthly expense tracker. Expenses and budget limits live
in memory and are mirrored to local storage on every change.

DESIGN PRINCIPLES:
1. Stores own their data, persistence is injected
2. Aggregation is pure and recomputed on every read
3. Invalid input is rejected without mutating anything
4. Corrupt saved data degrades to defaults, never crashes the app
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Expense Tracker Team"
