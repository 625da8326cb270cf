"""Gamification module.

Provides points, badges, levels, leaderboards and event-driven gamification
over student progress records supplied by the caller.
"""
