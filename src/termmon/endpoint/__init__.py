"""HTTP endpoint for termmon.

Accepts command reports from terminal sessions on ``POST /commands`` and
replays the recent history on ``GET /commands``.
"""
