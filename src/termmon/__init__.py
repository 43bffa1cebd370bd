"""termmon -- shell command history collection service.

Terminal sessions report every executed command (exit status, working
directory and a per-session sequence index) over HTTP. The service
records them in SQLite and replays the most recent entries as a plain
text digest.
"""

__version__ = "0.1.0"
