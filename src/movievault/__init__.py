"""MovieVault metadata core.

Resolves movie files to TMDB metadata through a cached, retried and
throttled client, and assembles records for the document writer.
"""

__version__ = "0.3.0"
