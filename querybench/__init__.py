"""
querybench: per-identifier latency harness for entity-graph queries.

Builds one executor per query family (Person, Movie, User, or raw JSON),
invokes it once per identifier and hands back (duration, payload) pairs.
"""

__version__ = "0.1.0"
