"""
Events Service - client-side event telemetry buffer

Collects application events in memory and ships them to a remote collector:
- Batches bursts of events into one request per cooldown interval
- Persists unsent events so they survive restarts and network failures
- Retries failed flushes on the next cooldown, indefinitely
"""

__version__ = "0.1.0"
