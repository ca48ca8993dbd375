"""Stale station finder: ranks nearby stations whose dump data is out of date."""
