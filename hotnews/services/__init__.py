"""Services layer for hotnews.

Services implement business logic and orchestrate data operations.
Organized by feature:
- collector: Collection, normalization, dedup, scoring and retention
- feed: Ranked read queries for the news API
"""
