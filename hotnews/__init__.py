"""hotnews: AI news aggregation pipeline and query API."""

__version__ = "0.1.0"
