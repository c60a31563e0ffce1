"""Web privacy check: classify the cookies, requests, and referrer policy of a crawled page."""

__version__ = "0.1.0"
