"""Core domain package for feedwatch.

Core contains the refresh, deduplication, and retention logic plus the
command grammar, without any Telegram, feedparser, or SQLite code, keeping the
business logic portable.
"""
