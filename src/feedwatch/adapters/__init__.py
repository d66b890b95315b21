"""Adapters that bind the core ports to SQLite, feedparser, and Telegram."""
