"""feedwatch: per-chat RSS subscriptions for a Telegram bot."""

__version__ = "0.1.0"
