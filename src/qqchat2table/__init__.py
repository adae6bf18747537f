"""qqchat2table — Split a QQ chat-history export into one CSV table per conversation."""

__version__ = "0.1.0"
