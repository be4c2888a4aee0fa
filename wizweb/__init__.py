"""HTTP server for in-memory web pages and CGI endpoints, with a CAN configuration page."""

__version__ = "2.0.0"
__all__ = ["app", "canconfig", "cgi", "content", "parser", "server"]