"""PhotoFind - photo library with natural language search."""
