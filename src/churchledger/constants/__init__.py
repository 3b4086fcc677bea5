"""Static category and identity constants."""
