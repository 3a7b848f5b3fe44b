"""Cache discovery, availability checks and safe deletion."""
