"""Output layer — render response envelopes for the terminal."""
