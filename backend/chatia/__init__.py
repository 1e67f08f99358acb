"""Chat IA backend."""
