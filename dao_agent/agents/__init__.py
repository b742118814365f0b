"""Client-side session drivers."""
