"""Real-time multiplayer room coordinator."""
