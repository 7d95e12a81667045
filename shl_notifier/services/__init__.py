"""Services behind the game loop."""
