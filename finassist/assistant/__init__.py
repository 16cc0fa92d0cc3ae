"""Assistant module - function catalog, turn orchestration and the chat client."""
