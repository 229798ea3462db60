"""Buddy AI: ask several LLM providers and merge their answers."""
