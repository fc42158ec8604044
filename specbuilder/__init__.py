"""Guided-dialogue service that turns an app idea into a specification and build prompt."""
