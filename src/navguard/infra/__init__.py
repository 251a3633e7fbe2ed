"""File-backed collaborators for the policy engine."""
