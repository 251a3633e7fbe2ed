"""Domain models for URLs and policy verdicts."""
