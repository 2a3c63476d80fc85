"""Domain layer — enums, lifecycle rules, records, and tally arithmetic.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
