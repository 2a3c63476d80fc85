"""coopvote — cooperative governance: proposals, votes, and live tallies."""

__version__ = "0.1.0"
