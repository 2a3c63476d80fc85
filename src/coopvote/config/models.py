"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``coopvote.toml`` only holds
overrides. An empty file (or no file at all) is a valid configuration.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    path: str = ".coopvote/coopvote.db"  # relative to the project root
    url: str | None = None  # any SQLAlchemy URL; overrides ``path``
    busy_timeout: float = Field(default=5.0, gt=0)  # seconds to wait for a lock


class GovernanceConfig(BaseModel):
    """[governance] section.

    ``total_eligible`` feeds the fixed roster, a placeholder until the
    member directory is authoritative. Set ``roster = "members"`` to count
    the ``members`` table instead.
    """

    model_config = {"frozen": True}

    roster: Literal["fixed", "members"] = "fixed"
    total_eligible: int = Field(default=10, ge=0)


class VotesConfig(BaseModel):
    """[votes] section."""

    model_config = {"frozen": True}

    max_page_size: int = Field(default=100, gt=0)
