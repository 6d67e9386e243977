"""Validation schema for Skull rules configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from pydantic import BaseModel, Field, field_validator, model_validator

HARD_MAX_PLAYERS = 6


class RuleSet(BaseModel):
    min_players: int = Field(3, ge=2, description="Fewest seats a match may start with.")
    max_players: int = Field(HARD_MAX_PLAYERS, ge=2, description="Most seats a match may start with.")
    flowers_per_player: int = Field(3, ge=1, description="Flowers dealt to every seat.")
    skulls_per_player: int = Field(1, ge=1, description="Skulls dealt to every seat.")
    wins_to_match: int = Field(2, ge=1, description="Successful challenges needed to win the match.")

    @field_validator("max_players")
    def cap_players(cls, value: int) -> int:
        if value > HARD_MAX_PLAYERS:
            raise ValueError(f"At most {HARD_MAX_PLAYERS} seats are supported.")
        return value

    @model_validator(mode="after")
    def check_player_bounds(self) -> "RuleSet":
        if self.min_players > self.max_players:
            raise ValueError("min_players cannot exceed max_players.")
        return self

    @property
    def discs_per_player(self) -> int:
        return self.flowers_per_player + self.skulls_per_player


def load_rules(path: Union[str, Path]) -> RuleSet:
    """Read a JSON rule file; missing keys fall back to the official rules."""
    return RuleSet.model_validate_json(Path(path).read_text(encoding="utf-8"))
