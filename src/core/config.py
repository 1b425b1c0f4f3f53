"""
Rule settings that are a matter of choice rather than of chess itself.

Values can be supplied directly or read from the environment (see `GameSettings.from_env()`).
"""

import os
from typing import Mapping, Optional, Self

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "CHESS_"


class GameSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # number of consecutive half-moves without pawn move or capture that ends the game in a draw
    fifty_move_limit: int = Field(default=50, gt=0)

    # When a move both delivers mate and reaches the limit: which one wins?
    fifty_move_precedes_checkmate: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Read CHESS_<FIELD_NAME> variables. Missing variables keep their defaults, pydantic converts the strings."""
        environ = os.environ if environ is None else environ
        values = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        return cls.model_validate(values)
