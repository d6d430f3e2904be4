"""Configuration loading and validation for chatsplitter."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field, model_validator

from chatsplitter.estimator.approximate import ApproximateEstimator
from chatsplitter.estimator.base import CONTEXT_SIZES, CostEstimator
from chatsplitter.estimator.tiktoken_estimator import TiktokenEstimator
from chatsplitter.window.policy import (
    DEFAULT_MAX_TURNS,
    DEFAULT_MODEL,
    WindowPolicy,
)

logger = logging.getLogger(__name__)

ESTIMATORS: dict[str, type[CostEstimator]] = {
    "tiktoken": TiktokenEstimator,
    "approximate": ApproximateEstimator,
}


class SplitterConfig(BaseModel):
    """Settings for building a WindowPolicy."""

    model: str = DEFAULT_MODEL
    max_output_tokens: Optional[int] = Field(default=None, ge=0)
    max_turns: int = Field(default=DEFAULT_MAX_TURNS, ge=0)
    estimator: Literal["tiktoken", "approximate"] = "tiktoken"
    context_sizes: dict[str, int] = Field(default_factory=dict)
    """Extra or overridden model context sizes, matched by prefix."""

    api_key_env: Optional[str] = "OPENAI_API_KEY"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    system_prompt: Optional[str] = None

    @model_validator(mode="after")
    def resolve_api_key(self) -> "SplitterConfig":
        if self.api_key is None and self.api_key_env:
            self.api_key = os.environ.get(self.api_key_env)
            if self.api_key is None:
                logger.debug(
                    "Environment variable %s is not set for model %s",
                    self.api_key_env, self.model,
                )
        return self

    def build_estimator(self) -> CostEstimator:
        context_sizes = None
        if self.context_sizes:
            context_sizes = {**CONTEXT_SIZES, **self.context_sizes}
        return ESTIMATORS[self.estimator](context_sizes)

    def build_policy(self) -> WindowPolicy:
        return WindowPolicy(
            model=self.model,
            max_output_tokens=self.max_output_tokens,
            max_turns=self.max_turns,
            estimator=self.build_estimator(),
        )


def load_config(path: Path) -> SplitterConfig:
    """Load and validate splitter settings from a YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Splitter config not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    return SplitterConfig(**raw)


def load_conversation(path: Path) -> list[dict[str, Any]]:
    """Load a conversation log stored as a JSON or YAML list of messages."""
    if not path.exists():
        raise FileNotFoundError(f"Conversation not found: {path}")
    with open(path) as f:
        if path.suffix == ".json":
            raw = json.load(f)
        else:
            raw = yaml.safe_load(f)
    if raw is None:
        return []
    if isinstance(raw, dict) and "messages" in raw:
        raw = raw["messages"]
    if not isinstance(raw, list):
        raise ValueError(f"Expected a list of messages in {path}")
    logger.debug("Loaded %d messages from %s", len(raw), path)
    return raw
