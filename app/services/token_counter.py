"""Token estimation and cost calculation.

Pure functions: no I/O, deterministic for identical inputs.
"""

import math
from dataclasses import dataclass
from decimal import Decimal

CHARS_PER_TOKEN = 4

# Longest prefix wins; models matching no prefix use a factor of 1.
MODEL_TOKEN_FACTORS: tuple[tuple[str, Decimal], ...] = (
    ("gpt-3.5", Decimal("0.95")),
    ("gpt-4", Decimal("1.0")),
    ("claude", Decimal("1.1")),
)

# USD per 1000 tokens.
MODEL_PRICING: dict[str, dict[str, float]] = {
    "gpt-4": {"input": 0.03, "output": 0.06},
    "gpt-4-turbo": {"input": 0.01, "output": 0.03},
    "gpt-4o": {"input": 0.005, "output": 0.015},
    "gpt-3.5-turbo": {"input": 0.0005, "output": 0.0015},
    "claude-3-opus": {"input": 0.015, "output": 0.075},
    "claude-3-sonnet": {"input": 0.003, "output": 0.015},
    "claude-3-haiku": {"input": 0.00025, "output": 0.00125},
}


@dataclass(frozen=True)
class TokenCount:
    """Prompt/completion token split for one exchange."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

    @classmethod
    def of(cls, prompt_tokens: int, completion_tokens: int) -> "TokenCount":
        return cls(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        )


def token_factor(model: str) -> Decimal:
    """Correction factor for a model family."""
    matches = [
        (prefix, factor)
        for prefix, factor in MODEL_TOKEN_FACTORS
        if model.startswith(prefix)
    ]
    if not matches:
        return Decimal(1)
    return max(matches, key=lambda item: len(item[0]))[1]


def estimate_tokens(text: str, model: str) -> int:
    """Approximate token count: one token per four characters, family-adjusted.

    Decimal arithmetic keeps ``ceil`` exact (``10 * 1.1`` would otherwise
    round up to 12).
    """
    base = math.ceil(len(text) / CHARS_PER_TOKEN)
    return math.ceil(base * token_factor(model))


def calculate_cost(tokens: TokenCount, model: str) -> float:
    """Dollar cost of ``tokens`` on ``model``; 0 for models without pricing."""
    pricing = MODEL_PRICING.get(model)
    if pricing is None:
        return 0
    input_cost = tokens.prompt_tokens / 1000 * pricing["input"]
    output_cost = tokens.completion_tokens / 1000 * pricing["output"]
    return input_cost + output_cost


def format_token_count(count: int) -> str:
    """Compact display form: 950, 1.5K, 2.3M."""
    if count < 1000:
        return str(count)
    if count < 1_000_000:
        return f"{count / 1000:.1f}K"
    return f"{count / 1_000_000:.1f}M"
