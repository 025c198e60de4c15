from typing import Dict, NamedTuple

class ModelRates(NamedTuple):
    input: float
    output: float

# USD per 1K tokens
MODEL_PRICING: Dict[str, ModelRates] = {
    "gpt-4o": ModelRates(input=0.005, output=0.015),
    "gpt-4o-mini": ModelRates(input=0.00015, output=0.0006),
    "gpt-4-turbo": ModelRates(input=0.01, output=0.03),
    "gpt-4": ModelRates(input=0.03, output=0.06),
    "gpt-3.5-turbo": ModelRates(input=0.0015, output=0.002),
}

DEFAULT_PRICING_MODEL = "gpt-4o"

def calculate_cost(tokens: int, model_name: str = DEFAULT_PRICING_MODEL) -> float:
    """Estimate the USD cost of ``tokens``, assuming a 50/50 input/output split.

    Unknown models are priced as gpt-4o. This is an estimate, not billing.
    """
    rates = MODEL_PRICING.get(model_name, MODEL_PRICING[DEFAULT_PRICING_MODEL])
    half = tokens / 2
    return half * rates.input / 1000 + half * rates.output / 1000
