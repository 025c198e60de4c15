# tests/test_pricing.py
import pytest

from course_survey.managers.pricing import calculate_cost

def test_gpt_4o_thousand_tokens():
    assert calculate_cost(1000, "gpt-4o") == pytest.approx(0.005 * 0.5 + 0.015 * 0.5)
    assert calculate_cost(1000, "gpt-4o") == pytest.approx(0.01)

def test_unknown_model_uses_gpt_4o_rates():
    assert calculate_cost(2500, "some-new-model") == pytest.approx(calculate_cost(2500, "gpt-4o"))

def test_default_model_is_gpt_4o():
    assert calculate_cost(1000) == pytest.approx(0.01)

@pytest.mark.parametrize("model_name, expected", [
    ("gpt-4o-mini", 0.000375),
    ("gpt-4-turbo", 0.02),
    ("gpt-4", 0.045),
    ("gpt-3.5-turbo", 0.00175),
])
def test_known_model_rates(model_name, expected):
    assert calculate_cost(1000, model_name) == pytest.approx(expected)

def test_zero_tokens_cost_nothing():
    assert calculate_cost(0, "gpt-4") == 0
