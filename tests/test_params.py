from __future__ import annotations

import pytest

from wcr.constants import GCC_SIMPLE, GCC_WEIGHTED
from wcr.errors import EntityNotFound, InvalidParameter, WCRError
from wcr.params import ChartParams, normalize_highlight, normalize_method, normalize_params


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Weighted", GCC_WEIGHTED),
        ("weighted", GCC_WEIGHTED),
        (" SIMPLE ", GCC_SIMPLE),
        (GCC_SIMPLE, GCC_SIMPLE),
        (GCC_WEIGHTED, GCC_WEIGHTED),
    ],
)
def test_normalize_method(raw, expected):
    assert normalize_method(raw) == expected


@pytest.mark.parametrize("raw", ["Median", "", None, 3])
def test_normalize_method_rejects(raw):
    with pytest.raises(InvalidParameter):
        normalize_method(raw)


def test_invalid_parameter_is_value_error():
    assert issubclass(InvalidParameter, ValueError)
    assert issubclass(EntityNotFound, LookupError)
    assert issubclass(EntityNotFound, WCRError)


def test_entity_not_found_lists_choices():
    err = EntityNotFound("France", ["UAE", "Qatar"])
    assert err.entity == "France"
    assert err.available == ["UAE", "Qatar"]
    assert "UAE, Qatar" in str(err)


class TestHighlight:
    options = ("UAE", "Qatar", "GCC Average")

    @pytest.mark.parametrize("raw", [None, [], "", "All", ["All"], ["UAE", "All"]])
    def test_all_forms(self, raw):
        assert normalize_highlight(raw, self.options) == self.options

    def test_subset_keeps_option_order(self):
        assert normalize_highlight(["GCC Average", "UAE"], self.options) == ("UAE", "GCC Average")

    def test_single_string(self):
        assert normalize_highlight("Qatar", self.options) == ("Qatar",)

    def test_unknown(self):
        with pytest.raises(EntityNotFound):
            normalize_highlight(["Atlantis"], self.options)


def test_normalize_params_defaults():
    params = normalize_params({})
    assert params == ChartParams()
    assert params.entity == GCC_WEIGHTED


@pytest.mark.parametrize("raw", [{"method": ""}, {"method": "  "}, {"method": "Median"}])
def test_normalize_params_rejects_blank_or_unknown_method(raw):
    with pytest.raises(InvalidParameter):
        normalize_params(raw)


def test_normalize_params_missing_method_defaults_to_weighted():
    assert normalize_params({"method": None}).method == GCC_WEIGHTED


def test_normalize_params_entity_follows_method():
    params = normalize_params({"method": "simple", "highlight": ["UAE", " ", None], "country": " Oman "})
    assert params.method == GCC_SIMPLE
    assert params.entity == GCC_SIMPLE
    assert params.highlight == ("UAE",)
    assert params.country == "Oman"
