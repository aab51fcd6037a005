"""Tests for event title classification."""

import pytest

from core.classification import classify_client
from core.taxonomy import build_client_rules


def test_matches_keyword(rules):
    assert classify_client("Acme sync", rules) == "Acme"
    assert classify_client("beta planning", rules) == "Beta"


def test_case_insensitive(rules):
    assert classify_client("ACME check-in", rules) == "Acme"


def test_unmatched_goes_to_other(rules):
    assert classify_client("random chat", rules) == "Other"


@pytest.mark.parametrize("title", [None, ""])
def test_missing_title_goes_to_other(rules, title):
    assert classify_client(title, rules) == "Other"


def test_first_rule_wins_on_overlap():
    title = "Acme x Beta joint review"
    assert classify_client(title, build_client_rules({"Acme": [], "Beta": []})) == "Acme"
    assert classify_client(title, build_client_rules({"Beta": [], "Acme": []})) == "Beta"


def test_substring_match_has_no_word_boundary():
    rules = build_client_rules({"Art": []})
    assert classify_client("Call with Martin", rules) == "Art"


def test_specific_rule_placed_first_preempts_overlap():
    rules = build_client_rules({"Martin Co": ["martin"], "Art": []})
    assert classify_client("Call with Martin", rules) == "Martin Co"


def test_alias_match():
    rules = build_client_rules({"Globex": ["hank"]})
    assert classify_client("1:1 with Hank", rules) == "Globex"


def test_no_rules_everything_other():
    assert classify_client("Acme sync", ()) == "Other"


def test_non_string_title_still_classified(rules):
    assert classify_client(12345, rules) == "Other"
