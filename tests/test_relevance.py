"""Tests for RelevanceClassifier and topic categories."""

import pytest

from oracle.models import SearchResult
from oracle.relevance import (
    AIRDROP,
    RelevanceClassifier,
    TopicCategory,
    match_category,
)


def result(content="text", filename="doc.txt", similarity=0.5):
    return SearchResult(content=content, filename=filename, similarity=similarity)


@pytest.fixture
def classifier():
    return RelevanceClassifier(threshold=0.75)


def test_no_results_is_never_strong(classifier):
    assert classifier.classify("airdrop eligibility", []) is False


def test_similarity_above_threshold_is_strong(classifier):
    assert classifier.classify("tokenomics", [result(similarity=0.76)]) is True


def test_similarity_at_threshold_is_not_strong(classifier):
    assert classifier.classify("tokenomics", [result(similarity=0.75)]) is False


@pytest.mark.parametrize(
    "hit",
    [
        result(filename="Midnight_Airdrop_Guide.txt", similarity=0.2),
        result(content="Holders are eligible if they held ADA", similarity=0.2),
        result(content="The snapshot was taken June 11, 2024.", similarity=0.2),
    ],
)
def test_category_boost_for_on_topic_results(classifier, hit):
    assert classifier.classify("Am I eligible for the airdrop?", [hit]) is True


def test_category_boost_requires_on_topic_result(classifier):
    hit = result(content="Consensus uses stake pools", similarity=0.3)
    assert classifier.classify("How do I claim the airdrop?", [hit]) is False


def test_markers_ignored_for_unrelated_query(classifier):
    hit = result(filename="airdrop_guide.txt", similarity=0.3)
    assert classifier.classify("What is Cardano consensus?", [hit]) is False


def test_custom_category():
    staking = TopicCategory(
        name="staking",
        trigger_terms=("stake",),
        content_markers=("delegation",),
    )
    classifier = RelevanceClassifier(categories=[staking], threshold=0.9)

    assert classifier.classify(
        "How do I stake ADA?", [result(content="Delegation to pools", similarity=0.1)]
    )


def test_match_category_is_case_insensitive():
    assert match_category("AIRDROP timing", [AIRDROP]) is AIRDROP
    assert match_category("Block times", [AIRDROP]) is None
