"""Pure unit tests for app/services/verdict.py."""

import pytest

from app.core.errors import ClassificationError
from app.services.verdict import compute_confidence, format_score, is_ai_label, map_verdict
from app.schemas.detection import ClassificationItem

KEYWORDS = ["artificial", "synthetic", "digital art", "computer generated"]


def _items(*pairs):
    return [ClassificationItem(label=label, score=score) for label, score in pairs]


def test_ai_label_match_drives_confidence():
    verdict = map_verdict(_items(("synthetic", 0.9), ("cat", 0.05)))

    assert verdict.confidence == pytest.approx(90.0)
    assert verdict.is_ai_generated is True


def test_no_ai_label_falls_back_to_top_score():
    verdict = map_verdict(_items(("cat", 0.3), ("dog", 0.2)))

    assert verdict.confidence == pytest.approx(30.0)
    assert verdict.is_ai_generated is False


def test_threshold_is_strict():
    verdict = map_verdict(_items(("cat", 0.5)), threshold=50.0)
    assert verdict.is_ai_generated is False

    verdict = map_verdict(_items(("computer generated imagery", 0.6)))
    assert verdict.confidence == pytest.approx(60.0)
    assert verdict.is_ai_generated is False


def test_max_of_matching_labels_not_first():
    items = _items(("cat", 0.7), ("Digital Art", 0.2), ("artificial flower", 0.65))
    assert compute_confidence(items, KEYWORDS) == pytest.approx(65.0)


def test_ai_label_wins_even_when_lower_than_top_item():
    items = _items(("cat", 0.95), ("synthetic fabric", 0.01))
    verdict = map_verdict(items)

    assert verdict.confidence == pytest.approx(1.0)
    assert verdict.is_ai_generated is False


def test_label_match_is_case_insensitive():
    assert is_ai_label("SYNTHETIC rubber", KEYWORDS)
    assert is_ai_label("Computer Generated", KEYWORDS)
    assert not is_ai_label("computer keyboard", KEYWORDS)


def test_top_three_classifications_formatted():
    items = _items(("a", 0.5), ("b", 0.25), ("c", 0.125), ("d", 0.0625))
    verdict = map_verdict(items)

    assert [c.label for c in verdict.classifications] == ["a", "b", "c"]
    assert [c.score for c in verdict.classifications] == ["50.00%", "25.00%", "12.50%"]


def test_fewer_than_three_classifications():
    verdict = map_verdict(_items(("only", 0.42)))
    assert len(verdict.classifications) == 1
    assert verdict.classifications[0].score == "42.00%"


def test_empty_classifications_raise():
    with pytest.raises(ClassificationError):
        map_verdict([])


def test_format_score_two_decimals():
    assert format_score(0.0) == "0.00%"
    assert format_score(1.0) == "100.00%"
    assert format_score(0.123456) == "12.35%"


def test_response_serializes_with_camel_case():
    data = map_verdict(_items(("synthetic", 0.9))).model_dump(by_alias=True)
    assert set(data) == {"isAiGenerated", "confidence", "classifications"}
    assert data["classifications"] == [{"label": "synthetic", "score": "90.00%"}]
