import pytest
from pydantic import ValidationError

from speechcoach.models import (
    AnalysisInput,
    AnalysisResult,
    FillerWords,
    MainPoint,
    StarAnalysis,
)


def test_non_mapping_payload_gives_defaults():
    for payload in (None, "text", 42, ["a"]):
        inp = AnalysisInput.from_payload(payload)
        assert inp.transcript == ""
        assert inp.words == []
        assert inp.duration_seconds == 0
        assert inp.confidence == 0.8
        assert inp.sentiment is None


def test_provider_shape_is_normalized():
    inp = AnalysisInput.from_payload({
        "text": "Hello",
        "audio_duration": 30,
        "confidence": 1.7,
        "words": [{"text": "Hello", "start": 0, "end": 400, "confidence": 0.9}, "junk", {"nothing": 1}],
        "sentiment_analysis_results": [{"sentiment": "POSITIVE", "confidence": 0.95}],
        "summary": "   ",
    })
    assert inp.transcript == "Hello"
    assert inp.duration_seconds == 30
    assert inp.confidence == 1.0
    assert len(inp.words) == 1
    assert inp.words[0].end_ms == 400
    assert inp.sentiment.label == "POSITIVE"
    assert inp.sentiment.confidence == pytest.approx(0.95)
    assert inp.summary is None


def test_camel_case_payload():
    inp = AnalysisInput.from_payload({
        "transcript": "one two",
        "durationSeconds": "12.5",
        "words": [{"text": "one", "startMs": 10, "endMs": 20}],
        "sentiment": "neutral",
        "summary": ["first part.", "second part."],
    })
    assert inp.duration_seconds == 12.5
    assert inp.words[0].start_ms == 10
    assert inp.sentiment.label == "neutral"
    assert inp.summary == "first part. second part."
    assert inp.tokens_source() == "one"


def test_bad_numbers_fall_back():
    inp = AnalysisInput.from_payload({"transcript": "x", "durationSeconds": "abc", "confidence": None})
    assert inp.duration_seconds == 0
    assert inp.confidence == 0.8

    inp = AnalysisInput.from_payload({"durationSeconds": -30, "confidence": -1})
    assert inp.duration_seconds == 0
    assert inp.confidence == 0


def test_result_scores_are_clamped():
    r = AnalysisResult(overall_score=250, clarity_score=-3)
    assert r.overall_score == 100
    assert r.clarity_score == 0
    assert MainPoint(clarity=42).clarity == 10
    assert StarAnalysis(overall_star_score=0).overall_star_score == 1
    assert FillerWords(percentage="lots").percentage == "0%"


def test_result_lists_are_capped():
    r = AnalysisResult(suggestions=[str(i) for i in range(9)], strengths=[str(i) for i in range(9)])
    assert len(r.suggestions) == 5
    assert len(r.strengths) == 4
    assert len(FillerWords(examples=["a", "b", "c", "d", "e", "f"]).examples) == 5


def test_text_fields_are_plain():
    mp = MainPoint(feedback="<b>Great</b> **job**")
    assert mp.feedback == "Great job"


def test_result_is_frozen():
    r = AnalysisResult()
    with pytest.raises(ValidationError):
        r.overall_score = 5


def test_payload_uses_camel_case():
    payload = AnalysisResult(transcript="hi").to_payload()
    assert payload["overallScore"] == 0
    assert payload["paceAnalysis"]["wordsPerMinute"] == 0
    assert payload["fillerWords"]["percentage"] == "0%"
    assert payload["contentEvaluation"]["starAnalysis"]["overallStarScore"] == 2
    assert payload["vocabularySuggestions"]["wordImprovements"] == []
    assert payload["transcript"] == "hi"


def test_plain_text_keeps_symbols_that_are_not_markup():
    assert MainPoint(identified="We ship C# and 5 * 3 builds").identified == "We ship C# and 5 * 3 builds"
    assert MainPoint(identified="Latency < 5 ms for users > 90 percent").identified == (
        "Latency < 5 ms for users > 90 percent"
    )
    assert MainPoint(feedback="## Goal\n`fast` and **clear**").feedback == "Goal fast and clear"
