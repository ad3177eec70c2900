from speechcoach.lexicon_loader import DEFAULT_LEXICON_PATH, load_lexicon
from speechcoach.metrics import compute_metrics, count_fillers
from speechcoach.models import AnalysisInput
from speechcoach.tone import analyze_tone

LEX = load_lexicon(DEFAULT_LEXICON_PATH)


def _metrics(payload):
    return compute_metrics(AnalysisInput.from_payload(payload), LEX)


def test_four_um_in_hundred_words():
    text = "um " * 4 + "word " * 96
    m = _metrics({"transcript": text, "durationSeconds": 60})
    assert m.word_count == 100
    assert m.filler_count == 4
    assert m.filler_percentage == "4%"
    assert m.filler_examples == ["um"]
    # clarity 80, fillers 100-40, pace 0 (100 wpm is slow)
    assert m.overall_score == 47


def test_good_pace():
    m = _metrics({"transcript": "word " * 120, "durationSeconds": 60})
    assert m.words_per_minute == 120
    assert m.assessment == "GoodPace"
    assert m.overall_score == 67


def test_pace_bands():
    assert _metrics({"transcript": "w " * 119, "durationSeconds": 60}).assessment == "Slow"
    assert _metrics({"transcript": "w " * 180, "durationSeconds": 60}).assessment == "GoodPace"
    assert _metrics({"transcript": "w " * 181, "durationSeconds": 60}).assessment == "Fast"


def test_word_timings_take_precedence():
    m = _metrics({
        "transcript": "one two three four five",
        "words": [{"text": "one"}, {"text": "um"}, {"text": "three"}],
        "durationSeconds": 3,
    })
    assert m.word_count == 3
    assert m.words_per_minute == 60
    assert m.filler_count == 1


def test_multi_word_fillers_in_order():
    total, distinct = count_fillers(
        ["you", "know", "it", "is", "kind", "of", "like", "this"], LEX.fillers
    )
    assert total == 3
    assert distinct == ["you know", "kind of", "like"]


def test_fillers_match_whole_tokens():
    m = _metrics({"transcript": "Her answer was actually, UM, fine."})
    assert m.filler_count == 2
    assert m.filler_examples == ["actually", "um"]


def test_empty_input():
    m = _metrics({"transcript": "", "words": [], "durationSeconds": 0})
    assert m.words_per_minute == 0
    assert m.filler_count == 0
    assert m.filler_percentage == "0%"
    assert 0 <= m.overall_score <= 100
    assert m.overall_score == 60


def test_clarity_from_confidence():
    assert _metrics({"confidence": 0.934}).clarity_score == 93
    assert _metrics({"confidence": 0.936}).clarity_score == 94


def test_tone_from_sentiment():
    tone = analyze_tone(AnalysisInput.from_payload({"sentiment": {"label": "POSITIVE", "confidence": 0.6}}))
    assert tone.primary_tone == "positive"
    assert tone.emotions == ["positive"]
    assert tone.confidence_level == "Medium"


def test_tone_without_sentiment_uses_transcription_confidence():
    tone = analyze_tone(AnalysisInput.from_payload({"confidence": 0.3}))
    assert tone.primary_tone == "neutral"
    assert tone.confidence_level == "Low"
    assert analyze_tone(AnalysisInput()).confidence_level == "High"
