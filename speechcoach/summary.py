from .lexicon_loader import Lexicon
from .models import AnalysisInput
from .utils import split_sentences
from .vocabulary import extract_topics

EMPTY_SUMMARY = "No speech content was detected to summarize."
DEFAULT_TOPIC = "general communication"


def dominant_topic(text: str, lexicon: Lexicon) -> str:
    topics = extract_topics(text, lexicon)
    return topics[0].lower() if topics else DEFAULT_TOPIC


def generate_summary(inp: AnalysisInput, lexicon: Lexicon) -> str:
    """Upstream summary when one was supplied, else a short synopsis by length."""
    if inp.summary:
        return inp.summary

    sentences = split_sentences(inp.content_text())
    n = len(sentences)
    if n == 0:
        return EMPTY_SUMMARY

    topic = dominant_topic(inp.content_text(), lexicon)
    if n == 1:
        return f"The speaker briefly addresses {topic}."
    if n <= 3:
        return f"The speaker discusses {topic}, making {n} connected points in a concise delivery."
    return (
        f"The speaker gives a detailed analysis of {topic} across {n} sentences. "
        "The discussion builds toward actionable insights for the audience."
    )
