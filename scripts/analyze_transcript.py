import asyncio
import csv
import json
import logging
import os
import sys

from dotenv import load_dotenv

sys.path.append(os.path.abspath("."))
from speechcoach.analyzer import SpeechAnalyzer
from speechcoach.logger import configure_logging

logger = logging.getLogger("analyze_transcript")


def _read_payload(path):
    with open(path, "r", encoding="utf-8") as f:
        raw = f.read()
    if path.lower().endswith(".json"):
        return json.loads(raw)
    # plain text files carry only the transcript
    return {"transcript": raw}


async def run(paths):
    timeout = float(os.environ.get("GENERATIVE_TIMEOUT", "60"))
    analyzer = SpeechAnalyzer.from_env()

    os.makedirs("outputs", exist_ok=True)
    index_csv = os.path.join("outputs", "index.csv")
    if not os.path.exists(index_csv):
        with open(index_csv, "w", newline="", encoding="utf-8") as f:
            csv.writer(f).writerow(["id", "filename", "overall_score", "clarity_score", "wpm", "fillers", "star_score"])

    for p in paths:
        if not os.path.exists(p):
            print(f"File not found: {p}")
            continue
        try:
            payload = _read_payload(p)
        except (OSError, ValueError) as exc:
            logger.warning("Skipping %s: %s", p, exc)
            continue

        result = await analyzer.analyze(payload, timeout=timeout)

        base = os.path.splitext(os.path.basename(p))[0]
        outj = os.path.join("outputs", f"{base}.json")
        with open(outj, "w", encoding="utf-8") as f:
            json.dump({
                "id": base,
                "filename": os.path.basename(p),
                "report": result.to_payload(),
                "model_info": {
                    "use_generative_backend": os.environ.get("USE_GENERATIVE_BACKEND", "false"),
                    "generative_model": analyzer.backend.model_name if analyzer.backend else None,
                    "generative_state": analyzer.backend.state.value if analyzer.backend else None,
                },
            }, f, ensure_ascii=False, indent=2)

        star = result.content_evaluation.star_analysis.overall_star_score
        with open(index_csv, "a", newline="", encoding="utf-8") as f:
            csv.writer(f).writerow([
                base,
                os.path.basename(p),
                result.overall_score,
                result.clarity_score,
                result.pace_analysis.words_per_minute,
                result.filler_words.count,
                star,
            ])

        print(f"Done: {outj} | Overall: {result.overall_score} | Pace: {result.pace_analysis.assessment}")


def main(paths):
    load_dotenv()
    configure_logging()
    asyncio.run(run(paths))


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripts/analyze_transcript.py <transcript.json|.txt> [more ...]")
        sys.exit(1)
    main(sys.argv[1:])
