import asyncio
import enum
import json
import logging
import os
import re
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from .models import AnalysisResult, ContentEvaluation, GenerativeOverride
from .utils import truncate_center

logger = logging.getLogger(__name__)

# -------- Generation knobs --------
GENERATIVE_MODEL = os.environ.get("GENERATIVE_MODEL", "distilgpt2")
GENERATIVE_DEVICE = os.environ.get("GENERATIVE_DEVICE", "auto")
MAX_NEW_TOKENS = int(os.environ.get("GENERATIVE_MAX_NEW_TOKENS", "384"))
MAX_TRANSCRIPT_CHARS = int(os.environ.get("GENERATIVE_MAX_TRANSCRIPT_CHARS", "2000"))

Loader = Callable[[str, str], Callable[..., Any]]

EVALUATION_SECTIONS = ("mainPoint", "argumentStructure", "evidenceAndExamples", "persuasiveness", "starAnalysis")


class GenerationError(Exception):
    pass


class BackendState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


def detect_accelerator() -> Optional[str]:
    try:
        import torch
        if torch.cuda.is_available():
            return "cuda"
        mps = getattr(torch.backends, "mps", None)
        if mps is not None and mps.is_available():
            return "mps"
    except Exception as exc:
        logger.debug("Accelerator probe failed: %s", exc)
    return None


def load_pipeline(model_name: str, device: str) -> Callable[..., Any]:
    from transformers import pipeline
    return pipeline("text-generation", model=model_name, device=device)


class GenerativeBackend:
    """
    Owned handle around an on-device text-generation pipeline.

    `init()` loads the model at most once: concurrent callers share one task.
    Loading tries the accelerated device first, then cpu; if both fail the
    backend stays FAILED for the rest of its life and callers fall back to
    heuristics.
    """

    def __init__(
        self,
        model_name: Optional[str] = None,
        loader: Optional[Loader] = None,
        accelerated_device: Optional[str] = None,
        max_new_tokens: int = MAX_NEW_TOKENS,
    ):
        self.model_name = model_name or GENERATIVE_MODEL
        self.max_new_tokens = max_new_tokens
        self.state = BackendState.UNINITIALIZED
        self.device: Optional[str] = None
        self._loader = loader or load_pipeline
        self._accelerated_device = accelerated_device
        self._pipe: Optional[Callable[..., Any]] = None
        self._init_task: Optional["asyncio.Future[None]"] = None

    @property
    def ready(self) -> bool:
        return self.state is BackendState.READY

    def device_tiers(self) -> List[str]:
        accel = self._accelerated_device
        if not accel and GENERATIVE_DEVICE.strip().lower() not in ("", "auto"):
            accel = GENERATIVE_DEVICE.strip().lower()
        if not accel:
            accel = detect_accelerator()
        if accel and accel != "cpu":
            return [accel, "cpu"]
        return ["cpu"]

    async def init(self) -> BackendState:
        if self._init_task is None:
            self.state = BackendState.INITIALIZING
            self._init_task = asyncio.ensure_future(self._initialize())
        # a caller's deadline must not cancel the shared load
        await asyncio.shield(self._init_task)
        return self.state

    async def _initialize(self) -> None:
        loop = asyncio.get_running_loop()
        for device in self.device_tiers():
            try:
                self._pipe = await loop.run_in_executor(None, self._loader, self.model_name, device)
            except Exception as exc:
                logger.warning("Loading %s on %s failed: %s", self.model_name, device, exc)
                continue
            self.device = device
            self.state = BackendState.READY
            logger.info("Generative backend ready: %s on %s", self.model_name, device)
            return
        self.state = BackendState.FAILED
        logger.warning("Generative backend unavailable; using heuristic analysis only")

    async def generate(self, prompt: str) -> str:
        if not self.ready or self._pipe is None:
            raise GenerationError(f"Generative backend is {self.state.value}")
        loop = asyncio.get_running_loop()
        call = partial(
            self._pipe,
            prompt,
            max_new_tokens=self.max_new_tokens,
            do_sample=False,
            return_full_text=False,
        )
        try:
            out = await loop.run_in_executor(None, call)
        except Exception as exc:
            raise GenerationError(f"Generation failed: {exc}") from exc
        try:
            return str(out[0]["generated_text"])
        except (IndexError, KeyError, TypeError) as exc:
            raise GenerationError(f"Unexpected pipeline output: {out!r}") from exc


# -----------------------------
# Prompt and output parsing
# -----------------------------


def build_prompt(transcript: str, heuristic: AnalysisResult) -> str:
    example_json = (
        '{\n'
        '  "contentEvaluation": {\n'
        '    "mainPoint": {"identified": "...", "clarity": 1-10, "feedback": "..."},\n'
        '    "argumentStructure": {"hasStructure": true|false, "structure": "...", "effectiveness": 1-10, "suggestions": "..."},\n'
        '    "evidenceAndExamples": {"hasEvidence": true|false, "evidenceQuality": 1-10, "evidenceTypes": ["..."], "suggestions": "..."},\n'
        '    "persuasiveness": {"pointProven": true|false, "persuasionScore": 1-10, "strengths": ["..."], "weaknesses": ["..."], "improvements": "..."},\n'
        '    "starAnalysis": {"situation": "...", "task": "...", "action": "...", "result": "...", "overallStarScore": 1-10}\n'
        '  },\n'
        '  "speechSummary": "one or two sentences"\n'
        '}'
    )
    header = f"""
Analyze this speech transcript and give coaching feedback.

Overall Score: {heuristic.overall_score}/100
Clarity Score: {heuristic.clarity_score}/100
Filler Words: {", ".join(heuristic.filler_words.examples) or "none"}
Primary Tone: {heuristic.tone_analysis.primary_tone}

Cover: the main point, argument structure, evidence and examples,
persuasiveness, and a STAR (Situation, Task, Action, Result) breakdown.
All scores are integers from 1 to 10.

Return ONLY valid JSON. No prose, no markdown. Return JSON like:
{example_json}

Transcript:
""".strip()
    return header + "\n" + truncate_center(transcript, MAX_TRANSCRIPT_CHARS) + "\n\nJSON:\n"


def _safe_json(s: str) -> Optional[Dict[str, Any]]:
    try:
        return json.loads(s)
    except Exception:
        m = re.search(r"\{[\s\S]*\}", s)
        if m:
            try:
                return json.loads(m.group(0))
            except Exception:
                return None
        return None


def _merge(base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def parse_generation(text: str, base: Optional[ContentEvaluation] = None) -> GenerativeOverride:
    """
    Pull the first JSON object out of raw model text and validate it.

    Sections the model leaves out keep the values from `base` (the heuristic
    evaluation) so a partial answer only overrides what it actually states.
    """
    js = _safe_json(text or "")
    if not isinstance(js, dict):
        raise GenerationError("No JSON object in generated text")

    evaluation = js.get("contentEvaluation", js)
    if not isinstance(evaluation, dict):
        raise GenerationError("contentEvaluation is not an object")
    if not any(key in evaluation for key in EVALUATION_SECTIONS):
        raise GenerationError("Generated JSON has no evaluation sections")
    if base is not None:
        evaluation = _merge(base.model_dump(by_alias=True), evaluation)

    try:
        return GenerativeOverride.model_validate(
            {"contentEvaluation": evaluation, "speechSummary": js.get("speechSummary")}
        )
    except ValidationError as exc:
        raise GenerationError(f"Generated JSON does not fit the report: {exc}") from exc
