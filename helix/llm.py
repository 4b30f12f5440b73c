import json
import logging
import os
import re
from abc import ABC
from datetime import datetime
from typing import Any, Dict, Optional

import google.generativeai as genai
from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential

from helix.config import ANALYSIS_MAX_TOKENS, DEFAULT_ANALYSIS_TEMP, DEFAULT_MODEL
from helix.models import Analysis, AnalysisPayload, CandidateIdea
from helix.prompts.analysis import ANALYSIS_PROMPT, SYSTEM_PROMPT
from helix.scoring import fallback_analysis, weighted_overall

logger = logging.getLogger(__name__)

JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


class AnalysisParseError(ValueError):
    """The LLM answer held no usable analysis object."""


class LLMWrapper(ABC):
    """Base class for LLM interactions"""
    MAX_TOKENS = ANALYSIS_MAX_TOKENS

    def __init__(self,
                 provider: str = "google_generative_ai",
                 model_name: str = DEFAULT_MODEL,
                 temperature: float = DEFAULT_ANALYSIS_TEMP,
                 system_prompt: Optional[str] = None,
                 api_key: Optional[str] = None,
                 agent_name: str = ""):
        self.provider = provider
        self.model_name = model_name
        self.temperature = temperature
        self.system_prompt = system_prompt
        self.api_key = api_key
        self.total_token_count = 0
        self.input_token_count = 0
        self.output_token_count = 0
        self.agent_name = agent_name
        logger.info(f"Initializing {agent_name or 'LLM'} with model {model_name}, temperature {temperature}")
        self._setup_provider()

    def _setup_provider(self):
        if self.provider == "google_generative_ai":
            api_key = self.api_key or os.environ.get("GEMINI_API_KEY")
            if not api_key:
                logger.warning("GEMINI_API_KEY not set. LLM calls will fail and fall back.")
            genai.configure(api_key=api_key)
        # Add other providers here

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=20),
        reraise=True
    )
    def generate_text(self, prompt: str, temperature: Optional[float] = None) -> str:
        """Base method for generating text with retry logic built in"""
        if self.provider == "google_generative_ai":
            config = self._get_generation_config(temperature)
            model = genai.GenerativeModel(
                model_name=self.model_name,
                generation_config=config,
                system_instruction=self.system_prompt,
            )
            response = model.generate_content(prompt, generation_config=config)
            self._track_tokens(response)
            return response.text if response.text else ""
        raise NotImplementedError(f"Unsupported provider: {self.provider}")

    def _track_tokens(self, response) -> None:
        usage = getattr(response, "usage_metadata", None)
        if usage is None:
            return
        self.total_token_count += getattr(usage, "total_token_count", 0) or 0
        self.input_token_count += getattr(usage, "prompt_token_count", 0) or 0
        self.output_token_count += getattr(usage, "candidates_token_count", 0) or 0
        logger.debug(
            f"Total tokens {self.agent_name}: {self.total_token_count} "
            f"(Input: {self.input_token_count}, Output: {self.output_token_count})"
        )

    def _get_generation_config(self, temperature: Optional[float]) -> Dict[str, Any]:
        actual_temp = temperature if temperature is not None else self.temperature
        return {
            "temperature": actual_temp,
            "top_p": 0.95,
            "top_k": 40,
            "max_output_tokens": self.MAX_TOKENS,
        }


class Analyst(LLMWrapper):
    """Scores one candidate idea against the Build Together rubric"""
    agent_name = "Analyst"

    def __init__(self, **kwargs):
        kwargs.setdefault("system_prompt", SYSTEM_PROMPT)
        super().__init__(agent_name=self.agent_name, **kwargs)

    def build_prompt(self, idea: CandidateIdea) -> str:
        return ANALYSIS_PROMPT.format(
            title=idea.title,
            description=idea.painpoint_description or idea.description,
            source=idea.source,
            weeks=idea.delivery_timeline_weeks,
            tech_stack=idea.technical_stack_required,
        )

    def analyze(self, idea: CandidateIdea) -> Analysis:
        """
        Score an idea with the LLM.

        Never raises for upstream or format problems: any API error, missing
        JSON block, malformed JSON or out-of-range field yields the static
        fallback analysis (source="fallback") instead.
        """
        try:
            response = self.generate_text(self.build_prompt(idea))
        except Exception as e:
            logger.warning(f"LLM call failed for idea {idea.id}, using fallback analysis: {e}")
            return fallback_analysis(idea)

        try:
            return self.parse_analysis(response, idea)
        except AnalysisParseError as e:
            logger.warning(f"Failed to parse analysis for idea {idea.id}, using fallback analysis: {e}")
            return fallback_analysis(idea)

    @staticmethod
    def parse_analysis(response: str, idea: CandidateIdea) -> Analysis:
        match = JSON_BLOCK.search(response or "")
        if not match:
            raise AnalysisParseError("No JSON found in analysis response")

        try:
            payload = AnalysisPayload(**json.loads(match.group(0)))
        except (json.JSONDecodeError, TypeError) as e:
            raise AnalysisParseError(f"Invalid JSON: {e}") from e
        except ValidationError as e:
            raise AnalysisParseError(f"Unexpected analysis fields: {e.error_count()} errors") from e

        overall = payload.overall_score
        if overall is None:
            overall = weighted_overall(
                payload.painpoint_severity_score,
                payload.technical_feasibility,
                payload.competition_gap_score,
                payload.saas_viability_score,
                payload.build_complexity,
            )

        return Analysis(
            idea_id=idea.id or "",
            painpoint_severity_score=payload.painpoint_severity_score,
            technical_feasibility=payload.technical_feasibility,
            build_complexity=payload.build_complexity,
            revenue_potential_monthly=payload.revenue_potential_monthly,
            competition_gap_score=payload.competition_gap_score,
            saas_viability_score=payload.saas_viability_score,
            overall_score=overall,
            explanation=payload.explanation,
            analysis_date=datetime.utcnow().isoformat(),
            source="llm",
        )
