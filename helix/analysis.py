import asyncio
import logging
from typing import Any, Dict

from google.api_core.exceptions import AlreadyExists

from helix import database as db
from helix.config import ANALYSIS_BATCH_SIZE, BUILD_TOGETHER_CATEGORY, REQUEST_DELAY_SECONDS
from helix.llm import Analyst

logger = logging.getLogger(__name__)


class AnalysisEngine:
    """
    Scores the ideas that have no analysis yet, one at a time.

    An item whose LLM call or parse fails is scored by the fallback formula;
    an item whose database writes fail is skipped and stays unscored, so the
    next run picks it up again.
    """

    def __init__(self,
                 analyst: Analyst,
                 delay: float = REQUEST_DELAY_SECONDS,
                 batch_size: int = ANALYSIS_BATCH_SIZE,
                 category: str = BUILD_TOGETHER_CATEGORY):
        self.analyst = analyst
        self.delay = delay
        self.batch_size = batch_size
        self.category = category

    async def run(self) -> Dict[str, Any]:
        ideas = await db.list_unscored_ideas(self.category, self.batch_size)
        if not ideas:
            logger.info("No new Build Together ideas to analyze")
            return {"total_ideas": 0, "analyzed_count": 0, "fallback_count": 0, "skipped": []}

        logger.info(f"Analyzing {len(ideas)} Build Together ideas...")
        analyzed = 0
        fallbacks = 0
        skipped = []

        for index, idea in enumerate(ideas):
            if index and self.delay:
                await asyncio.sleep(self.delay)

            analysis = await asyncio.to_thread(self.analyst.analyze, idea)

            try:
                analysis_id = await db.create_analysis(analysis)
            except AlreadyExists:
                # Scored by an overlapping run; link the existing analysis instead.
                existing = await db.get_analysis(idea.id)
                if existing is None:
                    skipped.append(idea.id)
                    continue
                logger.info(f"Idea {idea.id} already has an analysis, linking it")
                analysis_id = existing["id"]
                analysis.overall_score = existing.get("overall_score", analysis.overall_score)
                analysis.source = existing.get("source", analysis.source)
            except Exception as e:
                logger.error(f"Failed to store analysis for idea {idea.id}: {e}")
                skipped.append(idea.id)
                continue

            try:
                await db.attach_analysis(idea.id, analysis_id, analysis.overall_score)
            except Exception as e:
                logger.error(f"Failed to link analysis {analysis_id} to idea {idea.id}: {e}")
                skipped.append(idea.id)
                continue

            analyzed += 1
            if analysis.source == "fallback":
                fallbacks += 1
            logger.info(f"Successfully analyzed idea {idea.id} ({analysis.source})")

        logger.info(f"Completed Build Together analysis. Analyzed {analyzed} of {len(ideas)} ideas.")
        return {
            "total_ideas": len(ideas),
            "analyzed_count": analyzed,
            "fallback_count": fallbacks,
            "skipped": skipped,
        }
