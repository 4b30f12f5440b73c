import logging
from datetime import datetime
from typing import Any, Dict, Optional

from helix.analysis import AnalysisEngine
from helix.config import Settings
from helix.discovery import PainpointDiscovery
from helix.jobs import JobRunner, JobStep
from helix.llm import Analyst
from helix.reports import ReportAggregator
from helix.search import SearchClient

logger = logging.getLogger(__name__)


def automation_key(now: Optional[datetime] = None) -> str:
    return f"automation:{(now or datetime.utcnow()).date().isoformat()}"


class AutomationWorkflow:
    """Daily discovery, then analysis, then the report, run in-process."""

    def __init__(self,
                 discovery: PainpointDiscovery,
                 engine: AnalysisEngine,
                 aggregator: ReportAggregator,
                 runner: JobRunner):
        self.discovery = discovery
        self.engine = engine
        self.aggregator = aggregator
        self.runner = runner

    @classmethod
    def from_settings(cls, settings: Settings) -> "AutomationWorkflow":
        search_client = SearchClient(api_key=settings.serper_api_key)
        analyst = Analyst(model_name=settings.model_name, api_key=settings.gemini_api_key)
        return cls(
            discovery=PainpointDiscovery(search_client, delay=settings.request_delay),
            engine=AnalysisEngine(analyst, delay=settings.request_delay,
                                  batch_size=settings.analysis_batch_size),
            aggregator=ReportAggregator(top_n=settings.report_top_n),
            runner=JobRunner(attempts=settings.step_attempts,
                             wait_multiplier=settings.step_wait_multiplier),
        )

    async def run(self, force: bool = False, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.utcnow()
        key = automation_key(now)
        logger.info(f"Starting automation workflow {key} (force={force})")
        steps = [
            JobStep("discovery", lambda: self.discovery.run_daily(now=now)),
            JobStep("analysis", self.engine.run),
            JobStep("report", lambda: self.aggregator.run(now=now)),
        ]
        return await self.runner.run(key, steps, force=force)
