import logging
from typing import Iterable, Optional

from config import settings
from models.resume_models import AnalysisResult
from services.ats_scorer import ATSScorer
from services.deadline import run_with_deadline
from services.errors import AnalysisFailure, ResumeProcessingError
from services.ingestion import IngestionPipeline

logger = logging.getLogger(__name__)


class ResumeService:
    def __init__(self, pipeline: IngestionPipeline = None, scorer: ATSScorer = None,
                 analysis_timeout: float = None,
                 target_skills: Optional[Iterable[str]] = None):
        self.pipeline = pipeline or IngestionPipeline()
        self.scorer = scorer or ATSScorer()
        self.analysis_timeout = (
            analysis_timeout if analysis_timeout is not None else settings.ANALYSIS_TIMEOUT_SECONDS
        )
        self.target_skills = tuple(target_skills) if target_skills is not None else None

    async def analyze_upload(self, upload) -> AnalysisResult:
        """
        Extract text from an upload and score it.

        Both steps run against their own deadline. Unexpected scorer errors are
        reported as AnalysisFailure.
        """
        text = await self.pipeline.process_upload(upload)

        try:
            analysis = await run_with_deadline(
                self.scorer.analyze_resume, text, self.target_skills,
                timeout=self.analysis_timeout, label=f"Analysis of {upload.filename}",
            )
        except ResumeProcessingError:
            raise
        except Exception as e:
            logger.exception(f"Analyzer error for {upload.filename}")
            raise AnalysisFailure() from e

        logger.info(f"Analysis completed for: {upload.filename} (score {analysis.ats_score})")
        return analysis
