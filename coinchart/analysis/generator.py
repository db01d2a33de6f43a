import asyncio
from typing import Any, Dict, Optional

from coinchart.analysis.prompt_builder import PromptBuilder
from coinchart.contracts.config import ConfigProtocol
from coinchart.contracts.errors import ConfigurationError, MalformedResponse, NoData, PipelineError
from coinchart.logger.logger import Logger
from coinchart.market.models import AnalysisResult, CoinSnapshot, PriceSeries
from coinchart.platforms.ai_providers.google import GoogleAIClient

NO_DATA_REASON = "no data"


class AnalysisGenerator:
    """Turns a resolved data set into a short market summary from Gemini."""

    def __init__(self,
                 client: GoogleAIClient,
                 logger: Logger,
                 prompt_builder: Optional[PromptBuilder] = None,
                 model_config: Optional[Dict[str, Any]] = None) -> None:
        self.client = client
        self.logger = logger
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.model_config = model_config or {}

    @classmethod
    def from_config(cls, config: ConfigProtocol, logger: Logger) -> "AnalysisGenerator":
        client = GoogleAIClient(
            api_key=config.GOOGLE_STUDIO_API_KEY,
            model=config.GOOGLE_STUDIO_MODEL,
            logger=logger,
            timeout_seconds=config.ANALYSIS_TIMEOUT_SECONDS,
        )
        return cls(client, logger, model_config=config.get_model_config())

    async def generate(self,
                       snapshot: Optional[CoinSnapshot],
                       series: Optional[PriceSeries],
                       currency_id: str,
                       range_days: int) -> AnalysisResult:
        """Build the prompt and submit it.

        Returns FAILED(NO_DATA) without any network call when there is nothing
        to analyze and FAILED(CONFIGURATION) when no API key is configured.
        """
        if snapshot is None or not series:
            self.logger.info("Analysis skipped: no coin details or chart data")
            return AnalysisResult.failed(NoData(NO_DATA_REASON).to_failure())

        if not self.client.api_key:
            error = ConfigurationError(
                "Gemini API key is not configured. Set GOOGLE_STUDIO_API_KEY in keys.env or the environment."
            )
            self.logger.error(error.message)
            return AnalysisResult.failed(error.to_failure())

        prompt = self.prompt_builder.build_prompt(snapshot, series, currency_id, range_days)
        self.logger.debug(f"Prompt sent to LLM:\n{prompt}")

        try:
            text = await self.client.generate_text(prompt, self.model_config)
        except asyncio.CancelledError:
            self.logger.debug("Analysis generation cancelled")
            raise
        except PipelineError as e:
            self.logger.warning(f"Analysis generation failed: {e.kind.value} - {e}")
            return AnalysisResult.failed(e.to_failure())
        except Exception as e:
            self.logger.error(f"Unexpected error during analysis generation: {type(e).__name__} - {e}",
                              exc_info=True)
            error = MalformedResponse(f"Unexpected error from analysis provider: {type(e).__name__}")
            return AnalysisResult.failed(error.to_failure())

        self.logger.info("Analysis generated successfully")
        return AnalysisResult.succeeded(text)
