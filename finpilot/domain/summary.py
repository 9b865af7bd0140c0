"""Executive summary - optional remote enrichment with a deterministic local fallback"""

import logging
from typing import Optional, Protocol, Tuple, runtime_checkable

from finpilot.domain.exceptions import SummaryServiceError
from finpilot.domain.models import FundingReadiness, SummaryRequest

logger = logging.getLogger(__name__)

SOURCE_REMOTE = "remote"
SOURCE_FALLBACK = "fallback"


@runtime_checkable
class SummaryProvider(Protocol):
    """Anything that can turn an analysis into a short prose summary.

    Implementations raise SummaryServiceError on any failure.
    """

    async def generate_summary(self, request: SummaryRequest) -> str:
        ...


def local_summary(readiness: FundingReadiness) -> str:
    """Deterministic summary built only from the readiness result"""
    return (
        f"Funding readiness score {readiness.score}/100, classified as {readiness.classification}. "
        f"{readiness.professional_explanation}"
    )


async def resolve_summary(
    provider: Optional[SummaryProvider],
    request: SummaryRequest,
    readiness: FundingReadiness,
) -> Tuple[str, str]:
    """
    Ask the provider for a summary, falling back to the local one.

    Returns (summary_text, source) where source is "remote" or "fallback".
    A provider failure is recovered here and never propagates.
    """
    if provider is None:
        return local_summary(readiness), SOURCE_FALLBACK

    try:
        text = await provider.generate_summary(request)
    except SummaryServiceError as e:
        logger.warning("Summary service unavailable, using local summary: %s", e)
        return local_summary(readiness), SOURCE_FALLBACK

    if not text or not text.strip():
        logger.warning("Summary service returned empty text, using local summary")
        return local_summary(readiness), SOURCE_FALLBACK

    return text.strip(), SOURCE_REMOTE
