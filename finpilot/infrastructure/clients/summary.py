"""Remote summary client with exponential backoff retry logic"""

import asyncio
import json
import re
from typing import Any, Dict

import httpx

from finpilot.config import settings
from finpilot.domain.exceptions import SummaryServiceError
from finpilot.domain.models import SummaryRequest, Stable
from finpilot.infrastructure.observability.metrics import summary_latency_histogram

SYSTEM_PROMPT = (
    "You are the backend financial engine for FinPilot, a pre-loan financial intelligence platform for MSMEs. "
    "Use only the numbers provided. Never invent missing data. Respond with a JSON object only."
)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


def build_prompt(request: SummaryRequest) -> str:
    data = request.financial_input
    metrics = request.metrics
    runway = "stable" if isinstance(metrics.runway, Stable) else f"{metrics.runway.value} months"
    return (
        "Analyze the following business financials.\n\n"
        "FINANCIAL DATA:\n"
        f"- Monthly Revenue: ₹{data.revenue:,.0f}\n"
        f"- Monthly Expenses: ₹{data.expenses:,.0f}\n"
        f"- Cash Balance: ₹{data.cash:,.0f}\n"
        f"- Existing Debt: ₹{data.debt:,.0f}\n"
        f"- Funding Goal: {data.goal}\n\n"
        "PRE-CALCULATED METRICS:\n"
        f"- Burn Rate: ₹{metrics.burn_rate:,.0f}/month\n"
        f"- Runway: {runway}\n"
        f"- Debt Ratio: {metrics.debt_ratio}\n"
        f"- Risk Level: {metrics.risk_level}\n"
        f"- Funding Readiness Score: {request.readiness_score}/100\n\n"
        'Return {"aiSummary": "<2-3 sentence executive summary of the business financial health>"}'
    )


def extract_summary(body: Dict[str, Any]) -> str:
    """
    Pull the summary text out of a chat-completion response.

    Accepts a JSON object with an "aiSummary" key (optionally wrapped in a
    markdown code fence) or plain prose.

    Raises:
        SummaryServiceError: When the response carries no usable content
    """
    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise SummaryServiceError(f"Malformed summary response: {e}") from e

    if not isinstance(content, str) or not content.strip():
        raise SummaryServiceError("Summary response has no content")

    cleaned = _CODE_FENCE.sub("", content.strip())
    if cleaned.startswith("{"):
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise SummaryServiceError(f"Summary response is not valid JSON: {e}") from e
        summary = parsed.get("aiSummary") if isinstance(parsed, dict) else None
        if not isinstance(summary, str) or not summary.strip():
            raise SummaryServiceError("Summary response JSON has no aiSummary")
        return summary.strip()
    return cleaned


class SummaryClient:
    """Client for the OpenAI-compatible chat completion gateway"""

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url or settings.summary_api_url
        self.api_key = api_key if api_key is not None else settings.summary_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.model = settings.summary_model
        self.max_retries = settings.summary_max_retries
        self.backoff_base = settings.summary_backoff_base
        self.transport = transport

    async def generate_summary(self, request: SummaryRequest) -> str:
        """
        Request an executive summary for one analysis.

        Retry strategy:
        - Exponential backoff: base, 2x base, 4x base
        - Retries on 5xx errors and network failures
        - Any 4xx response fails immediately

        Raises:
            SummaryServiceError: On exhausted retries, client errors, or unusable content
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(request)},
            ],
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with summary_latency_histogram.time():
                        response = await client.post(self.api_url, json=payload, headers=headers)
                        response.raise_for_status()
                    return extract_summary(response.json())

                except httpx.HTTPStatusError as e:
                    status = e.response.status_code
                    if 400 <= status < 500:
                        raise SummaryServiceError(f"Summary service rejected request: {status}") from e
                    error: Exception = e

                except httpx.RequestError as e:
                    error = e

                except ValueError as e:
                    raise SummaryServiceError(f"Summary service returned invalid JSON: {e}") from e

                attempt += 1
                if attempt >= self.max_retries:
                    raise SummaryServiceError(f"Summary service failed after {attempt} attempts: {error}") from error

                # Exponential backoff: base, 2x, 4x ...
                await asyncio.sleep(self.backoff_base * (2 ** (attempt - 1)))
