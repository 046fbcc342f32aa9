import json
import logging
from typing import Dict, Iterable, List, Optional

from google import genai
from google.genai import types

from debt_tracker import config
from debt_tracker.analytics import current_balance
from debt_tracker.domain import Account

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "To use the AI Debt Advisor, open Settings and enter your Google Gemini API Key. "
    "You can get one for free at aistudio.google.com."
)
EMPTY_RESPONSE_MESSAGE = "No analysis could be generated at this time."
ERROR_MESSAGE = (
    "Sorry, I encountered an error while analyzing your data. "
    "Please check your API Key and try again."
)

PROMPT_TEMPLATE = """\
I am a financial debt tracking application user. Here is my current liability portfolio:
{summary}

Please analyze my debt situation.
1. Identify which debt I should pay off first using the Avalanche method (highest interest rate first).
2. Provide a brief, encouraging summary of my financial health based on these numbers.
3. Give me 3 actionable bullet points to reduce my debt faster.

Keep the response concise, friendly, and formatted in Markdown.
"""


def resolve_api_key(api_key: Optional[str] = None) -> Optional[str]:
    return (api_key or "").strip() or config.default_api_key()


def summarize_accounts(accounts: Iterable[Account]) -> List[Dict[str, object]]:
    return [
        {
            "name": a.name,
            "type": a.type,
            "rate": f"{a.interest_rate:g}%",
            "currentBalance": current_balance(a),
        }
        for a in accounts
    ]


def build_prompt(summary: List[Dict[str, object]]) -> str:
    return PROMPT_TEMPLATE.format(summary=json.dumps(summary, indent=2))


async def get_advice(accounts: Iterable[Account], api_key: Optional[str] = None) -> str:
    """Ask Gemini for a short avalanche-method analysis of ``accounts``.

    Never raises: a missing key, an empty reply and any client or API failure
    each map to a fixed user-facing message. The prompt is built before the
    request is sent, so later edits to the accounts don't change it.
    """
    key = resolve_api_key(api_key)
    if not key:
        return MISSING_KEY_MESSAGE

    prompt = build_prompt(summarize_accounts(accounts))
    try:
        # the async session is tied to the running loop; close it before asyncio.run returns
        async with genai.Client(api_key=key).aio as aclient:
            response = await aclient.models.generate_content(
                model=config.model_name(),
                contents=prompt,
                config=types.GenerateContentConfig(
                    thinking_config=types.ThinkingConfig(thinking_budget=0),
                ),
            )
        text = response.text
    except Exception:
        logger.exception("debt analysis request failed")
        return ERROR_MESSAGE

    return text or EMPTY_RESPONSE_MESSAGE
