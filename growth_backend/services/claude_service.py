"""
Claude access for the growth coach: plain completions and JSON-object replies
"""
import json
from typing import Any, Dict, Optional

from anthropic import AsyncAnthropic

from growth_backend.config import get_settings
from growth_backend.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()

JSON_INSTRUCTIONS = """{prompt}

Reply with one JSON object and nothing else. It must follow this shape:
{schema}"""


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Pull the JSON object out of a model reply. Code fences and any chatter
    around the outermost braces are ignored; anything else raises ValueError.
    """
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end < start:
        raise ValueError(f"Failed to parse Claude response as JSON: no object found\n\nResponse: {text}")
    try:
        data = json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse Claude response as JSON: {e}\n\nResponse: {text}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class ClaudeService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ):
        api_key = api_key or settings.ANTHROPIC_API_KEY or None
        self.model = model or settings.CLAUDE_MODEL
        self.max_tokens = max_tokens or settings.CLAUDE_MAX_TOKENS
        self.client = AsyncAnthropic(api_key=api_key) if api_key else None

    @property
    def is_available(self) -> bool:
        return self.client is not None

    async def generate_response(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None
    ) -> str:
        """Text of the reply; only text blocks are kept"""
        if self.client is None:
            raise RuntimeError("AI service not configured: ANTHROPIC_API_KEY is not set")

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens or self.max_tokens,
            temperature=temperature,
            system=system_prompt or "",
            messages=[{"role": "user", "content": prompt}],
        )
        text = "".join(block.text for block in response.content if block.type == "text")
        logger.debug(f"Claude replied with {len(text)} chars (stop_reason={response.stop_reason})")
        return text

    async def generate_structured_response(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        response_format: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        schema = json.dumps(response_format or {}, indent=2, ensure_ascii=False)
        reply = await self.generate_response(
            prompt=JSON_INSTRUCTIONS.format(prompt=prompt, schema=schema),
            system_prompt=system_prompt,
            temperature=0.3,
        )
        return parse_json_object(reply)


claude_service = ClaudeService()
