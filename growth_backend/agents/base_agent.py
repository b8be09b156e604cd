"""
Base class for AI agents
"""
from abc import ABC, abstractmethod
from growth_backend.services.claude_service import claude_service, ClaudeService
from typing import Dict, Any, Optional


class BaseAgent(ABC):
    """
    Shared plumbing for Claude-backed agents
    """

    def __init__(self, name: str, claude: Optional[ClaudeService] = None):
        self.name = name
        self.claude = claude or claude_service

    @abstractmethod
    async def process(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process the given context and return results
        """
        pass

    @property
    def ai_available(self) -> bool:
        return self.claude.is_available

    async def generate_structured_response(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        response_format: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Wrapper for structured Claude responses"""
        return await self.claude.generate_structured_response(
            prompt, system_prompt, response_format
        )
