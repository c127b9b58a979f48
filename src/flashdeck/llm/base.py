from pydantic_ai import Agent
from typing import List, Callable, Optional, Type, TypeVar
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider
from loguru import logger

from flashdeck.utils.config_loader import get_setting

DEFAULT_MODEL_NAME = "gemini-2.0-flash"

T = TypeVar('T')


def build_model(model_name: Optional[str] = None) -> GoogleModel:
    """Gemini model configured from GEMINI_API_KEY / GEMINI_MODEL"""
    api_key = get_setting(["llm", "api_key"], env_var="GEMINI_API_KEY")
    model_name = model_name or get_setting(["llm", "model"], env_var="GEMINI_MODEL", default=DEFAULT_MODEL_NAME)
    if not api_key:
        logger.warning("GEMINI_API_KEY is not set; generation requests will fail")
    provider = GoogleProvider(api_key=api_key)
    return GoogleModel(model_name, provider=provider)


class AgentClient:
    def __init__(
        self, system_prompt: str, tools: List[Callable], model: Optional[GoogleModel] = None
    ):
        self.model = model if model is not None else build_model()
        self.system_prompt = system_prompt
        self.tools = tools

    def create_agent(self, result_type: Optional[Type[T]] = None):
        """Creates and returns a PydanticAI Agent instance."""
        if result_type:
            agent: Agent[None, T] = Agent(
                model=self.model,
                system_prompt=self.system_prompt,
                tools=self.tools,
                output_type=result_type  # type: ignore
            )
            return agent
        return Agent(model=self.model, system_prompt=self.system_prompt, tools=self.tools)
