"""
AI flashcard generation
Wraps a pydantic-ai agent that returns GeneratedCardSet and cleans its output
into front/back pairs ready to be stored.
"""
from typing import Iterable, List, Optional

from loguru import logger

from flashdeck.data.prompts.flashcard_prompts import FLASHCARD_GENERATOR_PROMPT, build_generation_request
from flashdeck.llm.base import AgentClient
from flashdeck.models.flashcard_models import GeneratedCard, GeneratedCardSet
from flashdeck.services.errors import GenerationError

DEFAULT_CARD_COUNT = 20
MAX_CARD_COUNT = 50
MAX_SIDE_LENGTH = 1000


def create_flashcard_agent():
    return AgentClient(system_prompt=FLASHCARD_GENERATOR_PROMPT, tools=[]).create_agent(
        result_type=GeneratedCardSet
    )


class FlashcardGenerator:
    """Turns a topic and a count into front/back pairs using an LLM agent"""

    def __init__(self, agent=None):
        self._agent = agent

    @property
    def agent(self):
        if self._agent is None:
            self._agent = create_flashcard_agent()
        return self._agent

    async def generate(self, topic: str, count: int = DEFAULT_CARD_COUNT,
                       existing_fronts: Optional[Iterable[str]] = None) -> List[GeneratedCard]:
        topic = (topic or "").strip()
        if not topic:
            raise GenerationError("A topic is required to generate flashcards")
        if count < 1 or count > MAX_CARD_COUNT:
            raise GenerationError(f"Card count must be between 1 and {MAX_CARD_COUNT}")

        existing = list(existing_fronts or [])
        prompt = build_generation_request(topic, count, existing)
        logger.info(f"Generating {count} flashcards for topic: {topic!r}")
        try:
            result = await self.agent.run(prompt)
        except Exception as e:
            logger.error(f"Flashcard generation failed: {e}")
            raise GenerationError(f"Failed to generate flashcards: {e}") from e

        card_set: GeneratedCardSet = result.output
        cards = clean_generated_cards(card_set.cards, existing)[:count]
        if not cards:
            raise GenerationError("The generator returned no usable flashcards")
        logger.info(f"Generated {len(cards)} usable flashcards (requested {count})")
        return cards


def clean_generated_cards(cards: Iterable[GeneratedCard],
                          existing_fronts: Iterable[str] = ()) -> List[GeneratedCard]:
    """Trim sides, drop empty or oversized cards and repeated fronts"""
    seen = {front.strip().casefold() for front in existing_fronts}
    cleaned = []
    for card in cards:
        front = card.front.strip()
        back = card.back.strip()
        if not front or not back:
            continue
        if len(front) > MAX_SIDE_LENGTH or len(back) > MAX_SIDE_LENGTH:
            continue
        key = front.casefold()
        if key in seen:
            continue
        seen.add(key)
        cleaned.append(GeneratedCard(front=front, back=back))
    return cleaned
