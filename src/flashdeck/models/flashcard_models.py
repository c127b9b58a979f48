from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class StudyCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    front: str
    back: str
    order: int = 0


class GeneratedCard(BaseModel):
    front: str = Field(description="Prompt side: a word, phrase or question")
    back: str = Field(description="Answer side: translation, definition or answer")


class GeneratedCardSet(BaseModel):
    topic: Optional[str] = None
    cards: List[GeneratedCard]
