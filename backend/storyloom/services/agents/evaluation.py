"""Agents that read chapter prose without writing memory."""

from pydantic import BaseModel, RootModel

from storyloom.models import AgentCategory, AgentConfig, CharacterName, Prompt
from storyloom.services.agents.base import LLMAgent
from storyloom.services.prompts import build_name_extraction_prompt

NAME_EXTRACTION_CONFIG = AgentConfig(models=["microsoft/mai-ds-r1:free"], temperature=0, max_tokens=20000)


class NameExtractionInput(BaseModel):
    chapter_text: str


class CharacterNameList(RootModel[list[CharacterName]]):
    def names(self) -> list[str]:
        return [item.name for item in self.root]


class CharacterNameExtractionAgent(LLMAgent[NameExtractionInput, CharacterNameList]):
    """Harvests every explicitly named character mention from a chapter."""

    name = "CharacterNameExtractionAgent"
    category = AgentCategory.EVALUATION
    output_model = CharacterNameList

    def __init__(self, config: AgentConfig = NAME_EXTRACTION_CONFIG):
        super().__init__(config)

    def generate_prompt(self, input: NameExtractionInput) -> Prompt:
        return build_name_extraction_prompt(input.chapter_text)
