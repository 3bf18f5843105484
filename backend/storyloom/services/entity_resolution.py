"""
Character entity resolution.

Maps free-text name mentions onto known characters by embedding similarity
against every canonical name and alias, then collects the groups those
characters belong to.
"""

import asyncio

from storyloom.logging import get_logger
from storyloom.models import Character, CharacterGroup, CharacterMappingResult, CharacterState
from storyloom.services.embedding import EmbeddingClient
from storyloom.services.vector import cosine_similarity

logger = get_logger('services.entity_resolution')


class CharacterMapper:
    """Resolves name mentions to characters and character groups."""

    def __init__(self, embedding: EmbeddingClient, threshold: float = 0.5):
        self.embedding = embedding
        self.threshold = threshold

    async def _embed_name(self, name: str) -> list[float]:
        vectors = await self.embedding.embed(name)
        return vectors[0] if vectors else []

    async def map(self, names: list[str], state: CharacterState) -> CharacterMappingResult:
        """
        Resolve mentions against the character state.

        A mention matches the character owning its most similar name when the
        similarity is strictly above the threshold.

        :param names: Name mentions, possibly repeated
        :param state: Characters and groups to resolve against
        :return: Matched characters and their groups, in first-match order
        :rtype: CharacterMappingResult
        """
        if not names or state.is_empty():
            return CharacterMappingResult()

        mentions = list(dict.fromkeys(n.strip() for n in names if n and n.strip()))
        if not mentions:
            return CharacterMappingResult()

        known: list[tuple[Character, str, list[float]]] = []
        for character in state.characters:
            for name in character.identity.all_names():
                if not name.strip():
                    continue
                known.append((character, name, await self._embed_name(name)))

        mention_vectors = await asyncio.gather(*(self._embed_name(m) for m in mentions))

        characters: list[Character] = []
        seen_ids: set[str] = set()
        for mention, vector in zip(mentions, mention_vectors):
            best: Character | None = None
            best_name = ""
            best_score = float("-inf")
            for character, name, known_vector in known:
                score = cosine_similarity(vector, known_vector)
                if score is not None and score > best_score:
                    best, best_name, best_score = character, name, score

            if best is None or best_score <= self.threshold:
                logger.debug(f"No character match for '{mention}'")
                continue
            logger.debug(f"'{mention}' -> {best.character_id} via '{best_name}' ({best_score:.3f})")
            if best.character_id not in seen_ids:
                seen_ids.add(best.character_id)
                characters.append(best)

        groups: list[CharacterGroup] = []
        seen_groups: set[str] = set()
        for character in characters:
            for group in state.character_groups:
                if character.character_id in group.members and group.group_id not in seen_groups:
                    seen_groups.add(group.group_id)
                    groups.append(group)

        return CharacterMappingResult(characters=characters, character_groups=groups)
