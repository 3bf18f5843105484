"""Prompt builders for the memory agents."""

from storyloom.models import (
    Chapter, CharacterState, NovelConfig, PlotMemory, Prompt, Timeline, World,
)


def _json(model) -> str:
    return model.model_dump_json(indent=2)


def _chapter_block(chapter: Chapter) -> str:
    return f"## New chapter {chapter.chapter_number}: {chapter.title}\n{chapter.text}"


def build_gen_timeline_prompt(novel_config: NovelConfig) -> Prompt:
    system = (
        "You are a timeline initialization agent. Build the initial timeline of the novel "
        "as a JSON object that strictly follows the given JSON Schema. Output nothing else."
    )
    user = (
        "# Timeline initialization\n\n"
        f"## Novel configuration\n{_json(novel_config)}\n\n"
        "## Rules\n"
        "1. Pick a genesis point and calendar rules that fit the setting.\n"
        "2. Define the time units (year, month, day, hour).\n"
        "3. Split history into periods that give later events an era.\n"
        "4. Add basic consistency rules.\n"
        "5. Set the current story time to the start of the story.\n"
        "6. Add the historical events the story needs as anchors.\n"
        "7. related_content describes related elements of an event, never chapters.\n\n"
        "## Ids\n"
        "- event: evt_<type>_<short_description>\n"
        "- period: period_<name>\n"
        "- rule: rule_<type>_<description>\n\n"
        "## Vocabularies\n"
        "- event type: political, war, natural, personal, magical, cultural, economic, other\n"
        "- importance: critical, major, minor\n"
        "- rule type: causality, chronology, character_age, travel_time, other"
    )
    return Prompt(system=system, user=user)


def build_timeline_update_prompt(timeline: Timeline, chapter: Chapter) -> Prompt:
    system = (
        "You are a timeline update agent. Return the complete updated timeline as JSON "
        "that strictly follows the given JSON Schema. Output nothing else."
    )
    user = (
        f"## Current timeline\n{_json(timeline)}\n\n"
        f"{_chapter_block(chapter)}\n\n"
        "## Update rules\n"
        "- Add events that happen in the chapter, with years counted from the genesis point.\n"
        "- Mark events the chapter narrates as described.\n"
        "- Advance current_story_time; it never moves backwards.\n"
        "- Keep existing events, periods and rules unless the chapter contradicts them."
    )
    return Prompt(system=system, user=user)


def build_gen_character_prompt(novel_config: NovelConfig, timeline: Timeline | None = None) -> Prompt:
    system = (
        "You are a character initialization agent. Generate character data that strictly "
        "follows the given JSON Schema. Output nothing else."
    )
    timeline_text = _json(timeline) if timeline else "No timeline available"
    user = (
        f"## Novel configuration\n{_json(novel_config)}\n\n"
        f"## Timeline\n{timeline_text}\n\n"
        "## Requirements\n"
        "- 3-5 main characters (protagonist, antagonists, supporting cast).\n"
        "- 1-2 character groups that list their members by character_id.\n"
        "- Keep descriptions short. Progress and affinity values lie in [0, 1].\n\n"
        "## Ids\n"
        "- character: char_<name>\n"
        "- skill: skill_<description>\n"
        "- item: item_<description>\n"
        "- group: group_<name>\n\n"
        "## Vocabularies\n"
        "- emotion: neutral, angry, joyful, sad, fearful, surprised, anxious\n"
        "- relation: family, mentor, friend, rival, enemy, lover, ally\n"
        "- role: protagonist, antagonist, supporting, minor"
    )
    return Prompt(system=system, user=user)


def build_character_update_prompt(
    state: CharacterState,
    chapter: Chapter,
    timeline: Timeline | None = None,
) -> Prompt:
    system = (
        "You are a character state update agent. Update the given characters and groups "
        "following the JSON Schema strictly. Output nothing else."
    )
    timeline_text = _json(timeline) if timeline else "No timeline available"
    user = (
        f"## Current character state\n{_json(state)}\n\n"
        f"## Timeline\n{timeline_text}\n\n"
        f"{_chapter_block(chapter)}\n\n"
        "## Update rules\n"
        "- Emotional state: adjust mood and intensity (0-1) to the chapter's events.\n"
        "- Skills: raise progress (0-1) for skills that were used.\n"
        "- Inventory: add new items, remove lost ones.\n"
        "- Relationships: adjust affinity (0-1) according to interactions.\n"
        "- Voice: record new catchphrases and dialogue traits.\n"
        "- Keep every character_id and group_id unchanged.\n\n"
        "## Vocabularies\n"
        "- emotion: neutral, angry, joyful, sad, fearful, surprised, anxious\n"
        "- relation: family, mentor, friend, rival, enemy, lover, ally\n"
        "- role: protagonist, antagonist, supporting, minor"
    )
    return Prompt(system=system, user=user)


def build_gen_world_prompt(novel_config: NovelConfig) -> Prompt:
    system = (
        "You are a world state initialization agent. Build the world state as JSON that "
        "strictly follows the given JSON Schema. Output nothing else."
    )
    user = (
        f"## Novel configuration\n{_json(novel_config)}\n\n"
        "## Requirements\n"
        "- Geography with continents and their regions.\n"
        "- Magic system with its rules and limitations.\n"
        "- Major factions with leaders and territories.\n"
        "- Notable artifacts, cultural rules and physical laws, including special zones."
    )
    return Prompt(system=system, user=user)


def build_world_update_prompt(world: World, chapter: Chapter) -> Prompt:
    system = (
        "You are a world state update agent. Return the complete updated world state as JSON "
        "that strictly follows the given JSON Schema. Output nothing else."
    )
    user = (
        f"## Current world state\n{_json(world)}\n\n"
        f"{_chapter_block(chapter)}\n\n"
        "## Update rules\n"
        "- Add places, factions, artifacts and rules the chapter introduces.\n"
        "- Update ownership, territory and status changes.\n"
        "- Keep everything the chapter does not change."
    )
    return Prompt(system=system, user=user)


def build_plot_update_prompt(plot: PlotMemory, chapter: Chapter) -> Prompt:
    system = (
        "You are a plot memory agent. Track open foreshadowing, conflicts and character goals. "
        "Return JSON that strictly follows the given JSON Schema. Output nothing else."
    )
    user = (
        f"## Current plot memory\n{_json(plot)}\n\n"
        f"{_chapter_block(chapter)}\n\n"
        "## Update rules\n"
        "- Add new foreshadowing, conflicts and goals the chapter sets up.\n"
        "- Advance progress and intensity values (0-1) of existing entries.\n"
        "- Remove entries that the chapter resolves or completes."
    )
    return Prompt(system=system, user=user)


def build_name_extraction_prompt(chapter_text: str) -> Prompt:
    system = (
        "You are a character name extraction agent. Identify every named character in the chapter.\n"
        "- Only extract characters with explicit names, including aliases and titles tied to a name.\n"
        "- Never extract pronouns or vague descriptions such as 'the swordsman'.\n"
        "- Return an empty array when no names appear.\n"
        'Output an array of objects with a name field, e.g. [{"name": "Lin Xiaoyue"}, {"name": "Xiaoyue"}].'
    )
    user = f"# Character name extraction\n\n## Chapter text\n{chapter_text}"
    return Prompt(system=system, user=user)
