"""
Story prompt builder.

Pure template fills that turn story parameters into the instruction text
sent to a text provider. Nothing here touches the network.

- build_enhanced_story_prompt: three-act scaffold sized for the reader's
  age band, with an emotional arc and theme sensory hints
- build_illustrated_story_prompt: the enhanced prompt plus the 5-7 scene
  layout the scene extractor expects
- build_basic_story_prompt: the compact prompt providers fall back to when
  a request carries no custom prompt
"""

from dataclasses import dataclass, field
from typing import Optional

from ..types import AgeGroup, StoryChild, TextGenerationRequest
from .story_templates import get_template_by_id


@dataclass(frozen=True)
class AgeGuidelines:
    """Length and language guidance for one reader age band."""

    target_words: int
    complexity: str
    sentence_structure: str
    vocabulary: str
    emotional_depth: str


AGE_GUIDELINES: dict[AgeGroup, AgeGuidelines] = {
    AgeGroup.TODDLER: AgeGuidelines(
        target_words=300,
        complexity="Very simple cause-and-effect. Heavy use of repetition for memory and rhythm.",
        sentence_structure="Short, simple sentences (5-8 words). Lots of repetition.",
        vocabulary=(
            "Basic, concrete words. Bold sounds and onomatopoeia "
            "(e.g., **SPLASH**, **ZOOM**, **BEEP**)."
        ),
        emotional_depth="Simple emotions: happy, sad, excited. Clear and obvious.",
    ),
    AgeGroup.PRESCHOOL: AgeGuidelines(
        target_words=450,
        complexity="Simple problem-solving. Clear sequence of events. Introduce friends/helpers.",
        sentence_structure="Mix of short (5-8 words) and medium (10-12 words) sentences.",
        vocabulary=(
            "Familiar words with action words. Use bold onomatopoeia (e.g., **WHOOSH**, "
            "**CRUNCH**). Include 1-2 interaction cues in brackets like "
            "[Action: Tickle the child] or [Sound: Roar like a lion]."
        ),
        emotional_depth="Basic emotions plus curiosity, surprise. Show feelings through actions.",
    ),
    AgeGroup.EARLY_ELEMENTARY: AgeGuidelines(
        target_words=600,
        complexity="Problem-solving with choices. Multiple challenges. Character shows growth.",
        sentence_structure="Varied sentence length. Some compound sentences. Natural dialogue.",
        vocabulary=(
            'Rich descriptive language. Include 2 "Sparkle Words" (advanced vocabulary '
            "explained in context). Include 2-3 interaction cues in brackets like "
            "[Parent: Ask the child what happens next]."
        ),
        emotional_depth="Complex emotions: determination, pride, worry, relief. Internal thoughts.",
    ),
    AgeGroup.ELEMENTARY: AgeGuidelines(
        target_words=750,
        complexity="Multi-step problem solving. Moral choices. Clear character transformation.",
        sentence_structure="Sophisticated variety. Compound and complex sentences. Rich dialogue.",
        vocabulary=(
            'Advanced vocabulary. Metaphors and similes. Include 3 "Sparkle Words" '
            "(advanced vocabulary explained in context). Include 3 interaction cues in "
            "brackets for deep engagement."
        ),
        emotional_depth=(
            "Nuanced emotions: conflicted feelings, empathy, courage. Character introspection."
        ),
    ),
}

DEFAULT_AGE_GROUP = AgeGroup.PRESCHOOL
MULTI_CHILD_LENGTH_FACTOR = 1.2

EMOTIONAL_ARCS = {
    "adventure": "Curiosity → Excitement → Challenge → Determination → Achievement → Pride",
    "friendship": "Loneliness → Meeting → Connection → Conflict → Understanding → Deep Bond",
    "discovery": "Wonder → Exploration → Mystery → Revelation → Understanding → Awe",
    "courage": "Fear → Doubt → Decision → Action → Success → Confidence",
    "kindness": "Noticing Need → Empathy → Desire to Help → Action → Impact → Joy",
    "learning": "Confusion → Curiosity → Effort → Struggle → Breakthrough → Mastery",
    "teamwork": (
        "Individual Effort → Frustration → Collaboration → Synergy → Success → Celebration"
    ),
}

DEFAULT_ARC = "adventure"

# (arc, theme keywords, adjective keywords); first matching row wins
ARC_KEYWORDS: tuple[tuple[str, tuple[str, ...], tuple[str, ...]], ...] = (
    ("friendship", ("friend",), ("kind",)),
    ("courage", (), ("brave", "courageous")),
    ("learning", ("learn", "school"), ()),
    ("discovery", ("discover",), ("curious",)),
    ("kindness", (), ("kind", "helpful")),
    ("teamwork", ("team", "together"), ()),
)

THEME_SENSORY_DETAILS = {
    "Space": (
        "Twinkling stars, weightless floating, metallic spacecraft smell, smooth cold controls, "
        "hum of engines, colorful swirling nebulas"
    ),
    "Ocean": (
        "Cool water on skin, salty taste, sound of waves, colorful coral, smooth fish scales, "
        "bubbles rising"
    ),
    "Fantasy": (
        "Magical sparkles, sweet potion smells, soft fairy wings, mysterious fog, tinkling "
        "chimes, glowing crystals"
    ),
    "Nature": (
        "Rustling leaves, earth smell, bird songs, rough tree bark, soft moss, sunlight "
        "through branches"
    ),
    "Dinosaurs": (
        "Heavy footsteps, roaring sounds, prehistoric plants, rough dinosaur skin, warm "
        "sunshine, dusty ground"
    ),
    "Superhero": (
        "Whooshing cape, powerful stance, city sounds, bright costume, energy crackling, "
        "wind rushing past"
    ),
    "Princess": (
        "Silk dresses, castle echoes, sweet perfumes, sparkling jewels, soft cushions, "
        "royal trumpets"
    ),
    "Robots": (
        "Metallic clanks, whirring gears, electronic beeps, smooth chrome surfaces, flashing "
        "lights, mechanical precision"
    ),
    "Adventure": (
        "Mountain air, crunching footsteps, distant calls, rough rock surfaces, cool breeze, "
        "discovery excitement"
    ),
    "Magic": (
        "Magical tingles, ancient book smell, wand warmth, spell sparkles, mysterious "
        "whispers, transformed reality"
    ),
    "Friendship": (
        "Warm hugs, laughter sounds, shared secrets, holding hands, happy tears, comfort feelings"
    ),
    "Learning": (
        "Pencil scratching, page turning, lightbulb moments, focused quiet, proud smiles, "
        "understanding clicks"
    ),
    "Pirates": (
        "Salty sea spray, wooden deck creaking, cannon booms, treasure clinking, parrot "
        "squawks, flag snapping"
    ),
}

GENERIC_SENSORY_DETAILS = "vivid sights, sounds, textures, and feelings"


@dataclass
class EnhancedStoryRequest:
    """Parameters for the enhanced story prompt."""

    child_name: str
    adjectives: list[str]
    theme: str
    moral: Optional[str] = None
    age_group: Optional[AgeGroup] = None
    children: list[StoryChild] = field(default_factory=list)

    @property
    def is_multi_child(self) -> bool:
        return len(self.children) > 0


def determine_age_group(age: Optional[int] = None) -> AgeGroup:
    """Map a child's age in years to a reader age band."""
    if not age:
        return DEFAULT_AGE_GROUP
    if age <= 3:
        return AgeGroup.TODDLER
    if age <= 5:
        return AgeGroup.PRESCHOOL
    if age <= 7:
        return AgeGroup.EARLY_ELEMENTARY
    return AgeGroup.ELEMENTARY


def determine_emotional_arc(theme: str, adjectives: list[str]) -> str:
    """Select the emotional arc text for a theme and personality."""
    lower_theme = theme.lower()
    lower_adjectives = " ".join(adjectives).lower()

    for arc, theme_words, adjective_words in ARC_KEYWORDS:
        if any(word in lower_theme for word in theme_words) or any(
            word in lower_adjectives for word in adjective_words
        ):
            return EMOTIONAL_ARCS[arc]

    return EMOTIONAL_ARCS[DEFAULT_ARC]


def get_sensory_details(theme: str) -> str:
    return THEME_SENSORY_DETAILS.get(theme, GENERIC_SENSORY_DETAILS)


def act_word_counts(target_words: int) -> tuple[int, int, int]:
    """Setup, rising action and resolution lengths (25% / 50% / 25%)."""
    return round(target_words * 0.25), round(target_words * 0.5), round(target_words * 0.25)


def build_enhanced_story_prompt(request: EnhancedStoryRequest) -> str:
    """
    Build the structured story instruction.

    Requests with a children list get the multi-child prompt; everything
    else gets the single-child prompt.
    """
    age_group = AgeGroup(request.age_group) if request.age_group else DEFAULT_AGE_GROUP
    guidelines = AGE_GUIDELINES[age_group]

    if request.is_multi_child:
        adjectives = [adj for child in request.children for adj in child.adjectives]
        arc = determine_emotional_arc(request.theme, adjectives)
        return _build_multi_child_prompt(request, guidelines, arc, get_sensory_details(request.theme))

    arc = determine_emotional_arc(request.theme, request.adjectives)
    return _build_single_child_prompt(
        request, age_group, guidelines, arc, get_sensory_details(request.theme)
    )


def _build_single_child_prompt(
    request: EnhancedStoryRequest,
    age_group: AgeGroup,
    guidelines: AgeGuidelines,
    emotional_arc: str,
    sensory_details: str,
) -> str:
    name = request.child_name
    theme = request.theme
    traits = ", ".join(request.adjectives)
    setup, rising, resolution = act_word_counts(guidelines.target_words)
    moral_section = (
        f'\n\nMORAL/LESSON: Naturally weave in this lesson: "{request.moral}". '
        "Don't preach - show it through the story."
        if request.moral else ""
    )

    return f"""You are an expert children's story writer specializing in engaging, well-structured bedtime stories. Create a captivating story for {name}.

CHARACTER:
- Name: {name}
- Personality: {traits}
- Age Group: {age_group.value} ({guidelines.target_words} words target)

THEME: {theme}{moral_section}

STORY STRUCTURE (Follow this 3-act structure strictly):

ACT 1 - SETUP ({setup} words):
• Introduce {name} in their normal world
• Show their personality through ACTION (not telling)
• Establish the setting with sensory details
• Hook the reader with something interesting

ACT 2 - CONFLICT & RISING ACTION ({rising} words):
• INCITING INCIDENT: Something happens that changes everything
• {name} faces a challenge or problem related to {theme}
• Show {name} trying to solve it (use their {traits} traits!)
• Include obstacles that make it harder
• Build tension and excitement
• Show emotions and thoughts

ACT 3 - CLIMAX & RESOLUTION ({resolution} words):
• CLIMAX: The biggest challenge! {name} must make a choice or take brave action.
• SUCCESS: {name} succeeds SPECIFICALLY by using their {traits} traits. This is the key to the solution!
• RESOLUTION: Show the positive outcome
• BEDTIME BRIDGE: End with 2-3 sentences of rhythmic, calming language that transitions the child to sleep (e.g., "And as the stars twinkled, {name} snuggled deep into their cozy bed...").
• Show how {name} has grown

CHARACTER ARC:
{name} should grow during this story:
- WANTS: What does {name} want at the beginning?
- OBSTACLE: What stands in their way?
- GROWTH: What does {name} learn or how do they change?
- ACHIEVEMENT: How is {name} different/better at the end?

EMOTIONAL JOURNEY:
Guide readers through: {emotional_arc}
Show emotions through actions, dialogue, and physical sensations.

SENSORY IMMERSION:
Bring the {theme} theme to life with vivid details:
{sensory_details}

Include at least 3 sensory details per scene (what {name} sees, hears, feels, smells, or tastes).

MAGICAL READING FEATURES:
• BOLD SOUNDS: Use **BOLD ALL CAPS** for onomatopoeia (e.g., **CRASH**, **GIGGLE**, **WHOOSH**) to help parents emphasize sounds.
• SPARKLE WORDS: Include 2-3 slightly advanced words (e.g., "luminous," "courageous") and explain them naturally through context.
• INTERACTION CUES: Include 2-3 cues in [brackets] for parents (e.g., [Action: Point to the blue star], [Sound: Make a soft snoring sound]).

WRITING STYLE & REQUIREMENTS:
{guidelines.complexity}

Sentences: {guidelines.sentence_structure}

Vocabulary: {guidelines.vocabulary}

Emotional Depth: {guidelines.emotional_depth}

Additional Requirements:
✓ Exactly {guidelines.target_words} words (±30 words acceptable)
✓ Use {name}'s name 10-12 times throughout
✓ Include dialogue (at least 4 speaking moments)
✓ Active voice, show don't tell
✓ Varied pacing: slower for emotions, faster for action
✓ Use paragraph breaks to show scene changes
✓ Create vivid mental images
✓ Build to emotional high point before calming ending
✓ Wholesome, kid-safe, positive role model behavior
✓ NO scary elements, NO violence, NO sad endings
✓ Perfect for bedtime - calming and comforting conclusion

NARRATIVE TECHNIQUES:
• Start with action or interesting moment (no "Once upon a time")
• Use specific details instead of generic descriptions
• Include small moments of wonder
• Show cause and effect clearly
• Use repetition for rhythm (especially for younger ages)
• Build anticipation before reveals
• Include relatable emotions
• End with a sense of peace and accomplishment

Now write the story. Focus on quality, engagement, and making {name} the hero of an unforgettable {theme} adventure!"""


def _build_multi_child_prompt(
    request: EnhancedStoryRequest,
    guidelines: AgeGuidelines,
    emotional_arc: str,
    sensory_details: str,
) -> str:
    theme = request.theme
    children_list = "\n".join(
        f"{i}. {child.name} - {', '.join(child.adjectives)}"
        for i, child in enumerate(request.children, start=1)
    )
    names = ", ".join(child.name for child in request.children)
    setup, rising, resolution = act_word_counts(guidelines.target_words)
    target = round(guidelines.target_words * MULTI_CHILD_LENGTH_FACTOR)
    moral_section = (
        f'\n\nMORAL/LESSON: Naturally weave in this lesson: "{request.moral}". '
        "Show it through teamwork and friendship."
        if request.moral else ""
    )
    beats = "\n".join(
        f"• {child.name}: a moment where {child.name} shines by being "
        f"{', '.join(child.adjectives) or 'themselves'}"
        for child in request.children
    )

    return f"""You are an expert children's story writer. Create a captivating story featuring multiple children as the main characters.

CHARACTERS:
{children_list}

They are friends/siblings going on an adventure together!

THEME: {theme}{moral_section}

STORY STRUCTURE (3-act structure for multiple characters):

ACT 1 - SETUP ({setup} words):
• Introduce all children: {names}
• Show each character's unique personality through ACTION
• Establish their friendship/relationship
• Set up the {theme} setting with sensory details

ACT 2 - CONFLICT & RISING ACTION ({rising} words):
• INCITING INCIDENT: Something happens that starts their adventure
• The group faces challenges related to {theme}
• Each child contributes using their unique traits
• Show teamwork AND individual moments for each child
• Include obstacles that test their friendship
• Build tension and excitement

ACT 3 - CLIMAX & RESOLUTION ({resolution} words):
• CLIMAX: The biggest challenge requires ALL children working together
• Each child plays a crucial role, using their unique strengths
• RESOLUTION: Celebrate their teamwork and friendship
• BEDTIME BRIDGE: End with 2-3 sentences of rhythmic, calming language that transitions the children to sleep.

CHARACTER BEATS (each child gets their own):
{beats}

CHARACTER DYNAMICS:
• Give each child ({names}) distinct moments to shine
• Show them helping each other
• Include both cooperation and minor conflicts (resolved positively)
• Demonstrate that everyone's strengths matter

EMOTIONAL JOURNEY: {emotional_arc}

SENSORY IMMERSION ({theme}):
{sensory_details}

WRITING STYLE:
{guidelines.complexity}
Sentences: {guidelines.sentence_structure}
Vocabulary: {guidelines.vocabulary}
Emotional Depth: {guidelines.emotional_depth}

REQUIREMENTS:
✓ {target} words (longer to accommodate multiple characters)
✓ Each child's name appears 5-7 times
✓ Dialogue between children (at least 6 exchanges)
✓ Each child has a hero moment
✓ Show friendship and teamwork
✓ Active voice, varied pacing
✓ Vivid sensory details
✓ Wholesome, positive, perfect for bedtime
✓ Celebrate diversity of personalities

Focus on making this a story about friendship, teamwork, and how working together makes adventures more fun!"""


ILLUSTRATED_BOOK_SECTION = """ILLUSTRATED BOOK FORMAT:
IMPORTANT: Structure the story into exactly 5-7 distinct scenes, separated by blank lines (double line breaks).
Each scene should be 2-3 paragraphs and represent a key moment in the story that can be illustrated.
Make {name} the main hero who takes action and drives the story forward.
Each scene will have its own illustration, so make every scene visually distinct, with a clear action {name} performs."""


def build_illustrated_story_prompt(
    child_name: str,
    adjectives: list[str],
    theme: str,
    moral: Optional[str] = None,
    age_group: Optional[AgeGroup] = None,
) -> str:
    """Enhanced story prompt plus the scene layout needed for an illustrated book."""
    prompt = build_enhanced_story_prompt(EnhancedStoryRequest(
        child_name=child_name,
        adjectives=adjectives,
        theme=theme,
        moral=moral,
        age_group=age_group,
    ))
    return f"{prompt}\n\n{ILLUSTRATED_BOOK_SECTION.format(name=child_name)}"


def build_basic_story_prompt(request: TextGenerationRequest) -> str:
    """
    Compact story prompt used by providers when no custom prompt is given.

    A known template_id adds the template's direction and structure.
    """
    moral_text = f" The story should teach the moral: {request.moral}." if request.moral else ""
    template = get_template_by_id(request.template_id)
    template_text = f"\n\n{template.to_prompt_section()}" if template else ""

    if request.is_multi_child:
        children_list = "\n".join(
            f"{i}. {child.name} - described as: {', '.join(child.adjectives)}"
            for i, child in enumerate(request.children, start=1)
        )
        names = ", ".join(child.name for child in request.children)
        names_natural = " and ".join(child.name for child in request.children)

        return f"""Create a beautiful, age-appropriate bedtime story featuring multiple children as the main characters.

The children are:
{children_list}

Theme: {request.theme}{moral_text}{template_text}

Requirements:
- The story should be wholesome, educational, and kid-safe
- It should be engaging and suitable for bedtime reading
- Include all children's names ({names}) naturally throughout the story
- Make them work together as a team or friends
- Each child should have moments that showcase their unique traits
- Make it approximately 600-1000 words (longer to accommodate multiple characters)
- Use simple, clear language appropriate for children
- Include a positive, uplifting ending that celebrates friendship and teamwork
- The story should be about {names_natural} going on an adventure together

Story:"""

    return f"""Create a beautiful, age-appropriate bedtime story for a child named {request.child_name}.

The child should be described as: {', '.join(request.adjectives)}.

Theme: {request.theme}{moral_text}{template_text}

Requirements:
- The story should be wholesome, educational, and kid-safe
- It should be engaging and suitable for bedtime reading
- Include the child's name naturally throughout the story
- Make it approximately 500-800 words
- Use simple, clear language appropriate for children
- Include a positive, uplifting ending

Story:"""
