"""Built-in practice scenarios and how one is chosen for a session."""

import datetime
import logging
import random
from typing import Optional, Tuple

from models import Scenario

SCENARIOS: Tuple[Scenario, ...] = (
    # Work
    Scenario(
        id="work-clarity-01", goal="clarity", context="work", difficulty="easy",
        objective="Explain a project delay to your manager",
        prompt_text=(
            "Your project is running two weeks behind schedule. Explain the situation to your manager "
            "in a clear, structured way. Include the reason for the delay, what you're doing about it, "
            "and when you expect to complete the work."
        ),
        time_limit_sec=90,
        eval_focus=["clarity", "logic", "structure"],
        example_opening="I want to give you an update on the timeline for the project...",
        tips=["Use the situation-action-result format", "Be direct and honest", "Focus on solutions"],
    ),
    Scenario(
        id="work-confidence-01", goal="confidence", context="work", difficulty="medium",
        objective="Pitch a new idea in 90 seconds",
        prompt_text=(
            "You have 90 seconds to pitch your innovative idea to senior leadership. They're skeptical "
            "but open. Speak with authority and conviction. Highlight the opportunity, not just the concept."
        ),
        time_limit_sec=90,
        eval_focus=["confidence", "persuasion", "clarity"],
        example_opening="I'd like to share an opportunity that could transform how we...",
        tips=["Start strong", "Show conviction in your voice", "Use power poses before speaking"],
    ),
    Scenario(
        id="work-persuasion-01", goal="persuasion", context="work", difficulty="medium",
        objective="Convince stakeholders to approve your budget",
        prompt_text=(
            "You need approval for a budget increase. Persuade stakeholders that this investment will "
            "pay off. Focus on ROI, not features. Address their concerns preemptively."
        ),
        time_limit_sec=120,
        eval_focus=["persuasion", "logic", "confidence"],
        example_opening="This investment will generate a 3x return within 6 months. Here's how...",
        tips=["Lead with the benefit", "Use specific numbers", "Anticipate objections"],
    ),
    Scenario(
        id="work-fillers-01", goal="fillers", context="work", difficulty="medium",
        objective="Decline additional work politely without fillers",
        prompt_text=(
            "Your manager asks you to take on more work, but your plate is full. Politely decline in "
            '60 seconds without using filler words like "um," "uh," or "like." Use intentional pauses instead.'
        ),
        time_limit_sec=60,
        eval_focus=["fillers", "clarity", "confidence"],
        example_opening="I appreciate you thinking of me for this. Currently, I'm focused on...",
        tips=["Pause before speaking", "Replace fillers with silence", "Breathe between thoughts"],
    ),
    Scenario(
        id="work-quick-01", goal="quick_thinking", context="work", difficulty="medium",
        objective="Answer an unexpected question in a meeting",
        prompt_text=(
            'You\'re asked an unexpected question: "What do you think is the biggest challenge our '
            'industry will face in the next 5 years?" Answer thoughtfully in 90 seconds using the PREP '
            "method: Point, Reason, Example, Point."
        ),
        time_limit_sec=90,
        eval_focus=["quick_thinking", "clarity", "logic"],
        example_opening="That's a great question. I believe the biggest challenge will be...",
        tips=["Buy time gracefully", "Use a framework (PREP)", "Stay relevant"],
    ),
    # Social
    Scenario(
        id="social-clarity-01", goal="clarity", context="social", difficulty="easy",
        objective="Recommend a restaurant clearly",
        prompt_text=(
            "A friend asks for restaurant recommendations. Clearly explain why they should try your "
            "favorite spot. Include the type of food, atmosphere, and what makes it special."
        ),
        time_limit_sec=60,
        eval_focus=["clarity", "structure"],
        example_opening="You have to try this place downtown. Here's why...",
        tips=["Paint a picture", "Be specific about details", "Give clear directions if asked"],
    ),
    Scenario(
        id="social-confidence-01", goal="confidence", context="social", difficulty="medium",
        objective="Give a wedding toast",
        prompt_text=(
            "You're giving a toast at a friend's wedding. Speak confidently and warmly for 90 seconds. "
            "Share a story, express your happiness, and wish them well."
        ),
        time_limit_sec=90,
        eval_focus=["confidence", "clarity"],
        example_opening="I've known [name] for [years], and I've never seen them happier...",
        tips=["Speak slowly and clearly", "Make eye contact", "Smile genuinely"],
    ),
    Scenario(
        id="social-persuasion-01", goal="persuasion", context="social", difficulty="easy",
        objective="Convince a friend to try something new",
        prompt_text=(
            "Persuade a friend to try a new restaurant, activity, or experience with you. Make it sound "
            "appealing and address their potential hesitations."
        ),
        time_limit_sec=60,
        eval_focus=["persuasion", "clarity"],
        example_opening="I think you'd really enjoy this because...",
        tips=["Focus on what they value", "Make it easy to say yes", "Share your enthusiasm"],
    ),
    Scenario(
        id="social-fillers-01", goal="fillers", context="social", difficulty="medium",
        objective="Make small talk without fillers",
        prompt_text=(
            "You're at a networking event. Make small talk with someone new for 60 seconds without using "
            "filler words. Ask questions and share about yourself smoothly."
        ),
        time_limit_sec=60,
        eval_focus=["fillers", "clarity"],
        example_opening="I noticed you work in [industry]. What brought you to that field?",
        tips=["Prepare conversation starters", "Listen actively", "Use pauses naturally"],
    ),
    Scenario(
        id="social-quick-01", goal="quick_thinking", context="social", difficulty="medium",
        objective="Politely exit a conversation",
        prompt_text=(
            "You're stuck in a conversation you need to leave. Exit gracefully in 30 seconds without "
            "being rude. Give a reason and transition smoothly."
        ),
        time_limit_sec=60,
        eval_focus=["quick_thinking", "clarity"],
        example_opening="It's been great talking with you. I need to...",
        tips=["Be polite but firm", "Give a brief reason", "End on a positive note"],
    ),
    # Everyday
    Scenario(
        id="everyday-clarity-02", goal="clarity", context="everyday", difficulty="medium",
        objective="Give clear directions",
        prompt_text=(
            "Give someone directions to a location you know well. Be specific about landmarks, turns, "
            "and distances. Make it impossible to get lost."
        ),
        time_limit_sec=90,
        eval_focus=["clarity", "logic", "structure"],
        example_opening="From here, you'll want to head north until you see...",
        tips=["Use landmarks", "Give distances", "Anticipate confusion points"],
    ),
    Scenario(
        id="everyday-confidence-02", goal="confidence", context="everyday", difficulty="medium",
        objective="Make a complaint politely but firmly",
        prompt_text=(
            "You received poor service. Make a complaint that's firm but polite. Explain the issue, "
            "what you expect, and stay confident throughout."
        ),
        time_limit_sec=90,
        eval_focus=["confidence", "clarity"],
        example_opening="I want to bring an issue to your attention...",
        tips=["State facts calmly", "Be clear about resolution", "Stay composed"],
    ),
    Scenario(
        id="everyday-persuasion-01", goal="persuasion", context="everyday", difficulty="medium",
        objective="Negotiate a price",
        prompt_text=(
            "You're buying something expensive. Negotiate a better price. Be persuasive but respectful. "
            "Explain why you deserve a discount."
        ),
        time_limit_sec=90,
        eval_focus=["persuasion", "confidence"],
        example_opening="I'm very interested, but I was hoping we could discuss the price...",
        tips=["Do your research", "Be willing to walk away", "Find win-win"],
    ),
    Scenario(
        id="everyday-fillers-01", goal="fillers", context="everyday", difficulty="medium",
        objective="Share weekend plans without fillers",
        prompt_text=(
            'Someone asks about your weekend plans. Share them in detail for 60 seconds without using '
            '"um," "uh," or "like." Use intentional pauses.'
        ),
        time_limit_sec=60,
        eval_focus=["fillers", "clarity"],
        example_opening="This weekend I'm planning to...",
        tips=["Think before you speak", "Pause between thoughts", "Speak deliberately"],
    ),
    Scenario(
        id="everyday-quick-01", goal="quick_thinking", context="everyday", difficulty="hard",
        objective='Answer "tell me about yourself"',
        prompt_text=(
            'You\'re asked the classic question: "Tell me about yourself." Answer in 90 seconds. '
            "Make it interesting, relevant, and memorable."
        ),
        time_limit_sec=90,
        eval_focus=["quick_thinking", "clarity", "structure"],
        example_opening="I'd describe myself as someone who...",
        tips=["Use present-past-future structure", "Highlight unique aspects", "End with a hook"],
    ),
)


def get_scenario_by_id(scenario_id: str) -> Optional[Scenario]:
    return next((s for s in SCENARIOS if s.id == scenario_id), None)


def basic_scenario(scenario_id: str) -> Scenario:
    """Generic scenario used when an analysis references an unknown id."""
    return Scenario(
        id=scenario_id,
        goal="clarity",
        context="everyday",
        difficulty="medium",
        objective="Communicate clearly and confidently",
        prompt_text="General communication practice",
        time_limit_sec=90,
        eval_focus=["clarity", "confidence", "logic", "pacing", "fillers"],
    )


def generate_scenario(goal: Optional[str] = None,
                      context: Optional[str] = None,
                      difficulty: Optional[str] = None,
                      rng: Optional[random.Random] = None) -> Scenario:
    """Pick a random scenario matching every filter that is given.

    Falls back to the whole catalogue when nothing matches.
    """
    rng = rng or random
    candidates = [
        s for s in SCENARIOS
        if (goal is None or s.goal == goal)
        and (context is None or s.context == context)
        and (difficulty is None or s.difficulty == difficulty)
    ]
    if not candidates:
        logging.info(f"No scenario for goal={goal} context={context} difficulty={difficulty}; picking any")
        candidates = list(SCENARIOS)
    return rng.choice(candidates)


def get_daily_challenge(goal: Optional[str] = None, today: Optional[datetime.date] = None) -> Scenario:
    """Same scenario for everyone with the same goal on a given day."""
    today = today or datetime.date.today()
    candidates = [s for s in SCENARIOS if goal is None or s.goal == goal] or list(SCENARIOS)
    day_of_year = today.timetuple().tm_yday
    return candidates[day_of_year % len(candidates)]
