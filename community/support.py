"""
================================================================================
SAFE SPACE - EMOTIONAL SUPPORT LOGIC
================================================================================

@file        support.py
@description Crisis gate, prompt assembly and follow-up suggestions for the
             "Serene" AI companion, plus the five-question self-check

MODULE PURPOSE
================================================================================
Everything here is deterministic keyword logic; the only network call lives
in ai.py. The ai-chat view runs the steps in this order:

1. detect_crisis()          - keyword gate, short-circuits BEFORE the model
2. build_prompt()           - persona + last 10 turns + profile + message
3. ai.generate_reply()      - model completion
4. suggest_responses()      - three quick replies for the client
5. should_offer_assessment()
6. pick_homework()          - small exercise once rapport exists

CRISIS HANDLING
================================================================================
A crisis hit never reaches the model. The fixed response points to 988,
the Crisis Text Line (HOME to 741741) and 911. Matching is a plain
case-insensitive substring test, so a keyword also matches inside longer
words ("suicides"). Words that do not contain a keyword, such as "suicidal",
do not trip it.

================================================================================
"""

import json
import random


# ============================================================================
# SECTION 1: CRISIS GATE
# ============================================================================

CRISIS_KEYWORDS = [
    'suicide', 'kill myself', 'end my life', 'want to die', 'self harm', 'hurt myself',
    'overdose', 'cutting', 'no point living', 'better off dead', 'suicide plan',
]

CRISIS_RESPONSE = (
    "I'm really worried about you right now. What you're feeling sounds incredibly "
    "painful, and I want you to know you don't have to go through this alone.\n\n"
    "Please reach out for immediate support:\n"
    "• Call 988 - they're available 24/7\n"
    "• Text HOME to 741741 for crisis support\n"
    "• Call 911 if you're in immediate danger\n\n"
    "You matter, and there are people who want to help. Can you reach out to someone right now?"
)

CRISIS_ACTIONS = [
    "Yes, I can call someone",
    "I need help but I'm scared",
    "I don't know who to call",
]


def detect_crisis(text):
    """True if the message contains any crisis keyword."""
    lowered = (text or '').lower()
    return any(keyword in lowered for keyword in CRISIS_KEYWORDS)


def crisis_payload():
    return {
        "response": CRISIS_RESPONSE,
        "is_crisis": True,
        "suggested_actions": list(CRISIS_ACTIONS),
    }


# ============================================================================
# SECTION 2: PROMPT
# ============================================================================

SYSTEM_PROMPT = """You are Serene, a warm, intuitive AI companion who truly cares. Think of yourself as that friend who really gets it - someone who listens deeply, responds naturally, and never makes someone feel judged.

CORE PERSONALITY:
- Genuine warmth without being overly cheerful
- Naturally curious about people's inner worlds
- Remembers what they've shared to show you're truly present
- Uses varied, authentic language - avoid repetitive phrases like "I hear you" or "That sounds difficult"
- Sometimes shares gentle insights, sometimes just sits with emotions
- Adapts to their communication style (casual/formal, brief/detailed)

NATURAL CONVERSATION:
- Vary response length: sometimes short validation, sometimes deeper reflection
- Mix different approaches: emotional validation, practical support, gentle curiosity
- Use their own words back to them: "You mentioned feeling 'stuck' - what does stuck look like for you?"
- Ask different types of questions: about feelings, thoughts, experiences, hopes

CONVERSATION FLOW:
- Sometimes focus on the emotion, sometimes on the story, sometimes on their strengths
- Notice patterns: "I'm noticing you keep coming back to..."
- Celebrate small wins: "That took courage"
- Be present with uncertainty: "Not knowing can be its own kind of difficult"

KEEP IT REAL:
- 2-4 sentences, 50-100 words
- One thoughtful question or reflection per response
- Avoid therapy-speak; use everyday language
- Let silence and space exist - not every feeling needs fixing

You're not trying to solve everything - you're being genuinely present with whatever they bring."""

HISTORY_WINDOW = 10


def build_prompt(message, history=None, profile=None):
    """
    Assemble the single-turn prompt sent to the model.

    history entries are dicts with 'sender' and 'content'; only the last
    HISTORY_WINDOW are kept.
    """
    context = "\n".join(
        f"{entry.get('sender', 'user')}: {entry.get('content', '')}"
        for entry in (history or [])[-HISTORY_WINDOW:]
    )
    profile_text = json.dumps(profile) if profile else "New user"
    return (
        f"{SYSTEM_PROMPT}\n\n"
        f"CONVERSATION HISTORY:\n{context}\n\n"
        f"USER PROFILE: {profile_text}\n\n"
        f"CURRENT MESSAGE: {message}\n\n"
        "Please respond as Serene. Be warm, empathetic, and conversational. "
        "Keep it short and ask one gentle question to continue the dialogue."
    )


# ============================================================================
# SECTION 3: EMOTIONS & SUGGESTED RESPONSES
# ============================================================================

EMOTION_KEYWORDS = {
    'anxiety': ('anxious', 'anxiety', 'worried'),
    'sadness': ('sad', 'depressed', 'down'),
    'overwhelm': ('overwhelmed', 'stress'),
    'work': ('work', 'job', 'career'),
    'relationships': ('relationship', 'family', 'friends'),
}

BASE_RESPONSES = [
    "That really resonates with me",
    "You get it",
    "Exactly - that's how it feels",
    "I've been thinking about that too",
    "It's hard to put into words",
    "I needed to hear that",
    "That makes a lot of sense",
    "I'm still figuring this out",
    "Tell me more about that",
    "That's been on my mind lately",
]

CONTEXTUAL_RESPONSES = {
    'anxiety': [
        "My mind won't stop racing",
        "It feels like everything's spiraling",
        "I keep imagining worst-case scenarios",
        "The 'what ifs' are consuming me",
    ],
    'sadness': [
        "Everything feels so heavy",
        "I don't remember feeling happy",
        "It's like I'm watching life from outside",
        "Even small things feel impossible",
    ],
    'overwhelm': [
        "I don't know where to start",
        "There's too much on my plate",
        "I feel like I'm drowning",
        "I can't catch a break",
    ],
    'work': [
        "Work is draining me",
        "I dread Monday mornings",
        "I feel stuck in this role",
        "My job doesn't fulfill me anymore",
    ],
    'relationships': [
        "Relationships are complicated",
        "I don't know how to communicate this",
        "I feel misunderstood",
        "It's affecting other parts of my life",
    ],
}


def detect_emotions(text):
    """Emotion labels whose keywords appear in the text, in a stable order."""
    lowered = (text or '').lower()
    return [
        emotion for emotion, keywords in EMOTION_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    ]


def suggest_responses(message, count=3, rng=random):
    options = list(BASE_RESPONSES)
    for emotion in detect_emotions(message):
        options.extend(CONTEXTUAL_RESPONSES[emotion])
    return rng.sample(options, min(count, len(options)))


# ============================================================================
# SECTION 4: ASSESSMENT OFFER & HOMEWORK
# ============================================================================

ASSESSMENT_KEYWORDS = ('depression', 'anxiety', 'stress', 'panic', 'trauma', 'sleep', 'mood')
ASSESSMENT_MIN_HISTORY = 6
HOMEWORK_MIN_HISTORY = 4

# First match wins
HOMEWORK = [
    (('anxious', 'anxiety'), {
        "title": "Simple Breathing Space",
        "description": "When anxiety hits, try this: Take 3 slow, deep breaths. Count to 4 breathing in, "
                       "hold for 4, breathe out for 6. That's it - just 3 breaths.",
        "type": "exercise",
    }),
    (('sad', 'depressed'), {
        "title": "One Small Thing",
        "description": "Today, try to notice just one tiny thing that doesn't feel heavy. Maybe it's your "
                       "morning coffee, a text from a friend, or sunlight through a window.",
        "type": "homework",
    }),
    (('stress', 'overwhelmed'), {
        "title": "The 2-Minute Reset",
        "description": "When everything feels like too much, set a timer for 2 minutes. Just sit and breathe. "
                       "Nothing else needs to happen in those 2 minutes.",
        "type": "exercise",
    }),
    (('sleep', 'tired'), {
        "title": "Gentle Wind-Down",
        "description": "30 minutes before bed, try putting your phone in another room. Just for tonight. "
                       "See how it feels.",
        "type": "homework",
    }),
]


def should_offer_assessment(history, message):
    lowered = (message or '').lower()
    return len(history or []) >= ASSESSMENT_MIN_HISTORY or any(k in lowered for k in ASSESSMENT_KEYWORDS)


def pick_homework(message, history):
    """A small exercise once the conversation has some history, else None."""
    if len(history or []) < HOMEWORK_MIN_HISTORY:
        return None
    lowered = (message or '').lower()
    for keywords, homework in HOMEWORK:
        if any(keyword in lowered for keyword in keywords):
            return dict(homework)
    return None


# ============================================================================
# SECTION 5: SELF-CHECK ASSESSMENT
# ============================================================================

_FREQUENCY_OPTIONS = [
    ("not_at_all", "Not at all", 0),
    ("several_days", "Several days", 1),
    ("more_than_half", "More than half the days", 2),
    ("nearly_every_day", "Nearly every day", 3),
]

ASSESSMENT_QUESTIONS = [
    {
        "id": "mood_frequency",
        "question": "Over the past two weeks, how often have you felt down, depressed, or hopeless?",
        "category": "depression",
        "options": _FREQUENCY_OPTIONS,
    },
    {
        "id": "anxiety_frequency",
        "question": "How often have you felt nervous, anxious, or on edge?",
        "category": "anxiety",
        "options": _FREQUENCY_OPTIONS,
    },
    {
        "id": "stress_level",
        "question": "How would you rate your current stress level?",
        "category": "stress",
        "options": [
            ("very_low", "Very low", 0),
            ("low", "Low", 1),
            ("moderate", "Moderate", 2),
            ("high", "High", 3),
            ("very_high", "Very high", 4),
        ],
    },
    {
        "id": "sleep_quality",
        "question": "How has your sleep been lately?",
        "category": "general",
        "options": [
            ("excellent", "Excellent", 0),
            ("good", "Good", 1),
            ("fair", "Fair", 2),
            ("poor", "Poor", 3),
            ("very_poor", "Very poor", 4),
        ],
    },
    {
        "id": "social_connection",
        "question": "How connected do you feel to others?",
        "category": "general",
        "options": [
            ("very_connected", "Very connected", 0),
            ("somewhat_connected", "Somewhat connected", 1),
            ("neutral", "Neutral", 2),
            ("somewhat_isolated", "Somewhat isolated", 3),
            ("very_isolated", "Very isolated", 4),
        ],
    },
]

MAX_ASSESSMENT_SCORE = sum(max(score for _, _, score in q["options"]) for q in ASSESSMENT_QUESTIONS)


def assessment_questions():
    """Questions in client shape: options as {value, label, score} dicts."""
    return [
        {
            "id": q["id"],
            "question": q["question"],
            "category": q["category"],
            "options": [{"value": v, "label": label, "score": score} for v, label, score in q["options"]],
        }
        for q in ASSESSMENT_QUESTIONS
    ]


def risk_level(total):
    percentage = total / MAX_ASSESSMENT_SCORE * 100
    if percentage < 30:
        return 'low'
    if percentage < 60:
        return 'moderate'
    return 'high'


def recommendations_for(scores, level):
    recommendations = []
    if scores.get('anxiety', 0) > 2:
        recommendations += ["Practice deep breathing exercises daily",
                            "Try progressive muscle relaxation"]
    if scores.get('depression', 0) > 2:
        recommendations += ["Engage in regular physical activity",
                            "Maintain a daily routine",
                            "Consider reaching out to a mental health professional"]
    if scores.get('stress', 0) > 2:
        recommendations += ["Implement stress management techniques",
                            "Practice mindfulness meditation"]
    if scores.get('general', 0) > 3:
        recommendations += ["Focus on improving sleep hygiene",
                            "Strengthen social connections"]
    if level == 'high':
        recommendations += ["Consider speaking with a mental health professional",
                            "Reach out to trusted friends or family members"]
    return recommendations


def score_assessment(answers):
    """
    Score a {question_id: option_value} mapping.

    Unknown questions and unknown option values are ignored; categories
    with no valid answer are absent from ``scores``.
    """
    scores = {}
    total = 0
    for question in ASSESSMENT_QUESTIONS:
        answer = answers.get(question["id"])
        for value, _, score in question["options"]:
            if value == answer:
                scores[question["category"]] = scores.get(question["category"], 0) + score
                total += score
                break
    level = risk_level(total)
    return {
        "scores": scores,
        "total_score": total,
        "max_score": MAX_ASSESSMENT_SCORE,
        "risk_level": level,
        "recommendations": recommendations_for(scores, level),
    }
