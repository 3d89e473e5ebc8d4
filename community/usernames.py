"""
Anonymous handle generation.

Handles look like ``CalmOtter42``: an adjective, an animal and a number in
1..999. They are shown on anonymous posts and comments and used as chat
names, so they are never derived from the account username.
"""

import random

ADJECTIVES = [
    "Happy", "Calm", "Brave", "Wise", "Kind", "Bright", "Swift", "Gentle",
    "Clever", "Warm", "Cool", "Bold", "Quiet", "Loud", "Soft", "Strong",
    "Quick", "Slow", "Deep", "Light", "Dark", "Sweet", "Sour", "Fresh",
    "Old", "New", "Young", "Ancient", "Modern", "Classic", "Trendy",
]

NOUNS = [
    "Panda", "Dragon", "Phoenix", "Tiger", "Lion", "Eagle", "Wolf", "Bear",
    "Dolphin", "Butterfly", "Owl", "Fox", "Cat", "Dog", "Horse", "Deer",
    "Rabbit", "Squirrel", "Penguin", "Koala", "Kangaroo", "Elephant", "Giraffe",
    "Zebra", "Monkey", "Gorilla", "Shark", "Whale", "Octopus", "Starfish",
    "Turtle", "Snake", "Frog", "Fish", "Bird", "Bee", "Ant", "Spider",
]


def generate_username(rng=random):
    """Return a random handle such as ``GentleFox317``."""
    return f"{rng.choice(ADJECTIVES)}{rng.choice(NOUNS)}{rng.randint(1, 999)}"
