"""
System roles, prompts and fixed user-facing strings.

The chat tutor and the lesson author each get one system role; lesson
prompts name the category being taught.
"""

GREETING = "مرحبًا، أنا إما مساعدتك في تعلم اللغة الإنجليزية. كيف يمكنني مساعدتك اليوم؟"

APOLOGY = "Sorry, something went wrong. Please try again."

NO_REPLY = "Sorry, no response."

TEACHER_CONTEXT = """
You are an English teacher who also speaks Arabic. Your responsibilities are:
1. Correct the user's English sentences:
    - Provide the corrected version of the sentence if not correct.
    - Explain the corrections in simple English.
    - Provide the explanation in Arabic as well.
2. Handle Arabic messages as follows:
    - Respond with the original Arabic sentence.
    - Translate the sentence into English.
    - Explain the meaning in simple English.
Your goal is to make learning English easy and accessible by leveraging both languages effectively.
""".strip()

LESSON_ROLE = "You provide English lessons with Arabic translations."

ADVANCED_LESSON_ROLE = "You provide advanced English lessons with Arabic translations."


def lesson_prompt(category: str) -> str:
    return (
        f'Provide a lesson for the category "{category}" in English with Arabic translations. '
        "Include examples as individual points."
    )


def advanced_lesson_prompt(category: str) -> str:
    return (
        f'Provide an advanced lesson for the category "{category}" in English with Arabic translations. '
        "Include examples as individual points."
    )


# Alert (title, message) pairs shown by the lesson screen
LESSON_FETCH_FAILED = ("Error", "Could not load the lesson. Try again later.")
ADVANCED_FETCH_FAILED = ("Error", "Could not load the advanced lesson. Try again later.")
EMPTY_CUSTOM_LESSON = ("Error", "Please provide a lesson content.")
CUSTOM_LESSON_ADDED = ("Success", "New lesson added!")
