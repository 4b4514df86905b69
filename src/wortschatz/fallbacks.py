"""Static grammar content served when the language model cannot be used."""

from .models import GrammarTopic, QuizDefinition

FALLBACK_TOPICS = {
    "nominativ": {
        "topic": "Nominativ (Nominative Case)",
        "explanation": (
            "The nominative case is used for the subject of a sentence - the person or "
            "thing performing the action. It answers the question 'who?' or 'what?'"
        ),
        "rules": [
            "The subject of a sentence is always in nominative case",
            "Nominative follows the verb 'sein' (to be): Das ist ein Mann",
            "Definite articles: der (m), die (f), das (n), die (pl)",
            "Indefinite articles: ein (m), eine (f), ein (n)",
        ],
        "examples": [
            {"german": "Der Mann liest ein Buch.", "english": "The man reads a book.", "highlight": "Der Mann"},
            {"german": "Die Frau ist Ärztin.", "english": "The woman is a doctor.", "highlight": "Die Frau"},
            {"german": "Das Kind spielt im Garten.", "english": "The child plays in the garden.", "highlight": "Das Kind"},
            {"german": "Die Bücher sind interessant.", "english": "The books are interesting.", "highlight": "Die Bücher"},
        ],
        "tips": [
            "The nominative case is the 'default' case - it's what you'll find in the dictionary",
            "Always identify the subject first by asking 'who/what is doing the action?'",
            "Remember: after 'sein' (to be), both sides use nominative",
        ],
    },
    "akkusativ": {
        "topic": "Akkusativ (Accusative Case)",
        "explanation": (
            "The accusative case is used for the direct object of a sentence - the person "
            "or thing receiving the action. It answers the question 'whom?' or 'what?'"
        ),
        "rules": [
            "Direct objects take accusative case",
            "Only masculine articles change: der → den, ein → einen",
            "Feminine, neuter, and plural articles remain the same",
            "Certain prepositions always require accusative: durch, für, gegen, ohne, um",
        ],
        "examples": [
            {"german": "Ich sehe den Mann.", "english": "I see the man.", "highlight": "den Mann"},
            {"german": "Sie kauft einen Apfel.", "english": "She buys an apple.", "highlight": "einen Apfel"},
            {"german": "Wir besuchen die Stadt.", "english": "We visit the city.", "highlight": "die Stadt"},
            {"german": "Er liest das Buch für seinen Vater.", "english": "He reads the book for his father.", "highlight": "seinen Vater"},
        ],
        "tips": [
            "Remember: only masculine articles change in accusative",
            "Ask 'wen oder was?' (whom or what?) to find the direct object",
            "Memorize accusative prepositions with the acronym FUGOD",
        ],
    },
    "dativ": {
        "topic": "Dativ (Dative Case)",
        "explanation": (
            "The dative case is used for the indirect object - the person or thing that "
            "receives the direct object. It answers the question 'to whom?' or 'for whom?'"
        ),
        "rules": [
            "Masculine and neuter: dem (definite), einem (indefinite)",
            "Feminine: der (definite), einer (indefinite)",
            "Plural: den + -n ending on noun (definite), -n ending (indefinite)",
            "Common dative prepositions: aus, bei, mit, nach, seit, von, zu",
        ],
        "examples": [
            {"german": "Ich gebe dem Mann das Buch.", "english": "I give the book to the man.", "highlight": "dem Mann"},
            {"german": "Sie hilft ihrer Mutter.", "english": "She helps her mother.", "highlight": "ihrer Mutter"},
            {"german": "Wir spielen mit den Kindern.", "english": "We play with the children.", "highlight": "den Kindern"},
            {"german": "Er wohnt bei einem Freund.", "english": "He lives with a friend.", "highlight": "einem Freund"},
        ],
        "tips": [
            "Ask 'wem?' (to whom?) to identify the dative object",
            "Remember: plural nouns often add -n in dative",
            "Some verbs always require dative: helfen, danken, folgen, glauben",
        ],
    },
}

GENITIV_TEST = {
    "questions": [
        {
            "id": "1",
            "type": "multiple-choice",
            "question": "Which is the correct genitive form? Das ist das Auto ___ Vaters.",
            "options": ["der", "des", "dem", "den"],
            "acceptedAnswer": "des",
            "explanation": "Masculine nouns use 'des' in genitive case",
            "points": 1,
        },
        {
            "id": "2",
            "type": "multiple-choice",
            "question": "Which preposition does NOT require genitive case?",
            "options": ["wegen", "trotz", "mit", "während"],
            "acceptedAnswer": "mit",
            "explanation": "'mit' requires dative case, not genitive",
            "points": 1,
        },
        {
            "id": "3",
            "type": "fill-blank",
            "question": "Complete: Die Farbe ___ Himmels ist blau.",
            "germanContext": "Die Farbe ___ Himmels ist blau.",
            "acceptedAnswer": "des",
            "explanation": "Masculine noun 'Himmel' requires 'des' in genitive",
            "points": 1,
        },
        {
            "id": "4",
            "type": "fill-blank",
            "question": "Complete: Das Haus ___ Familie ist groß.",
            "germanContext": "Das Haus ___ Familie ist groß.",
            "acceptedAnswer": "der",
            "explanation": "Feminine noun 'Familie' uses 'der' in genitive",
            "points": 1,
        },
        {
            "id": "5",
            "type": "free-input",
            "question": "Translate to German: 'The woman's car' (Use: Auto, Frau)",
            "acceptedAnswers": ["Das Auto der Frau", "der Frau Auto"],
            "explanation": "Feminine nouns use 'der' in genitive",
            "points": 2,
        },
        {
            "id": "6",
            "type": "free-input",
            "question": "Form the genitive: 'the children's books' (Use: Bücher, Kinder)",
            "acceptedAnswers": ["die Bücher der Kinder", "der Kinder Bücher"],
            "explanation": "Plural nouns use 'der' in genitive",
            "points": 2,
        },
    ],
    "totalPoints": 8,
    "passingScore": 6,
    "timeLimitSeconds": 600,
}


def generic_topic(topic: str) -> GrammarTopic:
    return GrammarTopic.model_validate(
        {
            "topic": topic,
            "explanation": (
                f"{topic} is an important German grammar concept. This is a fallback "
                "response - please ensure your API key is configured correctly."
            ),
            "rules": [
                "Study the basic patterns of this grammar concept",
                "Practice with example sentences",
                "Pay attention to exceptions and special cases",
                "Use this grammar point in context",
            ],
            "examples": [
                {
                    "german": "Beispielsatz auf Deutsch.",
                    "english": "Example sentence in English.",
                    "highlight": "Beispiel",
                }
            ],
            "tips": [
                "Practice regularly with native speakers or language exchange partners",
                "Create your own examples to reinforce learning",
                "Use flashcards to memorize key patterns",
            ],
        }
    )


def generic_test(topic: str) -> QuizDefinition:
    return QuizDefinition.model_validate(
        {
            "questions": [
                {
                    "id": "1",
                    "type": "multiple-choice",
                    "question": f"Which option best demonstrates the {topic} concept?",
                    "options": ["Option A", "Option B", "Option C", "Option D"],
                    "acceptedAnswer": "Option A",
                    "explanation": "This is a fallback question. Please configure your API key.",
                    "points": 1,
                },
                {
                    "id": "2",
                    "type": "fill-blank",
                    "question": "Complete the sentence: Der Mann ___ das Buch.",
                    "germanContext": "Der Mann ___ das Buch.",
                    "acceptedAnswer": "liest",
                    "explanation": "Basic verb conjugation",
                    "points": 1,
                },
                {
                    "id": "3",
                    "type": "free-input",
                    "question": "Translate: 'The house is big' (Use: Haus, groß)",
                    "acceptedAnswers": ["Das Haus ist groß", "Das Haus ist gross"],
                    "explanation": "Basic sentence structure",
                    "points": 2,
                },
            ],
            "totalPoints": 4,
            "passingScore": 3,
            "timeLimitSeconds": 600,
        }
    )


def fallback_topic(topic: str) -> GrammarTopic:
    topic_lower = topic.lower()
    for key, data in FALLBACK_TOPICS.items():
        if key in topic_lower:
            return GrammarTopic.model_validate(data)
    return generic_topic(topic)


def fallback_test(topic: str) -> QuizDefinition:
    if "genitiv" in topic.lower():
        return QuizDefinition.model_validate(GENITIV_TEST)
    return generic_test(topic)
