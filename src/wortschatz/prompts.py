WORD_DETAILS_PROMPT = """For the German word "{word}", provide:
1. Part of speech (Noun, Verb, Adjective, Adverb, Other)
2. Article (der/die/das for nouns, "–" for others)
3. Primary English translation
4. DEUTSCHE Definition - Eine einfache deutsche Definition (Simple German definition in German)
5. 2-3 German example sentences using the word
6. Any alternate meanings or translations (if applicable)

WICHTIG: Die Definition soll auf DEUTSCH geschrieben werden, nicht auf Englisch!

Return ONLY a JSON object:
{{
  "partOfSpeech": "Noun",
  "article": "der",
  "translation": "dog",
  "definition": "Ein domestiziertes Säugetier, das als Haustier gehalten wird (A domesticated mammal kept as a pet)",
  "examples": ["Der Hund bellt laut.", "Ich gehe mit dem Hund spazieren."],
  "alternateMeanings": ["umgangssprachlich: Person (abwertend) - colloquial: person (derogatory)"]
}}
If no examples or alternate meanings exist, use empty arrays."""

GRAMMAR_TOPIC_PROMPT = """Provide a comprehensive explanation for the German grammar topic: "{topic}" in GERMAN.
Alle Erklärungen, Regeln und Tipps sollen auf DEUTSCH sein, mit englischen Übersetzungen in Klammern für schwierige Begriffe.

Return ONLY a JSON object:
{{
  "topic": "The topic name in German (English translation)",
  "explanation": "Eine klare, präzise Erklärung des Grammatikkonzepts auf Deutsch (2-3 Sätze)",
  "rules": ["Regel 1", "Regel 2", "Regel 3", "Regel 4"],
  "examples": [
    {{"german": "German sentence", "english": "English translation", "highlight": "exact part of the German sentence showing the rule"}}
  ],
  "tips": ["Praktischer Tipp 1", "Praktischer Tipp 2", "Praktischer Tipp 3"]
}}
Include 4-6 examples. The explanation must suit intermediate learners."""

GRAMMAR_TEST_PROMPT = """Create a test for the German grammar topic: "{topic}"
Generate 8-10 questions of varying difficulty and types.

Return ONLY a JSON object:
{{
  "questions": [
    {{"id": "1", "type": "mcq", "question": "Question text", "options": ["a", "b", "c", "d"],
      "correctAnswer": "the correct option", "explanation": "Why this is correct", "points": 1}},
    {{"id": "2", "type": "fillup", "question": "Sentence with ___ blank", "germanContext": "German sentence with ___ blank",
      "correctAnswer": "word for the blank", "explanation": "Brief explanation", "points": 1}},
    {{"id": "3", "type": "input", "question": "Translation or sentence formation task",
      "correctAnswers": ["possible answer 1", "possible answer 2"], "explanation": "Brief explanation", "points": 2}}
  ],
  "totalPoints": 12,
  "passingScore": 8,
  "timeLimit": 15
}}

Requirements:
1. 3-4 MCQ questions (1 point each)
2. 2-3 fill-in-the-blank questions (1 point each)
3. 2-3 input questions requiring translation or sentence formation (2 points each)
4. Questions progressively increase in difficulty
5. For input questions, provide multiple correct answer variations
6. Total points 10-15, passing score at 70-75%, timeLimit in minutes"""

CHECK_ANSWER_PROMPT = """You are a German language teacher evaluating a student's answer.

Question: {question}
{context_line}Student's Answer: {answer}

Evaluate whether the answer is correct, partially correct, or incorrect. Consider grammar accuracy,
spelling (allow minor variations like ß/ss), word order flexibility and alternative phrasings.

Return ONLY a JSON object:
{{
  "correct": true,
  "score": 0,
  "feedback": "Brief constructive feedback",
  "correctedAnswer": "The corrected version, or the answer itself if correct",
  "alternativeAnswers": ["other acceptable answers"],
  "grammarNotes": "Specific grammar points to note"
}}"""

TUTOR_SYSTEM_PROMPT = """You are a friendly German teacher for a student progressing from A2 to B1 level.

CORE RULES:
1. Always respond in simple German (A2-B1 level)
2. Add English meanings in parentheses for new/important words: word (meaning)
3. Correct ANY student input (even English) by showing the correct German version
4. Use emojis and varied sentence structures for engagement

CORRECTION FORMAT:
❌ What they wrote
✅ Correct German: [proper version]
💡 Brief explanation in English

STUDENT'S CURRENT TOPICS (B1):
- Doppelkonjunktionen (sowohl...als auch, weder...noch)
- Relativsätze with prepositions/genitive
- Passiv, Konjunktiv II
- je...desto/umso constructions
- Temporal clauses (nachdem, sobald)
- Nominalized adjectives/participles

When explaining grammar: simple explanation with examples, show patterns, point out
exceptions, give 2-3 practice exercises. Keep responses concise and practical."""

TUTOR_APOLOGY = (
    "Entschuldigung (Sorry), es gibt ein Problem (there's a problem). "
    "Bitte versuche es noch einmal (Please try again)! 😊"
)

# generationConfig per call type
TOPIC_GENERATION = {"temperature": 0.7, "topK": 40, "topP": 0.95, "maxOutputTokens": 2048}
TEST_GENERATION = {"temperature": 0.8, "topK": 40, "topP": 0.95, "maxOutputTokens": 3072}
CHECK_GENERATION = {"temperature": 0.3, "topK": 40, "topP": 0.95, "maxOutputTokens": 1024}
TUTOR_GENERATION = {"temperature": 0.8, "topK": 40, "topP": 0.95, "maxOutputTokens": 1024}
