import logging
import os
from typing import Dict, Optional

import pandas as pd

from .models import WordDetails

logger = logging.getLogger(__name__)

DEFAULT_CSV = os.path.join(os.path.dirname(__file__), "data", "fallback_words.csv")
REQUIRED_COLUMNS = {"word", "part_of_speech", "article", "translation", "definition"}


# --- Service Layer: Static fallback dictionary ---
class FallbackDictionary:
    """Static word details used whenever the language model is unavailable."""

    def __init__(self, path: str = DEFAULT_CSV):
        self.path = path
        self.entries: Dict[str, Dict[str, str]] = {}
        self.load()

    def load(self):
        self.entries = {}
        if not os.path.exists(self.path):
            logger.warning(f"Fallback dictionary {self.path} not found. Loading dummy data.")
            self.entries = {
                "hund": {
                    "part_of_speech": "Noun",
                    "article": "der",
                    "translation": "dog",
                    "definition": "Ein domestiziertes Säugetier (A domesticated mammal)",
                },
            }
            return

        df = pd.read_csv(self.path, encoding="utf-8", dtype=str, keep_default_na=False)
        missing = REQUIRED_COLUMNS - set(df.columns)
        if missing:
            logger.error(f"Skipping {self.path}: Missing columns {sorted(missing)}.")
            return

        df["word"] = df["word"].str.strip().str.lower()
        for record in df.to_dict("records"):
            self.entries[record.pop("word")] = record
        logger.info(f"Loaded {len(self.entries)} fallback words from {self.path}")

    def get(self, word: str) -> Optional[Dict[str, str]]:
        return self.entries.get(word.strip().lower())

    def lookup(self, word: str) -> WordDetails:
        key = word.strip().lower()
        entry = self.entries.get(key)
        if entry is None:
            return WordDetails(
                part_of_speech="Other",
                article="–",
                definition=f"Definition for {key}",
                translation=f"Translation of {key}",
            )
        return WordDetails(
            part_of_speech=entry["part_of_speech"],
            article=entry["article"] or "–",
            definition=entry["definition"],
            translation=entry["translation"],
        )

    def __len__(self) -> int:
        return len(self.entries)
