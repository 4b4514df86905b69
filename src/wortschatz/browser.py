import math
import string
from typing import Any, Dict, List, Optional, Sequence

from .models import PARTS_OF_SPEECH, WordRecord

ALL = "All"
POS_FILTERS = [ALL, *PARTS_OF_SPEECH]
ALPHA_FILTERS = [ALL, *string.ascii_lowercase]
MAX_VISIBLE_PAGES = 5


def _selected(value: Optional[str]) -> str:
    """Lowercased filter value; empty when the filter is off."""
    value = (value or "").strip().lower()
    return "" if value == ALL.lower() else value


def filter_words(
    words: Sequence[WordRecord],
    pos: str = ALL,
    alpha: str = ALL,
    search: str = "",
) -> List[WordRecord]:
    """Part-of-speech, first-letter and free-text filters, combined with AND."""
    term = search.strip().lower()
    pos = _selected(pos)
    alpha = _selected(alpha)

    def matches(word: WordRecord) -> bool:
        if pos and word.part_of_speech.lower() != pos:
            return False
        if alpha and not word.german.lower().startswith(alpha):
            return False
        if term:
            haystack = (word.german, word.translation, word.definition)
            return any(term in field.lower() for field in haystack)
        return True

    return [word for word in words if matches(word)]


def page_window(current_page: int, total_pages: int) -> List[int]:
    start = max(1, current_page - MAX_VISIBLE_PAGES // 2)
    end = min(total_pages, start + MAX_VISIBLE_PAGES - 1)
    if end - start + 1 < MAX_VISIBLE_PAGES:
        start = max(1, end - MAX_VISIBLE_PAGES + 1)
    return list(range(start, end + 1))


def paginate(items: Sequence[Any], page: int = 1, per_page: int = 10) -> Dict[str, Any]:
    total_items = len(items)
    total_pages = max(1, math.ceil(total_items / per_page))
    page = min(max(1, page), total_pages)
    offset = (page - 1) * per_page
    return {
        "items": list(items[offset : offset + per_page]),
        "current_page": page,
        "total_pages": total_pages,
        "total_items": total_items,
        "start_item": offset + 1 if total_items else 0,
        "end_item": min(offset + per_page, total_items),
        "page_numbers": page_window(page, total_pages),
    }
