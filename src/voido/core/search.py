"""Fuzzy subsequence filter over todos.

A todo matches a query when every query character appears, in order, in the
lower-cased concatenation of its text fields. Matches are ranked by
``fuzzy_score`` (higher first); Python's stable sort keeps the original list
order for equal scores.
"""

from collections.abc import Sequence

from voido.core.models import Todo

SCORE_MATCH = 16
SCORE_CONSECUTIVE = 8  # run の長さに比例して加算
SCORE_WORD_START = 10
PENALTY_GAP = 1
PENALTY_GAP_MAX = 8  # 1つのgapあたりの上限
PENALTY_LEADING_MAX = 12

_SEPARATORS = frozenset(" \t\n-_/.,:;()[]#")


def haystack(todo: Todo) -> str:
    """Searchable text of a todo: every textual field, lower-cased."""
    parts: list[str] = [todo.description]
    parts.extend(p for p in (todo.detail, todo.topic, todo.owner, todo.due) if p)
    parts.extend(s.text for s in todo.subtasks)
    if todo.note:
        parts.append(todo.note)
    return " ".join(parts).lower()


def is_subsequence(text: str, query: str) -> bool:
    it = iter(text)
    return all(ch in it for ch in query)


def _is_word_start(text: str, idx: int) -> bool:
    return idx == 0 or text[idx - 1] in _SEPARATORS


def _score_from(text: str, query: str, start: int) -> int | None:
    """Greedy alignment of ``query`` in ``text`` with query[0] pinned at ``start``.

    After the first character, a consecutive match is always preferred; other
    characters take their leftmost occurrence.
    """
    score = SCORE_MATCH - min(start, PENALTY_LEADING_MAX)
    if _is_word_start(text, start):
        score += SCORE_WORD_START
    prev = start
    run = 0
    for ch in query[1:]:
        idx = text.find(ch, prev + 1)
        if idx < 0:
            return None
        score += SCORE_MATCH
        if idx == prev + 1:
            run += 1
            score += SCORE_CONSECUTIVE * run
        else:
            run = 0
            score -= min((idx - prev - 1) * PENALTY_GAP, PENALTY_GAP_MAX)
            if _is_word_start(text, idx):
                score += SCORE_WORD_START
        prev = idx
    return score


def fuzzy_score(text: str, query: str) -> int | None:
    """Best score of ``query`` as a subsequence of ``text``; None when it does not match.

    Both arguments are expected lower-cased already.
    """
    if not query:
        return 0
    if not is_subsequence(text, query):
        return None
    best: int | None = None
    first = query[0]
    idx = text.find(first)
    while idx >= 0:
        s = _score_from(text, query, idx)
        if s is None:
            # 以降の開始位置では残りの文字がさらに足りない
            break
        if best is None or s > best:
            best = s
        idx = text.find(first, idx + 1)
    return best


def fuzzy_filter(todos: Sequence[Todo], query: str) -> list[Todo]:
    """Filter and rank ``todos`` by ``query``.

    An empty query returns the todos unchanged in their original order.
    """
    q = query.lower()
    if not q:
        return list(todos)
    scored: list[tuple[int, Todo]] = []
    for t in todos:
        s = fuzzy_score(haystack(t), q)
        if s is not None:
            scored.append((s, t))
    scored.sort(key=lambda pair: -pair[0])
    return [t for _, t in scored]
