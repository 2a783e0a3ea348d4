"""Sentence inference, per-token display formatting, line wrapping and
time lookup for word-timed transcripts.

WHY: Recognizers emit bare words with no casing, no punctuation. Reading a
transcript needs sentences; a playback view needs the same words wrapped
into rows, each tied to its audio time. Both are derived here from the
only signals available: the silence between words and a small lexicon
of question words.

HOW: synthesize() walks the tokens once, capitalizing after long gaps and
punctuating before them. display_texts() applies the same rules token by
token, so a view can render and highlight words independently.
wrap_into_lines() is a greedy packer; token_active_at() and
token_at_position() map between audio time, screen position and tokens.

RULES:
- Silence = next.start - (this.start + this.duration); may be negative
- Silence >= gap_threshold ends a sentence; the next word is capitalized
- "?" if the word before a long gap is a question word, else "."
- The last token always gets "." unless it already ends in . ! ?
- Words already ending in . ! ? are never punctuated again
- Inputs are never mutated; every function is pure
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from transcribe_audio.config import (
    CHAR_WIDTH_PT,
    CLAUSE_PUNCTUATION,
    GAP_THRESHOLD_S,
    MAX_CHARS_PER_LINE,
    MIN_CHARS_PER_LINE,
    QUESTION_WORDS,
    TERMINAL_PUNCTUATION,
)
from transcribe_audio.core.ir import DisplayLine, DisplayToken, WordToken


# ---------------------------------------------------------------------------
# Small helpers
# ---------------------------------------------------------------------------


def _capitalize_first(text: str) -> str:
    # Unlike str.capitalize(), leaves the rest of the word alone ("iPhone" → "IPhone").
    return text[:1].upper() + text[1:]


def _ends_terminal(text: str) -> bool:
    return bool(text) and text[-1] in TERMINAL_PUNCTUATION


def _silence(this: WordToken, following: WordToken) -> float:
    return following.start - (this.start + this.duration)


def _sentence_end_mark(word: str, question_marks: bool = True) -> str:
    if question_marks and word.lower() in QUESTION_WORDS:
        return "?"
    return "."


def _end_sentence(word: str, question_marks: bool = True, final: bool = False) -> str:
    """Close a sentence on ``word``, replacing trailing clause punctuation.

    "hello," becomes "hello." and "how," before a long gap becomes "how?".
    The last word of the transcript always gets ".".
    """
    bare = word.rstrip(CLAUSE_PUNCTUATION) or word
    if final:
        return bare + "."
    return bare + _sentence_end_mark(bare, question_marks)


# ---------------------------------------------------------------------------
# Flat transcript
# ---------------------------------------------------------------------------


def synthesize(tokens: Sequence[WordToken], gap_threshold: float = GAP_THRESHOLD_S) -> str:
    """Build a punctuated, capitalized transcript string from word tokens.

    WHY: Copy and export need one readable string. The recognizer gives
    no sentence structure, so boundaries are inferred from silence.

    HOW: Left to right. A token starts a sentence when it is first or when
    the silence since the previous token's end reaches gap_threshold. After
    each token, a long following silence adds "." or "?" and a space; a
    short one adds just the space. The last token gets a closing ".".

    RULES:
    - Empty input → ""
    - One token → capitalized text + "." ("" stays "")
    - Question mark only for QUESTION_WORDS directly before a long gap
    - Trailing , ; : or dash on a sentence-ending word is replaced, not kept
    - previous_end is always this.start + this.duration

    Args:
        tokens: Ordered word tokens.
        gap_threshold: Silence in seconds that ends a sentence.

    Returns:
        The synthesized transcript text.
    """
    if not tokens:
        return ""

    if len(tokens) == 1:
        text = tokens[0].text
        if not text:
            return ""
        text = _capitalize_first(text)
        return text if _ends_terminal(text) else _end_sentence(text, final=True)

    parts: List[str] = []
    previous_end = 0.0
    last_index = len(tokens) - 1

    for i, token in enumerate(tokens):
        starts_sentence = i == 0 or (token.start - previous_end) >= gap_threshold
        word = _capitalize_first(token.text) if starts_sentence else token.text

        if i == last_index:
            parts.append(word if _ends_terminal(word) else _end_sentence(word, final=True))
            break

        silence = _silence(token, tokens[i + 1])
        previous_end = token.start + token.duration

        if silence >= gap_threshold and not _ends_terminal(word):
            word = _end_sentence(word)
        parts.append(word)
        parts.append(" ")

    return "".join(parts)


# ---------------------------------------------------------------------------
# Per-token display
# ---------------------------------------------------------------------------


def _display_at(
    tokens: Sequence[WordToken],
    idx: int,
    gap_threshold: float,
    question_marks: bool,
) -> str:
    token = tokens[idx]
    if len(tokens) == 1 and not token.text:
        return ""

    starts_sentence = idx == 0 or _silence(tokens[idx - 1], token) >= gap_threshold
    word = _capitalize_first(token.text) if starts_sentence else token.text

    # Respect punctuation the recognizer already emitted
    if _ends_terminal(word):
        return word

    if idx == len(tokens) - 1:
        return _end_sentence(word, final=True)
    if _silence(token, tokens[idx + 1]) >= gap_threshold:
        return _end_sentence(word, question_marks)
    return word


def format_for_display(
    token: WordToken,
    tokens: Sequence[WordToken],
    gap_threshold: float = GAP_THRESHOLD_S,
    question_marks: bool = True,
) -> str:
    """Format one token the way it reads inside the synthesized transcript.

    WHY: A playback view renders and highlights words one at a time, so it
    needs a single token's display string without rebuilding the whole text.

    HOW: Finds the token's position by key (linear scan), then applies the
    sentence-start and sentence-end rules of synthesize() to that position.

    RULES:
    - Same capitalization rule as synthesize()
    - Text already ending in . ! ? is returned as-is (after capitalization)
    - "." / "?" appended when last, or when the following silence is long
    - question_marks=False appends "." only (period-only display)
    - A token whose key is not in tokens is returned as its raw text
    """
    for idx, candidate in enumerate(tokens):
        if candidate.key == token.key:
            return _display_at(tokens, idx, gap_threshold, question_marks)
    return token.text


def display_texts(
    tokens: Sequence[WordToken],
    gap_threshold: float = GAP_THRESHOLD_S,
    question_marks: bool = True,
) -> List[str]:
    """Display strings for every token, in order, in one pass.

    With question_marks=True, ``" ".join(display_texts(tokens))`` equals
    ``synthesize(tokens)``.
    """
    return [
        _display_at(tokens, idx, gap_threshold, question_marks)
        for idx in range(len(tokens))
    ]


# ---------------------------------------------------------------------------
# Line wrapping
# ---------------------------------------------------------------------------


def wrap_into_lines(
    tokens: Sequence[WordToken],
    max_chars_per_line: int = MAX_CHARS_PER_LINE,
) -> List[List[WordToken]]:
    """Greedily pack tokens into lines of at most max_chars_per_line.

    WHY: The playback view shows the transcript as rows of clickable words.
    Words are never split, so an over-long word gets a row of its own.

    HOW: Each token costs len(text) + 1 (one trailing space). When the next
    token would overflow a non-empty line, it opens a new line.

    RULES:
    - Every token appears in exactly one line, in input order
    - No line is empty; empty input → []
    - A token longer than the limit sits alone on its line
    """
    lines: List[List[WordToken]] = []
    current: List[WordToken] = []
    length = 0

    for token in tokens:
        width = len(token.text) + 1
        if current and length + width > max_chars_per_line:
            lines.append(current)
            current = [token]
            length = width
        else:
            current.append(token)
            length += width

    if current:
        lines.append(current)

    return lines


def build_display_lines(
    tokens: Sequence[WordToken],
    max_chars_per_line: int = MAX_CHARS_PER_LINE,
    gap_threshold: float = GAP_THRESHOLD_S,
    question_marks: bool = True,
) -> List[DisplayLine]:
    """Wrap tokens into DisplayLines carrying their formatted display text.

    Wrapping measures raw token text; display punctuation does not move
    words between lines.
    """
    texts = iter(display_texts(tokens, gap_threshold, question_marks))
    lines: List[DisplayLine] = []
    for group in wrap_into_lines(tokens, max_chars_per_line):
        lines.append(DisplayLine(
            tokens=[DisplayToken(token=token, text=next(texts)) for token in group],
            char_count=sum(len(token.text) + 1 for token in group),
        ))
    return lines


def max_chars_for_width(
    width_pt: float,
    char_width_pt: float = CHAR_WIDTH_PT,
    minimum: int = MIN_CHARS_PER_LINE,
) -> int:
    """Estimate how many characters fit in a view width (points)."""
    return max(minimum, int(width_pt / char_width_pt))


# ---------------------------------------------------------------------------
# Time and position lookup
# ---------------------------------------------------------------------------


def token_active_at(tokens: Sequence[WordToken], time: float) -> Optional[WordToken]:
    """Return the first token playing at ``time``, or None.

    RULES:
    - Active means start <= time < start + duration
    - Overlapping tokens: first match in sequence order wins
    """
    for token in tokens:
        if token.start <= time < token.start + token.duration:
            return token
    return None


def token_at_position(
    lines: Sequence[DisplayLine],
    row: int,
    column: int,
) -> Optional[WordToken]:
    """Map a character position in the rendered lines back to its token.

    WHY: Clicking a word seeks playback to that word. The view knows the
    row and character column of the click; the token's start is the seek
    target.

    HOW: Each display token occupies its text plus one trailing space, in
    the order the line renders them.

    RULES:
    - Row or column outside the rendered text → None
    - The trailing space after a word belongs to that word
    """
    if row < 0 or row >= len(lines) or column < 0:
        return None
    position = 0
    for display in lines[row].tokens:
        position += len(display.text) + 1
        if column < position:
            return display.token
    return None


def highlight(
    tokens: Sequence[WordToken],
    time: float,
    gap_threshold: float = GAP_THRESHOLD_S,
    markers: Tuple[str, str] = ("[", "]"),
) -> str:
    """Render the display transcript with the token active at ``time`` marked."""
    active = token_active_at(tokens, time)
    opening, closing = markers
    parts: List[str] = []
    for token, text in zip(tokens, display_texts(tokens, gap_threshold)):
        if active is not None and token.key == active.key:
            text = opening + text + closing
        parts.append(text)
    return " ".join(parts)


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimingIssue:
    """One suspicious timing value in a token sequence.

    kind is one of "negative_start", "negative_duration", "non_monotonic".
    """

    key: int
    kind: str
    message: str


def find_timing_issues(tokens: Sequence[WordToken]) -> List[TimingIssue]:
    """Report timing values that look like recognizer jitter.

    WHY: Upstream timing is imprecise and must never be rejected, but a
    caller may want to log it. This is a read-only diagnostic pass.

    RULES:
    - Never raises; empty input → []
    - non_monotonic: start earlier than the previous token's start
    """
    issues: List[TimingIssue] = []
    previous: Optional[WordToken] = None
    for token in tokens:
        if token.start < 0:
            issues.append(TimingIssue(
                key=token.key,
                kind="negative_start",
                message="token {} starts at {:.3f}s".format(token.key, token.start),
            ))
        if token.duration < 0:
            issues.append(TimingIssue(
                key=token.key,
                kind="negative_duration",
                message="token {} has duration {:.3f}s".format(token.key, token.duration),
            ))
        if previous is not None and token.start < previous.start:
            issues.append(TimingIssue(
                key=token.key,
                kind="non_monotonic",
                message="token {} starts at {:.3f}s, before token {} at {:.3f}s".format(
                    token.key, token.start, previous.key, previous.start,
                ),
            ))
        previous = token
    return issues
