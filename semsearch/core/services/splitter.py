"""Sentence splitting that keeps code intact.

Fenced code blocks are emitted as single sentence units, inline code spans
and common abbreviations are protected from spurious breaks, and fragments
shorter than the configured minimum are dropped.
"""

import logging
import re
from collections.abc import Iterable

from ..domain import Sentence
from ..domain.exceptions import InvalidConfigurationError, SentenceSplittingError

logger = logging.getLogger(__name__)

DEFAULT_ABBREVIATIONS: tuple[str, ...] = (
    "Dr.",
    "Mr.",
    "Mrs.",
    "Ms.",
    "Prof.",
    "Sr.",
    "Jr.",
    "vs.",
    "etc.",
    "e.g.",
    "i.e.",
    "Ph.D.",
    "M.D.",
    "U.S.",
    "U.K.",
    "Inc.",
    "Ltd.",
    "Corp.",
    "Co.",
)

# An unterminated fence runs to the end of the text
FENCED_CODE_PATTERN = re.compile(r"```.*?(?:```|\Z)", re.DOTALL)
INLINE_CODE_PATTERN = re.compile(r"`[^`\n]+`")

TERMINATORS = ".!?"
CLOSERS = "\"')]}\u00bb\u201d\u2019"
OPENERS = "\"'([{\u00ab\u201c\u2018"

# Private-use code points never appear in normal prose
_DOT_PLACEHOLDER = "\ue000"
_CODE_PLACEHOLDER = "\ue001"
_CODE_RESTORE_PATTERN = re.compile(f"{_CODE_PLACEHOLDER}(\\d+){_CODE_PLACEHOLDER}")


class SentenceSplitter:
    """Splits text into sentences while preserving code.

    Example:
        >>> splitter = SentenceSplitter(min_sentence_length=5)
        >>> splitter.split("Dr. Smith went home. He was tired.")
        ['Dr. Smith went home.', 'He was tired.']
    """

    def __init__(
        self,
        min_sentence_length: int = 10,
        abbreviations: Iterable[str] | None = None,
    ) -> None:
        """Initialize the splitter.

        Args:
            min_sentence_length: Minimum trimmed length of a kept sentence.
            abbreviations: Tokens whose periods never end a sentence.
                Defaults to ``DEFAULT_ABBREVIATIONS``.
        """
        if min_sentence_length <= 0:
            raise InvalidConfigurationError(
                "min_sentence_length must be greater than 0",
                context={"min_sentence_length": min_sentence_length},
            )
        self.min_sentence_length = min_sentence_length
        self.abbreviations = tuple(
            abbreviations if abbreviations is not None else DEFAULT_ABBREVIATIONS
        )
        # Longest first so "Ph.D." wins over "D."-style suffixes
        ordered = sorted(self.abbreviations, key=len, reverse=True)
        self._abbreviation_pattern = (
            re.compile(r"(?<!\w)(?:" + "|".join(re.escape(a) for a in ordered) + ")")
            if ordered
            else None
        )

    def split(self, text: str | bytes) -> list[str]:
        """Split text into sentence strings.

        Args:
            text: Document text. Bytes are decoded as UTF-8.

        Returns:
            Sentences in document order, each trimmed and at least
            ``min_sentence_length`` characters long.

        Raises:
            SentenceSplittingError: If the input is not text or cannot be decoded.
        """
        text = self._coerce(text)
        if not text.strip():
            return []

        units: list[str] = []
        position = 0
        for match in FENCED_CODE_PATTERN.finditer(text):
            units.extend(self._split_prose(text[position : match.start()]))
            units.append(match.group(0).strip())
            position = match.end()
        units.extend(self._split_prose(text[position:]))

        kept = [unit for unit in units if len(unit) >= self.min_sentence_length]
        if len(kept) < len(units):
            logger.debug(
                f"Dropped {len(units) - len(kept)} fragment(s) shorter than "
                f"{self.min_sentence_length} characters"
            )
        return kept

    def split_sentences(self, text: str | bytes) -> list[Sentence]:
        """Split text and index the retained sentences contiguously from 0."""
        return [Sentence(text=s, index=i) for i, s in enumerate(self.split(text))]

    @staticmethod
    def _coerce(text: str | bytes) -> str:
        if isinstance(text, bytes):
            try:
                return text.decode("utf-8")
            except UnicodeDecodeError as e:
                raise SentenceSplittingError(
                    "Document is not valid UTF-8", cause=e, context={"position": e.start}
                )
        if not isinstance(text, str):
            raise SentenceSplittingError(
                "Document text must be str or bytes",
                context={"type": type(text).__name__},
            )
        return text

    def _split_prose(self, segment: str) -> list[str]:
        """Split a code-fence-free segment on sentence terminators."""
        if not segment.strip():
            return []

        spans: list[str] = []

        def _stash(match: re.Match[str]) -> str:
            spans.append(match.group(0))
            return f"{_CODE_PLACEHOLDER}{len(spans) - 1}{_CODE_PLACEHOLDER}"

        protected = INLINE_CODE_PATTERN.sub(_stash, segment)
        if self._abbreviation_pattern is not None:
            protected = self._abbreviation_pattern.sub(
                lambda m: m.group(0).replace(".", _DOT_PLACEHOLDER), protected
            )

        pieces: list[str] = []
        start = 0
        i = 0
        length = len(protected)
        while i < length:
            if protected[i] not in TERMINATORS:
                i += 1
                continue
            end = i + 1
            # Runs like "?!" and trailing quotes/brackets belong to the sentence
            while end < length and (protected[end] in TERMINATORS or protected[end] in CLOSERS):
                end += 1
            if _ends_sentence(protected, end):
                pieces.append(protected[start:end])
                start = end
            i = end
        pieces.append(protected[start:])

        sentences = []
        for piece in pieces:
            restored = _restore(piece, spans).strip()
            if restored:
                sentences.append(restored)
        return sentences


def _ends_sentence(text: str, end: int) -> bool:
    """Decide whether a terminator run ending at ``end`` closes a sentence."""
    length = len(text)
    if end >= length:
        return True
    j = end
    while j < length and text[j].isspace():
        if text[j] in "\r\n":
            return True
        j += 1
    if j >= length:
        return True
    # Without whitespace only an uppercase letter breaks: "tool.Then", not "3.14" or "config.yaml"
    if text[j].isupper():
        return True
    return j > end and text[j] in OPENERS and j + 1 < length and text[j + 1].isupper()


def _restore(text: str, spans: list[str]) -> str:
    text = text.replace(_DOT_PLACEHOLDER, ".")
    return _CODE_RESTORE_PATTERN.sub(lambda m: spans[int(m.group(1))], text)
