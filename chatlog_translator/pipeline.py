"""Pipeline driver: parse -> filter -> translate -> emit, one line at a time."""

import logging
import sys
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Iterable, TextIO

from chatlog_translator.errors import (
    AllCredentialsExhaustedError,
    LineParseError,
    TranslationError,
)
from chatlog_translator.filters import CategoryFilter, is_fresh
from chatlog_translator.parser import parse_line
from chatlog_translator.translator import Translator

logger = logging.getLogger(__name__)

EXHAUSTED_POLICIES = ("halt", "passthrough")


@dataclass
class PipelineStats:
    lines_read: int = 0
    parse_errors: int = 0
    stale: int = 0
    filtered: int = 0
    translated: int = 0
    translation_errors: int = 0
    emitted: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class TranslationPipeline:
    """Sequential consumer of log lines.

    Each line is fully translated and emitted before the next one is
    looked at, so output order follows log order.
    """

    def __init__(
        self,
        translator: Translator,
        category_filter: CategoryFilter,
        started_at: datetime,
        translate_actor_name: bool = False,
        sink: TextIO | None = None,
        exhausted_policy: str = "halt",
    ):
        if exhausted_policy not in EXHAUSTED_POLICIES:
            raise ValueError(f"Unknown exhausted policy: {exhausted_policy!r}")
        self._translator = translator
        self._filter = category_filter
        self._started_at = started_at
        self._translate_actor_name = translate_actor_name
        self._sink = sink if sink is not None else sys.stdout
        self._exhausted_policy = exhausted_policy
        self._translation_disabled = False
        self._stats = PipelineStats()

    @property
    def stats(self) -> PipelineStats:
        return self._stats

    @property
    def translation_disabled(self) -> bool:
        return self._translation_disabled

    def _translate(self, text: str) -> str:
        """Translate, or return ``text`` unchanged once translation is off."""
        if self._translation_disabled:
            return text
        try:
            return self._translator.translate(text)
        except AllCredentialsExhaustedError:
            if self._exhausted_policy == "halt":
                raise
            logger.error("All credentials exhausted, emitting untranslated text from now on")
            self._translation_disabled = True
            return text

    def process_line(self, line: str) -> tuple[str, str] | None:
        """Return the (actor, text) pair to emit, or None if the line is dropped."""
        self._stats.lines_read += 1
        try:
            event = parse_line(line)
        except LineParseError as e:
            self._stats.parse_errors += 1
            logger.debug("Dropping unparseable line: %s (%s)", e.line, e)
            return None

        if not is_fresh(event, self._started_at):
            self._stats.stale += 1
            return None

        if not self._filter.accepts(event):
            self._stats.filtered += 1
            return None

        actor = event.actor_name
        if self._translate_actor_name:
            try:
                actor = self._translate(event.actor_name)
            except AllCredentialsExhaustedError:
                raise
            except TranslationError as e:
                logger.error("Translate error when translating actor name: %s", e)
                actor = event.actor_name

        try:
            text = self._translate(event.content)
        except AllCredentialsExhaustedError:
            raise
        except TranslationError as e:
            self._stats.translation_errors += 1
            logger.error("Translate error: %s", e)
            text = event.content
        else:
            if not self._translation_disabled:
                self._stats.translated += 1

        return actor, text

    def emit(self, actor: str, text: str):
        self._sink.write(f"{actor}: {text}\n\n")
        self._sink.flush()
        self._stats.emitted += 1

    def run(self, lines: Iterable[str]):
        """Consume ``lines`` until the iterable ends.

        AllCredentialsExhaustedError propagates under the "halt" policy.
        """
        for line in lines:
            result = self.process_line(line)
            if result is None:
                continue
            self.emit(*result)
