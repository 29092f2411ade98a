"""
Line Classifier.

Splits a directive-prefixed input buffer into a gnuplot script, a
natural-language request and SQL text:

    --!gnuplot set title 'returns'
    -- plot $DATA using 2:xtic(1) with boxes
    select l_returnflag, count(*) from lineitem group by 1;

Routing rules, evaluated per line until SQL mode is entered:
- `--!gnuplot` switches to the plot buffer
- `--!text2sql` switches to the natural-language buffer; a known template
  key after the directive is replaced by its question text
- any line not starting with `--`, or starting with `--!sql`, switches to
  the SQL buffer for the rest of the input
- other comment lines stay in the current buffer

Non-SQL lines lose their leading token (directive or `--`) and the
whitespace after it. SQL lines are kept verbatim. Every input line ends
up in exactly one buffer.
"""

import re
from typing import Dict, List, Mapping, Optional

from moquery.constants import COMMENT_MARKER, GNUPLOT_HINT, SQL_HINT, TEXT2SQL_HINT
from moquery.domain.base_enums import BufferKind
from moquery.domain.classified_query import ClassifiedQuery, ClassifierState
from moquery.repositories.query_templates import BUILTIN_TEMPLATES
from moquery.utils.logging import get_module_logger
from moquery.utils.tracing import current_trace_id

logger = get_module_logger()

_WHITESPACE_RUN = re.compile(r"[ \t]+")

_SQL_MODE = ClassifierState(target=BufferKind.SQL, locked=True)


def should_hijack(raw: str) -> bool:
    """True when the buffer opens with a gnuplot or text2sql directive."""
    return raw.startswith(GNUPLOT_HINT) or raw.startswith(TEXT2SQL_HINT)


def strip_leading_token(line: str) -> str:
    """
    Text after the first whitespace run of a line.

    Returns "" when the line has no whitespace or starts with it.
    """
    match = _WHITESPACE_RUN.search(line)
    if match is None or match.start() == 0:
        return ""
    return line[match.end():]


def next_state(state: ClassifierState, line: str) -> ClassifierState:
    """
    Routing state after seeing `line`.

    SQL mode is absorbing, and the returned state always names a target buffer.
    """
    if state.locked:
        return _SQL_MODE
    if line.startswith(GNUPLOT_HINT):
        return ClassifierState(target=BufferKind.PLOT)
    if line.startswith(TEXT2SQL_HINT):
        return ClassifierState(target=BufferKind.NL_REQUEST)
    if not line.startswith(COMMENT_MARKER) or line.startswith(SQL_HINT):
        return _SQL_MODE
    if state.target is None:
        # Leading plain comment with no directive seen yet: treat as SQL
        return _SQL_MODE
    return state


class LineClassifier:
    """
    Classifies input buffers line by line.

    Usage:
        classifier = LineClassifier()
        query = classifier.classify("--!text2sql tpch-q1\\n;")
        print(query.nl_request)
    """

    def __init__(self, templates: Optional[Mapping[str, str]] = None):
        self.templates: Mapping[str, str] = BUILTIN_TEMPLATES if templates is None else templates

    def _emit(self, state: ClassifierState, line: str) -> str:
        """Text a line contributes to the buffer selected by `state`."""
        if state.target == BufferKind.SQL:
            return line + "\n"

        stripped = strip_leading_token(line)
        if state.target == BufferKind.NL_REQUEST and line.startswith(TEXT2SQL_HINT):
            key = stripped.strip()
            if key and key in self.templates:
                return self.templates[key] + "\n"
        return stripped + "\n"

    def classify(self, raw: str) -> ClassifiedQuery:
        """
        Split a raw buffer into plot script, NL request and SQL text.

        Args:
            raw: Multi-line input buffer

        Returns:
            ClassifiedQuery with the three buffers
        """
        buffers: Dict[BufferKind, List[str]] = {kind: [] for kind in BufferKind}
        state = ClassifierState()

        for line in raw.split("\n"):
            state = next_state(state, line)
            buffers[state.target].append(self._emit(state, line))

        query = ClassifiedQuery(
            plot_script="".join(buffers[BufferKind.PLOT]),
            nl_request="".join(buffers[BufferKind.NL_REQUEST]),
            sql_text="".join(buffers[BufferKind.SQL]),
        )

        logger.debug(
            "Classified input buffer",
            plot_lines=len(buffers[BufferKind.PLOT]),
            nl_lines=len(buffers[BufferKind.NL_REQUEST]),
            sql_lines=len(buffers[BufferKind.SQL]),
            trace_id=current_trace_id(),
        )

        return query
