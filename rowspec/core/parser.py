"""Statement inspection built on the sqlglot tokenizer.

Only positional placeholders are counted here; the tokenizer already knows how
to skip string literals, quoted identifiers and comments for each dialect.
"""

from typing import TYPE_CHECKING, Final, Optional

import sqlglot
from sqlglot.errors import SqlglotError
from sqlglot.tokens import TokenType

from rowspec.exceptions import SQLParsingError

if TYPE_CHECKING:
    from sqlglot.tokens import Token

__all__ = ("DEFAULT_DIALECT", "SQLGlotStatementParser", "StatementInfo", "get_default_parser")

DEFAULT_DIALECT: Final = "mysql"


class StatementInfo:
    """Positional placeholder details for one statement."""

    __slots__ = ("parameters", "text", "type")

    def __init__(self, text: str, type: str, parameters: int) -> None:  # noqa: A002
        self.text = text
        self.type = type
        self.parameters = parameters

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self.text == other.text and self.type == other.type and self.parameters == other.parameters

    def __hash__(self) -> int:
        return hash((self.text, self.type, self.parameters))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(text={self.text!r}, type={self.type!r}, parameters={self.parameters!r})"


class SQLGlotStatementParser:
    """Split SQL into statements and count ``?`` placeholders per statement."""

    __slots__ = ("_cache", "_max_cache_size")

    def __init__(self, max_cache_size: int = 1024) -> None:
        self._cache: dict[tuple[str, str], tuple[StatementInfo, ...]] = {}
        self._max_cache_size = max_cache_size

    def identify(self, sql: str, *, dialect: str = DEFAULT_DIALECT) -> "tuple[StatementInfo, ...]":
        """Identify the statements in ``sql``.

        Args:
            sql: SQL text, possibly holding several ``;`` separated statements.
            dialect: sqlglot dialect name used for tokenization.

        Raises:
            SQLParsingError: If the text cannot be tokenized.

        Returns:
            One :class:`StatementInfo` per statement. An empty or comment-only
            string yields a single statement without placeholders.
        """
        cache_key = (sql, dialect)
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            tokens = sqlglot.tokenize(sql, read=dialect)
        except SqlglotError as exc:
            msg = f"Unable to tokenize SQL statement: {exc}"
            raise SQLParsingError(msg) from exc

        statements = tuple(self._split(sql, tokens)) or (StatementInfo(sql.strip(), "UNKNOWN", 0),)
        if len(self._cache) >= self._max_cache_size:
            self._cache.clear()
        self._cache[cache_key] = statements
        return statements

    @staticmethod
    def _split(sql: str, tokens: "list[Token]") -> "list[StatementInfo]":
        statements: list[StatementInfo] = []
        current: list[Token] = []
        for token in [*tokens, None]:
            if token is not None and token.token_type != TokenType.SEMICOLON:
                current.append(token)
                continue
            if current:
                text = sql[current[0].start : current[-1].end + 1].strip()
                parameters = sum(1 for t in current if t.token_type == TokenType.PLACEHOLDER)
                statements.append(StatementInfo(text, current[0].text.upper(), parameters))
            current = []
        return statements


_default_parser: Optional[SQLGlotStatementParser] = None


def get_default_parser() -> SQLGlotStatementParser:
    """Return the process-wide default parser, creating it on first use."""
    global _default_parser  # noqa: PLW0603
    if _default_parser is None:
        _default_parser = SQLGlotStatementParser()
    return _default_parser
