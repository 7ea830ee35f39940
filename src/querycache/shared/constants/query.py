"""Query building constants."""


class Query:
    """SQL building constants."""

    DEFAULT_INDEX_COLUMN = "id"
    IDENTIFIER_QUOTE = "`"
    PLACEHOLDER = "?"

    EMPTY_QUERY_MESSAGE = "Empty query!"
    EMPTY_INPUT_MESSAGE = "Empty input"


class EnvelopeFields:
    """Field names accepted by the ``return`` projection."""

    STATUS = "status"
    MESSAGE = "message"
    AFFECTED = "affected"
    INSERT_ID = "insert_id"
    ERROR_CODE = "error_code"

    ALL = (STATUS, MESSAGE, AFFECTED, INSERT_ID, ERROR_CODE)


__all__ = ["EnvelopeFields", "Query"]
