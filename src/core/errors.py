"""
Domain errors raised by the parser and the collaboration engine.
"""


class ParseError(ValueError):
    """A CSV line could not be turned into an assignment record."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Error parsing line {line_number}: {reason}")


class AnalysisError(ValueError):
    """The parsed records do not produce a collaborating pair."""
