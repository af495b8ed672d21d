"""Abstract base class for all parser implementations."""

from abc import ABC, abstractmethod

from toolcall_engine.models import ParsedOutput


class BaseParser(ABC):
    """Abstract base class that all tool call parsers must inherit from.

    Parsers never raise on malformed model output: anything that cannot be
    understood as a tool call is returned as plain text.

    Example:
        class MyParser(BaseParser):
            @property
            def name(self) -> str:
                return "my-parser"

            def parse(self, text: str) -> ParsedOutput:
                # Implementation here
                pass
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this parser.

        Used in logging.
        """
        pass

    @abstractmethod
    def parse(self, text: str) -> ParsedOutput:
        """Extract the first tool call from text.

        Args:
            text: Raw model output to parse

        Returns:
            ParsedOutput holding the call (if any) and the residual text
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"
