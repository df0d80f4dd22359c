"""Answer generation seam for question answering over retrieved chunks."""

from abc import ABC, abstractmethod

from .rag import SearchResult

PLACEHOLDER_ANSWER = (
    "To provide a complete answer, I'd need to use the retrieved chunks "
    "and generate a response with an LLM."
)


class BaseAnswerGenerator(ABC):
    """Abstract base class for answer generators.

    Implementations turn retrieved chunks into an answer for a question.
    """

    @abstractmethod
    async def answer_from(self, results: list[SearchResult], question: str) -> str:
        """Generate an answer.

        Args:
            results: Chunks retrieved for the question, best first
            question: The user's question

        Returns:
            Answer text
        """
        pass


class PlaceholderAnswerGenerator(BaseAnswerGenerator):
    """Returns a fixed placeholder; no generation happens."""

    def __init__(self, answer: str = PLACEHOLDER_ANSWER):
        self.answer = answer

    async def answer_from(self, results: list[SearchResult], question: str) -> str:
        if not results:
            return "No relevant documents found."
        return self.answer
