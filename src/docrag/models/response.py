"""Results handed back to the routing layer."""

from dataclasses import dataclass, field


@dataclass
class ContextualResponse:
    """A grounded two-message prompt plus citations for display."""

    messages: list[dict[str, str]]
    relevant_docs: list[dict] = field(default_factory=list)
    model: str = ""

    def to_dict(self) -> dict:
        return {
            "messages": [dict(m) for m in self.messages],
            "relevantDocs": [dict(d) for d in self.relevant_docs],
        }


@dataclass
class Answer:
    """A chat completion produced from a contextual prompt."""

    content: str
    model: str
    relevant_docs: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "message": {"role": "assistant", "content": self.content},
            "relevantDocs": [dict(d) for d in self.relevant_docs],
        }
