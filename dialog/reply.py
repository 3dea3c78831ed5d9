from dataclasses import dataclass

from content.formatter import render_content


@dataclass(frozen=True)
class Reply:
    """
    What the bot says for one turn, plus where it came from.
    """
    content: str
    is_markup: bool = False
    source: str = "unknown"     # clarification | resolver | query_service | generative | heuristic

    @classmethod
    def from_content(cls, content, source: str) -> "Reply":
        return cls(content=render_content(content), is_markup=True, source=source)
