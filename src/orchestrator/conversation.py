"""
src/orchestrator/conversation.py

Append-only conversation history.
"""


from typing import Iterator, List, Union

from orchestrator.models import ContentBlock, Turn


class Conversation:

    def __init__(self) -> None:

        self._turns: List[Turn] = []

    def append(self, turn: Turn) -> Turn:

        self._turns.append(turn)

        return turn

    def add(self, role: str, content: Union[str, List[ContentBlock]]) -> Turn:

        return self.append(Turn(role=role, content=content))

    @property
    def turns(self) -> List[Turn]:
        """A copy of the history; callers cannot reorder or drop turns."""

        return list(self._turns)

    def clear(self) -> None:

        self._turns = []

    def __len__(self) -> int:

        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:

        return iter(list(self._turns))
