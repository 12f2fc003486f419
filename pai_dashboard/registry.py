"""Agent registry -- the single owner of every agent record."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from pai_dashboard.models import Agent, AgentSnapshot


class AgentRegistry:
    """Ordered collection of live agents.

    Structural edits (spawn / collect) swap in a new list via
    :meth:`replace` so no caller ever sees the list change under an
    iteration.  Field-level edits happen on the agents themselves.
    """

    def __init__(self, agents: Iterable[Agent] = ()):
        self._agents: list[Agent] = list(agents)

    def __len__(self) -> int:
        return len(self._agents)

    def __iter__(self) -> Iterator[Agent]:
        return iter(tuple(self._agents))

    def __getitem__(self, index: int) -> Agent:
        return self._agents[index]

    @property
    def agents(self) -> Sequence[Agent]:
        return tuple(self._agents)

    def ids(self) -> set[str]:
        return {a.id for a in self._agents}

    def get(self, index: int) -> Agent | None:
        if 0 <= index < len(self._agents):
            return self._agents[index]
        return None

    def replace(self, agents: Iterable[Agent]) -> None:
        self._agents = list(agents)

    def with_appended(self, agent: Agent) -> list[Agent]:
        return [*self._agents, agent]

    def without(self, index: int) -> list[Agent]:
        return self._agents[:index] + self._agents[index + 1:]

    def freeze(self) -> tuple[AgentSnapshot, ...]:
        return tuple(a.freeze() for a in self._agents)
