"""Read-only reference data (agents, yachts, users) used while importing."""

from dataclasses import dataclass, field

from charterbox.models.agent import Agent
from charterbox.models.user import User
from charterbox.models.yacht import Yacht, YachtPackage


@dataclass
class ReferenceData:
    """Id -> name maps plus the reverse lookups the value converter needs.

    `yacht_packages` holds each yacht's price list, used to price package
    counters collapsed by the row transformer.
    """

    agents: dict[str, str] = field(default_factory=dict)
    yachts: dict[str, str] = field(default_factory=dict)
    users: dict[str, str] = field(default_factory=dict)
    agent_discounts: dict[str, float] = field(default_factory=dict)
    yacht_packages: dict[str, list[YachtPackage]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._agents_by_name = _reverse(self.agents)
        self._yachts_by_name = _reverse(self.yachts)
        self._users_by_name = _reverse(self.users)

    @classmethod
    def from_documents(
        cls,
        agents: list[Agent],
        yachts: list[Yacht],
        users: list[User],
    ) -> "ReferenceData":
        return cls(
            agents={a.agent_id: a.name for a in agents},
            yachts={y.yacht_id: y.name for y in yachts},
            users={u.user_id: u.name for u in users},
            agent_discounts={a.agent_id: a.discount_rate for a in agents if a.discount_rate},
            yacht_packages={y.yacht_id: list(y.packages) for y in yachts},
        )

    @classmethod
    async def load(cls) -> "ReferenceData":
        """Load reference collections from MongoDB."""
        agents = await Agent.find_all().to_list()
        yachts = await Yacht.find_all().to_list()
        users = await User.find_all().to_list()
        return cls.from_documents(agents, yachts, users)

    def resolve_agent(self, text: str) -> str | None:
        return _resolve(self.agents, self._agents_by_name, text)

    def resolve_yacht(self, text: str) -> str | None:
        return _resolve(self.yachts, self._yachts_by_name, text)

    def resolve_user(self, text: str) -> str | None:
        return _resolve(self.users, self._users_by_name, text)

    def is_known_yacht(self, yacht_id: str | None) -> bool:
        return bool(yacht_id) and yacht_id in self.yachts

    def discount_for(self, agent_id: str | None) -> float:
        if not agent_id:
            return 0.0
        return self.agent_discounts.get(agent_id, 0.0)

    def find_package(self, yacht_id: str | None, package_name: str) -> YachtPackage | None:
        """Find a yacht's price list entry for a package name.

        Exact (case-insensitive) name matches win over containment matches.
        """
        packages = self.yacht_packages.get(yacht_id or "", [])
        wanted = package_name.strip().lower()
        for package in packages:
            if package.name.strip().lower() == wanted:
                return package
        for package in packages:
            name = package.name.strip().lower()
            if name and (wanted in name or name in wanted):
                return package
        return None


def _reverse(id_to_name: dict[str, str]) -> dict[str, str]:
    return {name.strip().lower(): id_ for id_, name in id_to_name.items() if name}


def _resolve(id_to_name: dict[str, str], name_to_id: dict[str, str], text: str) -> str | None:
    text = (text or "").strip()
    if not text:
        return None
    if text in id_to_name:
        return text
    return name_to_id.get(text.lower())
