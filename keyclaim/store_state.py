from dataclasses import dataclass, field

from keyclaim.keyclaim_error import StateConflictError
from keyclaim.link_record import LinkRecord, Reward


@dataclass
class StoreState:
    """The complete persisted state of a key store.

    `keys` is a reverse index of `links`: every record's key maps back to its
    link id and every indexed key names a record carrying that key. Records are
    only ever added through add_link, which updates both sides together.
    """

    links: dict[str, LinkRecord] = field(default_factory=dict)
    keys: dict[str, str] = field(default_factory=dict)

    # Number of successful saves. Compare-and-swap stores reject a save when
    # the persisted version differs from this one.
    version: int = 0

    def add_link(self, link_id: str, key: str, reward: Reward) -> LinkRecord:
        if link_id in self.links:
            raise StateConflictError(f"Link {link_id} already has a key")
        if key in self.keys:
            raise StateConflictError(f"Key {key} is already assigned")
        record = LinkRecord(key=key, reward=reward)
        self.links[link_id] = record
        self.keys[key] = link_id
        return record

    def find_inconsistencies(self) -> list[str]:
        """Describe every place where links and keys disagree"""
        problems = []
        for link_id, record in self.links.items():
            indexed_link_id = self.keys.get(record.key)
            if indexed_link_id != link_id:
                problems.append(
                    f"link {link_id} has key {record.key} indexed to {indexed_link_id}"
                )
        for key, link_id in self.keys.items():
            record = self.links.get(link_id)
            if record is None:
                problems.append(f"key {key} points at missing link {link_id}")
            elif record.key != key:
                problems.append(
                    f"key {key} points at link {link_id} which has key {record.key}"
                )
        return problems
