import json
from dataclasses import dataclass, field
from uuid import UUID


def _as_id_list(raw: str | None) -> list[str]:
    if raw is None:
        return []
    text = raw.strip()
    if not text:
        return []
    if text[0] in '["':
        try:
            decoded = json.loads(text)
        except ValueError:
            return [text]
        if isinstance(decoded, str):
            return [decoded.strip()] if decoded.strip() else []
        if isinstance(decoded, list):
            return [item.strip() for item in decoded if isinstance(item, str) and item.strip()]
        return []
    return [text]


def parse_advertiser_ids(*raw_values: str | None) -> list[str]:
    """
    Flatten advertiser ID columns into one ordered, de-duplicated list.

    Each column may hold a bare ID, a JSON string, or a JSON array of IDs.
    Columns are read in the order given.
    """
    ids: list[str] = []
    for raw in raw_values:
        for advertiser_id in _as_id_list(raw):
            if advertiser_id not in ids:
                ids.append(advertiser_id)
    return ids


@dataclass(frozen=True)
class StoreConfig:
    store_name: str
    owner_email: str
    advertiser_ids: list[str] = field(default_factory=list)
    # Set when the config was reached through team membership
    owner_dealer_id: UUID | None = None

    @property
    def advertiser_id(self) -> str | None:
        # First configured advertiser wins
        return self.advertiser_ids[0] if self.advertiser_ids else None
