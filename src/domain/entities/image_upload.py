from dataclasses import dataclass

from src.domain.entities.dealer_image_asset import DealerImageAsset


@dataclass(frozen=True)
class UploadOutcome:
    """Result of pushing one dealer image to AutoTrader."""

    asset: DealerImageAsset
    external_image_id: str | None = None
    failure_reason: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.external_image_id is not None


@dataclass(frozen=True)
class UploadBatchResult:
    """
    Outcomes of an image batch, in the order the assets were given.

    A batch never fails as a whole: zero successes is still a result.
    """

    outcomes: tuple[UploadOutcome, ...] = ()

    @property
    def succeeded(self) -> list[UploadOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> list[UploadOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def is_partial(self) -> bool:
        return bool(self.succeeded) and bool(self.failed)

    def image_id_for(self, asset_id: str) -> str | None:
        for outcome in self.outcomes:
            if outcome.asset.id == asset_id:
                return outcome.external_image_id
        return None
