"""Unit tests for the SQLAlchemy repositories against a mocked AsyncSession."""
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.domain.enums.stock_enums import ImageType
from src.infrastructure.database.models import DealerModel, StockImageModel, StoreConfigModel
from src.infrastructure.database.repositories.dealer_image_repository import (
    SqlAlchemyDealerImageRepository,
)
from src.infrastructure.database.repositories.store_config_repository import (
    SqlAlchemyStoreConfigRepository,
)


def _result(scalar=None, scalars=None) -> MagicMock:  # type: ignore[no-untyped-def]
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalars.return_value.all.return_value = scalars or []
    return result


def _session(*results: MagicMock) -> MagicMock:
    session = MagicMock()
    session.execute = AsyncMock(side_effect=list(results))
    session.flush = AsyncMock()
    return session


def _config(email: str, **overrides) -> StoreConfigModel:  # type: ignore[no-untyped-def]
    values = {"email": email, "store_name": "Main St Motors", "advertisement_id": "111"}
    values.update(overrides)
    return StoreConfigModel(**values)


class TestStoreConfigRepository:
    @pytest.mark.asyncio
    async def test_own_config(self) -> None:
        session = _session(
            _result(_config("owner@example.com", advertisement_ids='["222", "111"]'))
        )

        config = await SqlAlchemyStoreConfigRepository(session).get_for_user(
            "user_1", "owner@example.com"
        )

        assert config is not None
        assert config.advertiser_ids == ["111", "222"]
        assert config.owner_dealer_id is None

    @pytest.mark.asyncio
    async def test_team_member_gets_owner_config(self) -> None:
        owner = DealerModel(
            id=uuid4(), name="Boss", email="boss@example.com", clerk_user_id="user_boss"
        )
        session = _session(
            _result(None),
            _result(owner),
            _result(_config("boss@example.com")),
        )

        config = await SqlAlchemyStoreConfigRepository(session).get_for_user(
            "user_staff", "staff@example.com"
        )

        assert config is not None
        assert config.owner_email == "boss@example.com"
        assert config.owner_dealer_id == owner.id

    @pytest.mark.asyncio
    async def test_unknown_user(self) -> None:
        session = _session(_result(None), _result(None))

        config = await SqlAlchemyStoreConfigRepository(session).get_for_user(
            "user_x", "x@example.com"
        )

        assert config is None

    @pytest.mark.asyncio
    async def test_api_credentials_require_key_and_secret(self) -> None:
        with_keys = _session(
            _result(_config("a@example.com", autotrader_key="k", autotrader_secret="s"))
        )
        key_only = _session(_result(_config("b@example.com", autotrader_key="k")))

        assert await SqlAlchemyStoreConfigRepository(with_keys).get_api_credentials(
            "a@example.com"
        ) == ("k", "s")
        assert await SqlAlchemyStoreConfigRepository(key_only).get_api_credentials(
            "b@example.com"
        ) is None


class TestDealerImageRepository:
    @pytest.mark.asyncio
    async def test_existing_dealer(self) -> None:
        dealer_id = uuid4()
        dealer = DealerModel(id=dealer_id, name="D", email="d@example.com", clerk_user_id="user_1")
        session = _session(_result(dealer))

        assert await SqlAlchemyDealerImageRepository(session).get_or_create_dealer(
            "user_1", "d@example.com"
        ) == dealer_id
        session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_missing_dealer(self) -> None:
        session = _session(_result(None))

        async def flush() -> None:
            session.add.call_args.args[0].id = uuid4()

        session.flush = AsyncMock(side_effect=flush)

        dealer_id = await SqlAlchemyDealerImageRepository(session).get_or_create_dealer(
            "user_new", "new@example.com"
        )

        created = session.add.call_args.args[0]
        assert created.name == "Unknown"
        assert created.clerk_user_id == "user_new"
        assert dealer_id == created.id

    @pytest.mark.asyncio
    async def test_list_for_dealer_maps_types(self) -> None:
        dealer_id = uuid4()
        image = StockImageModel(
            id=uuid4(),
            dealer_id=dealer_id,
            name="Front",
            file_name="front.jpg",
            public_url="https://cdn.example.com/front.jpg",
            file_size=1024,
            mime_type="image/jpeg",
            image_type="Default",
        )
        session = _session(_result(scalars=[image]))

        assets = await SqlAlchemyDealerImageRepository(session).list_for_dealer(dealer_id)

        assert len(assets) == 1
        assert assets[0].id == str(image.id)
        assert assets[0].name == "front.jpg"
        assert assets[0].image_type is ImageType.DEFAULT
