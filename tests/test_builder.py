"""
AuthorizationBuilder: domain binding, validity window, nonces and intent checks.
"""

import time

import pytest
from pydantic import ValidationError

from gasless_relay.engine.builder import AuthorizationBuilder
from gasless_relay.engine.exceptions import (
    InvalidAmountError,
    InvalidRecipientError,
    MetadataUnavailableError,
)
from gasless_relay.evm.standards import TRANSFER_WITH_AUTHORIZATION_TYPES

from test_mocks import (
    MOCK_CHAIN_ID_COSTON2,
    MOCK_CHAIN_ID_FLARE,
    MOCK_HOLDER_ADDRESS,
    MOCK_NOW,
    MOCK_RECIPIENT_ADDRESS,
    MOCK_TOKEN_ADDRESS,
    MOCK_TOKEN_NAME,
    FakeClock,
    FakeToken,
)


def make_builder(token=None, clock=None, **kwargs) -> AuthorizationBuilder:
    return AuthorizationBuilder(
        token or FakeToken(),
        MOCK_TOKEN_ADDRESS.lower(),
        clock=clock or FakeClock(),
        **kwargs
    )


async def build(builder, amount="1.5", chain_id=MOCK_CHAIN_ID_COSTON2, recipient=MOCK_RECIPIENT_ADDRESS):
    return await builder.build(
        authorizer=MOCK_HOLDER_ADDRESS,
        recipient=recipient,
        amount=amount,
        chain_id=chain_id,
    )


class TestBuild:
    @pytest.mark.asyncio
    async def test_domain_binds_token_and_network(self):
        domain, _ = await build(make_builder())

        assert domain.name == MOCK_TOKEN_NAME
        assert domain.version == "1"
        assert domain.chainId == MOCK_CHAIN_ID_COSTON2
        assert domain.verifyingContract == MOCK_TOKEN_ADDRESS

    @pytest.mark.asyncio
    async def test_authorization_fields(self):
        _, authorization = await build(make_builder(), amount="1.5")

        assert authorization.authorizer == MOCK_HOLDER_ADDRESS
        assert authorization.recipient == MOCK_RECIPIENT_ADDRESS
        assert authorization.value == 1_500_000
        assert authorization.token == MOCK_TOKEN_ADDRESS
        assert authorization.chain_id == MOCK_CHAIN_ID_COSTON2

    @pytest.mark.asyncio
    async def test_validity_window_is_one_hour_from_now(self):
        clock = FakeClock(now=MOCK_NOW)
        _, authorization = await build(make_builder(clock=clock))

        assert authorization.validAfter == MOCK_NOW
        assert authorization.validBefore == MOCK_NOW + 3600

    @pytest.mark.asyncio
    async def test_custom_validity_and_version(self):
        domain, authorization = await build(make_builder(validity_seconds=600, domain_version="2"))

        assert domain.version == "2"
        assert authorization.validBefore - authorization.validAfter == 600

    @pytest.mark.asyncio
    async def test_each_build_has_a_fresh_nonce(self):
        builder = make_builder()
        nonces = set()
        for _ in range(50):
            _, authorization = await build(builder)
            nonces.add(authorization.nonce)
        assert len(nonces) == 50

    @pytest.mark.asyncio
    async def test_domain_differs_between_networks(self):
        builder = make_builder()
        coston2, _ = await build(builder, chain_id=MOCK_CHAIN_ID_COSTON2)
        flare, _ = await build(builder, chain_id=MOCK_CHAIN_ID_FLARE)

        assert coston2 != flare
        assert flare.chainId == MOCK_CHAIN_ID_FLARE

    @pytest.mark.asyncio
    async def test_authorization_is_immutable(self):
        _, authorization = await build(make_builder())
        with pytest.raises(ValidationError):
            authorization.value = 1

    @pytest.mark.asyncio
    async def test_message_uses_eip_field_names(self):
        _, authorization = await build(make_builder())
        message = authorization.to_message().to_dict()

        assert message["from"] == MOCK_HOLDER_ADDRESS
        assert message["to"] == MOCK_RECIPIENT_ADDRESS
        assert message["value"] == 1_500_000
        assert message["nonce"] == authorization.nonce

    def test_type_schema(self):
        schema = AuthorizationBuilder.type_schema()
        assert schema == TRANSFER_WITH_AUTHORIZATION_TYPES
        assert "EIP712Domain" not in schema
        assert [f["name"] for f in schema["TransferWithAuthorization"]] == [
            "from", "to", "value", "validAfter", "validBefore", "nonce",
        ]

    @pytest.mark.asyncio
    async def test_defaults_to_system_clock(self):
        builder = AuthorizationBuilder(FakeToken(), MOCK_TOKEN_ADDRESS)
        before = int(time.time())
        _, authorization = await build(builder)

        assert before <= authorization.validAfter <= int(time.time())
        assert authorization.validBefore == authorization.validAfter + 3600

    def test_rejects_non_positive_validity(self):
        with pytest.raises(ValueError):
            make_builder(validity_seconds=0)


class TestIntentChecks:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("recipient", ["", "   ", "0xabc", "not-an-address"])
    async def test_invalid_recipient(self, recipient):
        with pytest.raises(InvalidRecipientError):
            await build(make_builder(), recipient=recipient)

    @pytest.mark.asyncio
    async def test_lowercase_recipient_is_checksummed(self):
        _, authorization = await build(make_builder(), recipient=MOCK_RECIPIENT_ADDRESS.lower())
        assert authorization.recipient == MOCK_RECIPIENT_ADDRESS

    @pytest.mark.asyncio
    async def test_over_precise_amount(self):
        with pytest.raises(InvalidAmountError):
            await build(make_builder(), amount="1.0000001")

    @pytest.mark.asyncio
    async def test_validate_intent_returns_value_without_reading_name(self):
        token = FakeToken()
        value = await make_builder(token=token).validate_intent(MOCK_RECIPIENT_ADDRESS, "2.25")

        assert value == 2_250_000
        token.decimals.assert_awaited()
        token.name.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_validate_intent_requires_amount(self):
        with pytest.raises(InvalidAmountError):
            await make_builder().validate_intent(MOCK_RECIPIENT_ADDRESS, "  ")

    @pytest.mark.asyncio
    async def test_unreadable_decimals(self):
        token = FakeToken()
        token.decimals.side_effect = ConnectionError("rpc down")
        with pytest.raises(MetadataUnavailableError, match="decimals"):
            await build(make_builder(token=token))

    @pytest.mark.asyncio
    async def test_unreadable_name(self):
        token = FakeToken()
        token.name.side_effect = ConnectionError("rpc down")
        with pytest.raises(MetadataUnavailableError, match="name"):
            await build(make_builder(token=token))

    @pytest.mark.asyncio
    async def test_invalid_decimals_reported_as_metadata_failure(self):
        with pytest.raises(MetadataUnavailableError):
            await build(make_builder(token=FakeToken(decimals=-1)))
