"""
Integration tests against the live 360ksiegowosc service.

Skipped unless KSIEGOWOSC_API_ID and KSIEGOWOSC_API_KEY are set.
"""

import os

import pytest

from ksiegowosc_client import Ksiegowosc360Client, CancellationToken, APIError
from ksiegowosc_client.constants import ENV_API_ID, ENV_API_KEY

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not (os.environ.get(ENV_API_ID) and os.environ.get(ENV_API_KEY)),
        reason=f"{ENV_API_ID} and {ENV_API_KEY} are required"
    ),
]


class TestIntegration:
    """Integration tests with the live service."""

    @pytest.fixture(scope="class")
    def client(self):
        """Create authenticated client from the environment."""
        client = Ksiegowosc360Client.from_env(timeout=30)
        yield client
        client.close()

    def test_list_customers(self, client):
        customers = client.get_customers({}, CancellationToken())

        assert isinstance(customers, list)
        for customer in customers:
            assert customer["CustomerId"], "`customer.CustomerId` is required"

    def test_list_taxes(self, client):
        taxes = client.get_taxes({}, CancellationToken())

        assert isinstance(taxes, list), "taxes is array"
        for tax in taxes:
            assert isinstance(tax["Id"], str), "`tax.Id` is required"
            assert isinstance(tax["Code"], str), "`tax.Code` is required"
            assert isinstance(tax["NonActive"], bool), "`tax.NonActive` is required"

    def test_list_banks(self, client):
        banks = client.get_banks()

        assert isinstance(banks, list)

    def test_wrong_key_rejected(self, client):
        bad_client = Ksiegowosc360Client(client.api_id, "wrong-key", base_url=client.base_url)

        with pytest.raises(APIError) as exc:
            bad_client.get_taxes()
        bad_client.close()

        assert exc.value.status >= 400
