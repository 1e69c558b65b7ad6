"""Unit tests for the registry HTTP client (requests is mocked)."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from registry_client import AsyncRegistryClient, RegistryAPIError, RegistryClient


def _response(body, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    response.text = str(body)
    return response


@pytest.fixture
def client():
    return RegistryClient(base_url="http://registry.test/api/", token="secret", timeout=5)


class TestRequests:

    def test_create_business_posts_payload(self, client):
        with patch("registry_client.requests.request") as mock_request:
            mock_request.return_value = _response({"success": True, "message": "ok", "data": {"businessid_": "B1"}})

            data = client.create_business({"businessname_": "Acme"})

        assert data == {"businessid_": "B1"}
        method, url = mock_request.call_args.args
        assert method == "POST"
        assert url == "http://registry.test/api/Business"
        kwargs = mock_request.call_args.kwargs
        assert kwargs["json"] == {"businessname_": "Acme"}
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["timeout"] == 5

    def test_update_business(self, client):
        with patch("registry_client.requests.request") as mock_request:
            mock_request.return_value = _response({"success": True, "data": None})
            client.update_business("B7", {})
        assert mock_request.call_args.args == ("PUT", "http://registry.test/api/Business/B7")

    def test_get_business_details(self, client):
        with patch("registry_client.requests.request") as mock_request:
            mock_request.return_value = _response({"success": True, "data": {"businessname_": "Acme"}})
            data = client.get_business_details("B7")
        assert data == {"businessname_": "Acme"}
        assert mock_request.call_args.args == ("GET", "http://registry.test/api/Business/B7/details")

    def test_unenveloped_body_is_returned_as_is(self, client):
        with patch("registry_client.requests.request") as mock_request:
            mock_request.return_value = _response({"businessname_": "Acme"})
            assert client.get_business_details("B7") == {"businessname_": "Acme"}

    def test_lookup_options(self, client):
        with patch("registry_client.requests.request") as mock_request:
            mock_request.return_value = _response({"success": True, "data": ["Single", "Married"]})
            assert client.get_lookup_options("civilstatus") == ["Single", "Married"]
            mock_request.return_value = _response({"success": True, "data": None})
            assert client.get_lookup_options("civilstatus") == []

    def test_no_token_no_auth_header(self):
        client = RegistryClient(base_url="http://registry.test/api", token="")
        assert "Authorization" not in client._get_headers()


class TestErrors:

    def test_success_false_carries_server_message(self, client):
        with patch("registry_client.requests.request") as mock_request:
            mock_request.return_value = _response({"success": False, "message": "Invalid TIN"})
            with pytest.raises(RegistryAPIError) as exc:
                client.create_business({})
        assert exc.value.server_message == "Invalid TIN"
        assert exc.value.message == "Invalid TIN"

    def test_http_error_with_message_body(self, client):
        failed = _response({"success": False, "message": "Duplicate business name"}, status_code=409)
        failed.raise_for_status.side_effect = requests.exceptions.HTTPError("409 Conflict", response=failed)
        with patch("registry_client.requests.request", return_value=failed):
            with pytest.raises(RegistryAPIError) as exc:
                client.create_business({})
        assert exc.value.status_code == 409
        assert exc.value.server_message == "Duplicate business name"

    def test_connection_error(self, client):
        with patch("registry_client.requests.request",
                   side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(RegistryAPIError) as exc:
                client.create_business({})
        assert exc.value.server_message is None
        assert exc.value.status_code is None
        assert "refused" in exc.value.message

    def test_non_json_body(self, client):
        response = _response(None)
        response.json.side_effect = ValueError("no json")
        with patch("registry_client.requests.request", return_value=response):
            with pytest.raises(RegistryAPIError):
                client.get_business_details("B7")


class TestAsyncClient:

    @pytest.mark.asyncio
    async def test_delegates_to_sync_client(self):
        sync = MagicMock()
        sync.create_business.return_value = {"businessid_": "B1"}
        sync.get_lookup_options.return_value = ["Male", "Female"]
        client = AsyncRegistryClient(sync)

        assert await client.create_business({"a": 1}) == {"businessid_": "B1"}
        assert await client.get_lookup_options("gender") == ["Male", "Female"]
        sync.create_business.assert_called_once_with({"a": 1})

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        sync = MagicMock()
        sync.update_business.side_effect = RegistryAPIError("boom", status_code=500)
        with pytest.raises(RegistryAPIError):
            await AsyncRegistryClient(sync).update_business("B7", {})
