"""
Tests for AgentsApiClient and request body construction
"""

import json

import httpx
import pytest

from x402_memeputer.agents import AgentsApiClient, build_request_body
from x402_memeputer.clients import PaymentProofFactory
from x402_memeputer.exceptions import TransportError
from x402_memeputer.wallets import WalletResolver

API = "https://api.example/x402"


class TestBuildRequestBody:
    def test_plain_message(self):
        assert build_request_body("make me a meme") == {"message": "make me a meme"}

    def test_empty_message(self):
        assert build_request_body("") == {}
        assert build_request_body("   ") == {}

    def test_bare_slash_command(self):
        assert build_request_body("/ping") == {"command": "ping"}

    def test_slash_command_with_args_stays_a_message(self):
        assert build_request_body("/pfp --style anime") == {"message": "/pfp --style anime"}

    def test_json_command_only(self):
        assert build_request_body('{"command": "ping"}') == {"command": "ping"}

    def test_json_with_other_fields_is_a_message(self):
        message = '{"command": "pfp", "style": "anime"}'
        assert build_request_body(message) == {"message": message}

    def test_command_endpoint_params(self):
        body = build_request_body("", "describe_image", {"imageUrl": "https://x/img.png"})
        assert body == {"imageUrl": "https://x/img.png"}

    def test_command_endpoint_params_with_message(self):
        body = build_request_body("hello", "keywords", {"topic": "cats"})
        assert body == {"topic": "cats", "message": "hello"}

    def test_params_are_not_mutated(self):
        params = {"topic": "cats"}
        build_request_body("hello", "keywords", params)
        assert params == {"topic": "cats"}


class Recorder:
    def __init__(self, responder):
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request):
        self.requests.append(request)
        return self.responder(request)


@pytest.fixture
def make_api(tmp_path, solana_identity, blockhash_provider):
    def _make(responder, chain="solana"):
        recorder = Recorder(responder)
        http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        api = AgentsApiClient(
            API,
            chain,
            http_client=http,
            wallet_resolver=WalletResolver(
                solana_identity=solana_identity, environ={}, home=tmp_path
            ),
            proof_factory=PaymentProofFactory(blockhash_provider),
        )
        return api, recorder

    return _make


class TestListAgents:
    @pytest.mark.anyio
    async def test_agents_from_resources(self, make_api):
        listing = {
            "accepts": [
                {
                    "maxAmountRequired": "50000",
                    "payTo": "Merchant",
                    "description": "Makes memes",
                    "extra": {
                        "agentId": "memeputer",
                        "agentName": "Memeputer",
                        "category": "Memes",
                        "examplePrompts": ["make a meme"],
                    },
                },
                {"extra": {"agentId": "pfpputer", "pricing": {"amount": 0.1}}},
            ]
        }
        api, recorder = make_api(lambda request: httpx.Response(200, json=listing))

        agents = await api.list_agents()

        assert str(recorder.requests[0].url) == f"{API}/solana/resources"
        assert [a.id for a in agents] == ["memeputer", "pfpputer"]
        assert agents[0].name == "Memeputer"
        assert agents[0].price == pytest.approx(0.05)
        assert agents[0].example_prompts == ["make a meme"]
        assert agents[0].pay_to == "Merchant"
        assert agents[1].price == pytest.approx(0.1)
        assert agents[1].name == "Unknown Agent"

    @pytest.mark.anyio
    async def test_listing_error(self, make_api):
        api, _ = make_api(lambda request: httpx.Response(503, text="down"))
        with pytest.raises(TransportError) as exc_info:
            await api.list_agents()
        assert exc_info.value.status_code == 503


class TestInteract:
    @pytest.mark.anyio
    async def test_prompt_goes_to_agent_route(self, make_api):
        api, recorder = make_api(
            lambda request: httpx.Response(200, json={"success": True, "response": "gm"})
        )

        result = await api.interact("memeputer", "hello")

        request = recorder.requests[0]
        assert str(request.url) == f"{API}/solana/memeputer"
        assert json.loads(request.content) == {"message": "hello"}
        assert result.response == "gm"
        assert result.agent_id == "memeputer"

    @pytest.mark.anyio
    async def test_base_chain_route(self, make_api):
        api, recorder = make_api(lambda request: httpx.Response(200, json={"response": "ok"}), "base")
        await api.interact("memeputer", "hello")
        assert str(recorder.requests[0].url) == f"{API}/base/memeputer"

    @pytest.mark.anyio
    async def test_command_endpoint_pins_paid_retry(self, make_api, solana_recipient):
        quote = {
            "accepts": [
                {
                    "network": "solana",
                    "payTo": solana_recipient,
                    "maxAmountRequired": "10000",
                    "resource": "/x402/solana/imagedescripterputer",
                }
            ]
        }

        def responder(request):
            if "X-PAYMENT" not in request.headers:
                return httpx.Response(402, json=quote)
            return httpx.Response(200, json={"success": True, "response": "a cat"})

        api, recorder = make_api(responder)

        result = await api.interact(
            "imagedescripterputer", "", "describe_image", {"imageUrl": "https://x/cat.png"}
        )

        command_url = f"{API}/solana/imagedescripterputer/describe_image"
        assert [str(r.url) for r in recorder.requests] == [command_url, command_url]
        assert json.loads(recorder.requests[1].content) == {"imageUrl": "https://x/cat.png"}
        assert result.response == "a cat"
        assert result.receipt.amount_paid_atomic == 10000

    @pytest.mark.anyio
    async def test_unknown_agent(self, make_api):
        api, _ = make_api(lambda request: httpx.Response(404, json={"error": "not found"}))

        with pytest.raises(TransportError, match="Agent 'ghost' not found") as exc_info:
            await api.interact("ghost", "hello")

        assert exc_info.value.status_code == 404


class TestStatus:
    @pytest.mark.anyio
    async def test_check_status(self, make_api):
        api, recorder = make_api(lambda request: httpx.Response(200, json={"status": "completed"}))

        status = await api.check_status(f"{API}/jobs/1")

        assert status.is_terminal
        assert recorder.requests[0].method == "GET"
