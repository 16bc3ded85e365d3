"""
Assistant bridge tests. The generation service is stubbed with httpx.MockTransport.
"""

import httpx
import pytest

from pizzadash.services import assistant_service
from pizzadash.services.assistant_service import (
    DISABLED_REPLY,
    FAILURE_REPLY,
    AssistantUnavailableError,
    GenerationClient,
)


def _client(handler):
    return GenerationClient(
        api_key="test-key",
        base_url="https://generation.test/v1beta/",
        model="test-model",
        transport=httpx.MockTransport(handler),
    )


def _reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestGenerationClient:

    def test_posts_prompt_and_reads_first_candidate(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            seen["body"] = request.content.decode()
            return httpx.Response(200, json=_reply("There are 2 orders in preparation."))

        reply = _client(handler).generate("How many orders are being prepared?")

        assert reply == "There are 2 orders in preparation."
        assert seen["url"].path == "/v1beta/models/test-model:generateContent"
        assert seen["url"].params["key"] == "test-key"
        assert "How many orders are being prepared?" in seen["body"]

    def test_http_error_raises(self):
        client = _client(lambda request: httpx.Response(500, json={"error": "boom"}))
        with pytest.raises(AssistantUnavailableError):
            client.generate("hi")

    def test_empty_candidates_raise(self):
        client = _client(lambda request: httpx.Response(200, json={"candidates": []}))
        with pytest.raises(AssistantUnavailableError):
            client.generate("hi")


class TestAsk:

    def test_disabled_without_client(self, store):
        assert assistant_service.ask(None, store, "hello", "staff") == DISABLED_REPLY

    def test_failure_is_logged_and_answered_politely(self, store, caplog):
        client = _client(lambda request: httpx.Response(503))
        before = store.orders

        assert assistant_service.ask(client, store, "hello", "staff") == FAILURE_REPLY
        assert "Assistant request failed" in caplog.text
        assert store.orders == before

    def test_relays_reply(self, store):
        client = _client(lambda request: httpx.Response(200, json=_reply("Hello!")))
        assert assistant_service.ask(client, store, "hello", "administrator") == "Hello!"
        client.close()


class TestBuildPrompt:

    def test_embeds_role_counts_and_command(self, store):
        prompt = assistant_service.build_prompt(
            "Which orders are ready?", "staff", store.orders, store.customers, store,
        )

        assert 'The current user\'s role is: "staff"' in prompt
        assert "Orders: 7" in prompt
        assert "ready: 1" in prompt
        assert "Customers: 4" in prompt
        assert 'User command: "Which orders are ready?"' in prompt
        assert "#1003 | Carlos Pereira | ready" in prompt

    def test_revenue_excludes_cancelled(self, store):
        prompt = assistant_service.build_prompt("x", "staff", store.orders, store.customers, store)
        # 57.50 + 49.90 + 55.90 + 52.00 + 12.00 + 91.00 (order 1007 is cancelled)
        assert "$ 318.30" in prompt
