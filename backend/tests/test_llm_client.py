import asyncio

import pytest

from app.prompts import CONVERSATION_OPENER
from app.services.llm_client import BedrockChatClient, build_converse_params, to_model_messages
from app.storage.schemas import ChatTurn
from conftest import collect


class FakeEventStream:
    def __init__(self, events):
        self.events = events
        self.closed = False

    def __iter__(self):
        return iter(self.events)

    def close(self):
        self.closed = True


class FakeBedrock:
    def __init__(self, events=None, message=None):
        self.stream = FakeEventStream(events or [])
        self.message = message or {"role": "assistant", "content": [{"text": "ok"}]}
        self.calls = []

    def converse_stream(self, **params):
        self.calls.append(params)
        return {"stream": self.stream}

    def converse(self, **params):
        self.calls.append(params)
        return {"output": {"message": self.message}}


def _delta(text):
    return {"contentBlockDelta": {"delta": {"text": text}, "contentBlockIndex": 0}}


def test_to_model_messages_accepts_dicts_and_models():
    out = to_model_messages([
        {"role": "assistant", "content": "a"},
        ChatTurn(role="system", content="s"),
        {"role": None, "content": None},
    ])
    assert out == [
        {"role": "assistant", "content": "a"},
        {"role": "system", "content": "s"},
        {"role": "user", "content": ""},
    ]


def test_converse_params_split_system_and_merge_turns():
    params = build_converse_params(
        [
            {"role": "system", "content": "persona"},
            {"role": "user", "content": "one"},
            {"role": "user", "content": "two"},
            {"role": "assistant", "content": "three"},
        ],
        model_id="m",
        max_tokens=10,
        temperature=0.1,
    )
    assert params["modelId"] == "m"
    assert params["system"] == [{"text": "persona"}]
    assert params["messages"] == [
        {"role": "user", "content": [{"text": "one"}, {"text": "two"}]},
        {"role": "assistant", "content": [{"text": "three"}]},
    ]
    assert params["inferenceConfig"] == {"maxTokens": 10, "temperature": 0.1}


def test_converse_params_system_only_gets_opener():
    params = build_converse_params([{"role": "system", "content": "P"}], "m", 10, 0.1)
    assert params["messages"] == [{"role": "user", "content": [{"text": CONVERSATION_OPENER}]}]


def test_stream_yields_text_deltas_and_closes():
    bedrock = FakeBedrock(events=[
        {"messageStart": {"role": "assistant"}},
        _delta("Hel"),
        _delta("lo"),
        {"contentBlockStop": {"contentBlockIndex": 0}},
        {"messageStop": {"stopReason": "end_turn"}},
    ])
    client = BedrockChatClient(client=bedrock)

    out = asyncio.run(collect(client.stream([{"role": "user", "content": "hi"}], "m")))

    assert out == ["Hel", "lo"]
    assert bedrock.calls[0]["modelId"] == "m"
    assert bedrock.stream.closed


def test_stream_error_event_raises():
    bedrock = FakeBedrock(events=[
        _delta("a"),
        {"throttlingException": {"message": "slow down"}},
    ])
    client = BedrockChatClient(client=bedrock)

    with pytest.raises(RuntimeError, match="slow down"):
        asyncio.run(collect(client.stream([{"role": "user", "content": "hi"}], "m")))
    assert bedrock.stream.closed


def test_invoke_flattens_content_blocks():
    bedrock = FakeBedrock(message={"role": "assistant", "content": [{"text": "a"}, {"text": "b"}]})
    client = BedrockChatClient(client=bedrock)

    result = asyncio.run(client.invoke([{"role": "user", "content": "hi"}], "m", max_tokens=5))

    assert result == {"role": "assistant", "content": "ab"}
    assert bedrock.calls[0]["inferenceConfig"]["maxTokens"] == 5
