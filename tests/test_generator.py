"""Integration tests: HdlGenerator generate/explore with a stubbed model client."""

import json
import logging

import pytest

from rtlforge.agents.generator import EXPLORATION_FILENAME, HdlGenerator
from rtlforge.errors import EmptyResponseError, MalformedResponseError, UpstreamError
from rtlforge.schema import FILE_SCHEMA
from rtlforge.state import GenerationRequest


def _request(**overrides):
    fields = {
        "mode": "generate",
        "description": "An 8-bit wide, 32-deep synchronous FIFO.",
        "deliverables": ("rtlCode", "testbench"),
    }
    fields.update(overrides)
    return GenerationRequest(**fields)


# --- generate ---

class TestGenerate:
    def test_counter_end_to_end(self, stub_client, counter_request, rtl_file):
        stub_client.invoke.return_value = json.dumps({"rtlCode": rtl_file})

        result = HdlGenerator(stub_client).generate(counter_request)

        assert result == {"rtlCode": rtl_file}
        stub_client.invoke.assert_called_once()
        prompt = stub_client.invoke.call_args.args[0]
        schema = stub_client.invoke.call_args.kwargs["response_schema"]
        assert counter_request.description in prompt
        assert schema["properties"]["rtlCode"] == FILE_SCHEMA

    def test_null_entries_dropped(self, stub_client, valid_generate_response):
        stub_client.invoke.return_value = valid_generate_response

        result = HdlGenerator(stub_client).generate(_request())

        assert list(result) == ["rtlCode"]

    def test_empty_and_falsy_entries_dropped(self, stub_client, rtl_file):
        stub_client.invoke.return_value = json.dumps(
            {"rtlCode": rtl_file, "testbench": {}, "testPlan": "", "designSpec": 0}
        )
        result = HdlGenerator(stub_client).generate(
            _request(deliverables=("rtlCode", "testbench", "testPlan", "designSpec"))
        )
        assert list(result) == ["rtlCode"]

    def test_unrequested_keys_dropped(self, stub_client, rtl_file):
        stub_client.invoke.return_value = json.dumps({"rtlCode": rtl_file, "lintReport": rtl_file})
        result = HdlGenerator(stub_client).generate(_request(deliverables=("rtlCode",)))
        assert list(result) == ["rtlCode"]

    def test_missing_deliverable_not_synthesized(self, stub_client, rtl_file):
        stub_client.invoke.return_value = json.dumps({"rtlCode": rtl_file})
        result = HdlGenerator(stub_client).generate(_request())
        assert "testbench" not in result

    def test_fenced_json_accepted(self, stub_client, rtl_file):
        stub_client.invoke.return_value = "```json\n" + json.dumps({"rtlCode": rtl_file}) + "\n```"
        result = HdlGenerator(stub_client).generate(_request())
        assert result["rtlCode"]["filename"] == "counter.v"

    def test_markdown_fences_inside_artifact_preserved(self, stub_client):
        spec_code = "# Counter\n\n```verilog\nmodule counter(input clk);\n```\n"
        stub_client.invoke.return_value = json.dumps(
            {"designSpec": {"filename": "spec.md", "language": "Markdown", "code": spec_code}}
        )

        result = HdlGenerator(stub_client).generate(_request(deliverables=("designSpec",)))

        assert result["designSpec"]["code"] == spec_code

    def test_fenced_reply_with_inner_fences_accepted(self, stub_client):
        spec_code = "```verilog\nmodule m; endmodule\n```"
        payload = json.dumps({"designSpec": {"filename": "spec.md", "language": "Markdown", "code": spec_code}})
        stub_client.invoke.return_value = "```json\n" + payload + "\n```"

        result = HdlGenerator(stub_client).generate(_request(deliverables=("designSpec",)))

        assert result["designSpec"]["code"] == spec_code

    def test_thinking_disabled_by_default(self, stub_client, rtl_file):
        stub_client.invoke.return_value = json.dumps({"rtlCode": rtl_file})
        HdlGenerator(stub_client).generate(_request())
        assert stub_client.invoke.call_args.kwargs["thinking_budget"] == 0

    def test_thinking_mode_leaves_budget_unset(self, stub_client, rtl_file):
        stub_client.invoke.return_value = json.dumps({"rtlCode": rtl_file})
        HdlGenerator(stub_client).generate(_request(thinking_mode=True))
        assert stub_client.invoke.call_args.kwargs["thinking_budget"] is None

    @pytest.mark.parametrize("reply", ["", "   \n\t ", None])
    def test_empty_reply_raises(self, stub_client, reply):
        stub_client.invoke.return_value = reply
        with pytest.raises(EmptyResponseError, match="empty response"):
            HdlGenerator(stub_client).generate(_request())

    def test_not_json_raises_malformed(self, stub_client):
        stub_client.invoke.return_value = "{not json"
        with pytest.raises(MalformedResponseError, match="not valid JSON"):
            HdlGenerator(stub_client).generate(_request())

    def test_raw_text_logged_on_malformed(self, stub_client, caplog):
        stub_client.invoke.return_value = "{not json"
        with caplog.at_level(logging.ERROR, logger="rtlforge.agents.generator"):
            with pytest.raises(MalformedResponseError):
                HdlGenerator(stub_client).generate(_request())
        assert "{not json" in caplog.text

    def test_top_level_array_raises_malformed(self, stub_client):
        stub_client.invoke.return_value = "[1, 2, 3]"
        with pytest.raises(MalformedResponseError):
            HdlGenerator(stub_client).generate(_request())

    def test_entry_missing_code_raises_malformed(self, stub_client):
        stub_client.invoke.return_value = json.dumps(
            {"rtlCode": {"filename": "a.v", "language": "Verilog"}}
        )
        with pytest.raises(MalformedResponseError):
            HdlGenerator(stub_client).generate(_request())

    def test_transport_error_wrapped(self, stub_client):
        stub_client.invoke.side_effect = ConnectionError("connection refused")

        with pytest.raises(UpstreamError, match="API Error: connection refused") as exc_info:
            HdlGenerator(stub_client).generate(_request())

        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_upstream_error_without_message(self, stub_client):
        stub_client.invoke.side_effect = RuntimeError()
        with pytest.raises(UpstreamError, match="unknown error"):
            HdlGenerator(stub_client).generate(_request())

    def test_no_retry_on_failure(self, stub_client):
        stub_client.invoke.side_effect = TimeoutError("deadline exceeded")
        with pytest.raises(UpstreamError):
            HdlGenerator(stub_client).generate(_request())
        assert stub_client.invoke.call_count == 1


# --- explore ---

class TestExplore:
    def test_returns_single_markdown_artifact(self, stub_client):
        text = "# Option A\n\nRipple counter.\n\n# Option B\n\nLFSR counter.\n"
        stub_client.invoke.return_value = text

        result = HdlGenerator(stub_client).explore("A 4-bit counter")

        assert list(result) == ["explorationResult"]
        artifact = result["explorationResult"]
        assert artifact["filename"] == EXPLORATION_FILENAME
        assert artifact["language"] == "Markdown"
        assert artifact["code"] == text

    def test_no_schema_sent(self, stub_client):
        stub_client.invoke.return_value = "Some markdown"
        HdlGenerator(stub_client).explore("A 4-bit counter")
        assert stub_client.invoke.call_args.kwargs["response_schema"] is None

    def test_prompt_contains_description(self, stub_client):
        stub_client.invoke.return_value = "Some markdown"
        HdlGenerator(stub_client).explore("A dual-port RAM")
        assert '"A dual-port RAM"' in stub_client.invoke.call_args.args[0]

    def test_thinking_flag_passed(self, stub_client):
        stub_client.invoke.return_value = "Some markdown"
        HdlGenerator(stub_client).explore("A dual-port RAM", thinking_mode=True)
        assert stub_client.invoke.call_args.kwargs["thinking_budget"] is None

    def test_whitespace_reply_raises_empty(self, stub_client):
        stub_client.invoke.return_value = "  \n "
        with pytest.raises(EmptyResponseError):
            HdlGenerator(stub_client).explore("A 4-bit counter")

    def test_upstream_error_wrapped(self, stub_client):
        stub_client.invoke.side_effect = PermissionError("API key not valid")
        with pytest.raises(UpstreamError, match="API key not valid"):
            HdlGenerator(stub_client).explore("A 4-bit counter")
