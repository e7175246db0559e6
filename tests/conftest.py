"""Shared fixtures for the RTL Forge test suite."""

import json
from unittest.mock import MagicMock, patch

import pytest

from rtlforge.state import GenerationRequest

COUNTER_DESCRIPTION = "Design a 4-bit synchronous up-counter with an active-high reset."


@pytest.fixture
def counter_request():
    """Generate-mode request for the counter example, RTL only."""
    return GenerationRequest(
        mode="generate",
        description=COUNTER_DESCRIPTION,
        hdl_language="Verilog",
        deliverables=("rtlCode",),
    )


@pytest.fixture
def rtl_file():
    return {
        "filename": "counter.v",
        "language": "Verilog",
        "code": "module counter(input clk, input rst, output reg [3:0] q);\nendmodule\n",
    }


@pytest.fixture
def valid_generate_response(rtl_file):
    """Model reply for rtlCode + testbench with testbench left null."""
    return json.dumps({"rtlCode": rtl_file, "testbench": None})


@pytest.fixture
def stub_client():
    """Model client whose invoke() returns whatever the test sets."""
    client = MagicMock()
    client.invoke.return_value = ""
    return client


@pytest.fixture
def mock_config(tmp_path):
    """Patch the config singleton with test-friendly values."""
    test_config = {
        "model": "gemini-2.5-flash",
        "temperature": 0.2,
        "state_path": str(tmp_path / "state.json"),
        "state_key": "rtlForgeAppState",
        "output_dir": str(tmp_path / "output"),
        "loading_interval_seconds": 0.01,
        "defaults": {
            "description": COUNTER_DESCRIPTION,
            "hdl_language": "Verilog",
            "protocol": "None",
            "architecture": "None",
            "simulation_tool": "ModelSim",
            "thinking_mode": False,
            "operation_mode": "generate",
        },
    }
    with patch("rtlforge.config._config", test_config):
        yield test_config
