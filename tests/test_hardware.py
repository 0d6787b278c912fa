"""
Tests for GPU/CUDA detection helpers and tool version probes.
"""

import pytest

from swarmprep.core.services.provision.detection.hardware import nvidia_smi, parse_cuda_probe
from swarmprep.core.services.provision.detection.runtime import get_tool_version
from swarmprep.core.services.provision.domain.cuda_compat import check_cuda_driver_compat

from tests.conftest import FakeRunner


class TestParseCudaProbe:
    @pytest.mark.parametrize("stdout, expected", [
        ("True\n", True),
        ("False\n", False),
        ("UserWarning: CUDA initialization failed\n\nFalse\n", False),
        ("", None),
        ("maybe\n", None),
    ])
    def test_last_line_decides(self, stdout, expected):
        assert parse_cuda_probe(stdout) is expected


class TestCudaDriverCompat:
    def test_new_enough_driver(self):
        assert check_cuda_driver_compat("12.1", "535.183")["compatible"] is True

    def test_old_driver(self):
        result = check_cuda_driver_compat("12.1", "525.60")
        assert result["compatible"] is False
        assert result["min_driver"] == "530.30"
        assert "requires driver >= 530.30" in result["message"]

    def test_patch_level_ignored(self):
        assert check_cuda_driver_compat("12.1.1", "530.30.02")["compatible"] is True

    def test_unknown_cuda_line(self):
        result = check_cuda_driver_compat("9.0", "384.81")
        assert result["compatible"] is True
        assert result["unknown_cuda"] == "9.0"

    def test_unparseable_driver(self):
        assert check_cuda_driver_compat("12.1", "n/a")["compatible"] is True


class TestAbsentTools:
    def test_no_nvidia_smi(self):
        assert nvidia_smi(which=lambda name: None) is None

    def test_missing_tool_has_no_version(self):
        assert get_tool_version("node", which=lambda name: None) is None

    def test_unknown_tool(self):
        assert get_tool_version("cargo") is None


class TestNvidiaSmi:
    def _which(self, name):
        return "/usr/bin/nvidia-smi" if name == "nvidia-smi" else None

    def test_parses_driver_model_and_cuda(self):
        runner = FakeRunner()
        runner.set_response("--query-gpu", stdout="535.183.01, Tesla T4\n")
        runner.set_response("nvidia-smi", stdout="| NVIDIA-SMI 535.183.01   CUDA Version: 12.2 |\n")
        gpu = nvidia_smi(which=self._which, runner=runner)
        assert gpu == {"driver_version": "535.183.01", "model": "Tesla T4", "cuda_version": "12.2"}
        assert runner.commands()[0] == (
            "nvidia-smi --query-gpu=driver_version,name --format=csv,noheader,nounits"
        )
        assert all(c["timeout"] == 5 for c in runner.calls)

    def test_query_failure(self):
        runner = FakeRunner()
        runner.set_failure("--query-gpu", stderr="NVIDIA-SMI has failed")
        assert nvidia_smi(which=self._which, runner=runner) is None
        assert runner.call_count == 1
