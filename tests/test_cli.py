"""
Tests for the command-line entry point: one JSON document on stdout, exit code
reflecting whether anything usable came back.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from job_retriever import cli
from job_retriever.pipeline.schema import minimal_job_data, validate_job_data

JOB_URL = "https://jobs.example/123"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    for name in ("JOB_URL", "RETRIEVER_TRANSPORT", "LIGHTPANDA_WS", "LIGHTPANDA_TOKEN", "LIGHTPANDA_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    with patch("job_retriever.cli.load_dotenv"):
        yield


def run_with(result=None, error=None):
    retriever = MagicMock()
    retriever.retrieve = AsyncMock(return_value=result, side_effect=error)
    with patch("job_retriever.cli.JobRetriever", return_value=retriever) as factory:
        code = cli.main(["--job-url", JOB_URL])
    return code, factory


def test_missing_job_url(capsys):
    assert cli.main([]) == 1
    output = json.loads(capsys.readouterr().out)
    assert output["metadata"]["notes"] == ["JOB_URL environment variable or --job-url argument is required"]
    assert output["job"]["title"] == ""


def test_success(capsys):
    data = validate_job_data({"job": {"title": "Backend Engineer", "source_url": JOB_URL}})
    code, factory = run_with(result=data)

    assert code == 0
    config = factory.call_args.args[0]
    assert config.job_url == JOB_URL
    output = json.loads(capsys.readouterr().out)
    assert output["job"]["title"] == "Backend Engineer"
    assert set(output) == {"job", "company", "metadata"}


def test_nothing_extracted(capsys):
    code, _ = run_with(result=minimal_job_data(JOB_URL, ["Error during extraction: boom"]))

    assert code == 1
    output = json.loads(capsys.readouterr().out)
    assert output["job"]["source_url"] == JOB_URL
    assert output["metadata"]["notes"] == ["Error during extraction: boom"]


def test_critical_error(capsys):
    code, _ = run_with(error=RuntimeError("event loop died"))

    assert code == 1
    output = json.loads(capsys.readouterr().out)
    assert output["metadata"]["notes"] == ["Critical error: event loop died"]


def test_transport_flag(capsys):
    data = validate_job_data({"job": {"title": "Backend Engineer"}})
    retriever = MagicMock()
    retriever.retrieve = AsyncMock(return_value=data)
    with patch("job_retriever.cli.JobRetriever", return_value=retriever) as factory:
        cli.main(["--job-url", JOB_URL, "--transport", "gateway"])

    # gateway without a key never reaches the retriever
    factory.assert_not_called()
    output = json.loads(capsys.readouterr().out)
    assert "LIGHTPANDA_API_KEY" in output["metadata"]["notes"][0]
