"""End-to-end CLI runs against the scripted sandbox gateway."""

import httpx

from momocollect.common.config import Settings
from momocollect.services.cli.main import build_parser, main, run
from momocollect.services.sandbox.transport import SandboxGateway

from conftest import ScriptedGateway


def _settings() -> Settings:
    return Settings(_env_file=None, api_key="test-key", poll_max_attempts=5, poll_interval_seconds=0.0)


def _run(argv, transport, sleep, input_fn=None):
    lines: list[str] = []

    def no_input(prompt):
        raise AssertionError(f"unexpected prompt: {prompt}")

    code = run(
        _settings(),
        build_parser().parse_args(argv),
        input_fn=input_fn or no_input,
        out=lines.append,
        sleep=sleep,
        transport=transport,
    )
    return code, "\n".join(lines)


def test_successful_collection(sleep):
    sandbox = SandboxGateway(pending_rounds=2)
    code, output = _run(
        ["--phone", "+237670000001", "--amount", "25", "--description", "rent"],
        sandbox.transport(),
        sleep,
    )
    assert code == 0
    assert "TRANSACTION SUCCESSFUL" in output
    assert "Amount: 25 XAF" in output
    assert len(sleep.calls) == 2


def test_failed_collection_exits_non_zero(sleep):
    code, output = _run(
        ["--phone", "237670000000", "--amount", "25", "--description", "rent"],
        SandboxGateway().transport(),
        sleep,
    )
    assert code == 1
    assert "TRANSACTION FAILED" in output
    assert "insufficient funds" in output


def test_timeout_is_reported_separately_from_failure(sleep):
    code, output = _run(
        ["--phone", "237679999999", "--amount", "25", "--description", "rent", "--max-attempts", "3"],
        SandboxGateway().transport(),
        sleep,
    )
    assert code == 0
    assert "NOT CONFIRMED" in output
    assert "FAILED" not in output
    assert len(sleep.calls) == 2


def test_gateway_rejection_never_polls(sleep):
    sandbox = SandboxGateway()
    code, output = _run(
        ["--phone", "237670000001", "--amount", "5000000", "--description", "car"],
        sandbox.transport(),
        sleep,
    )
    assert code == 1
    assert "rejected" in output
    assert "ER201" in output
    assert sandbox.transactions == {}
    assert sleep.calls == []


def test_invalid_amount_makes_no_network_call(sleep):
    gateway = ScriptedGateway()
    for amount in ["0", "-3", "abc", "NaN"]:
        code, output = _run(
            ["--phone", "237670000001", "--amount", amount, "--description", "rent"],
            httpx.MockTransport(gateway),
            sleep,
        )
        assert code == 2
        assert "Invalid input" in output
    assert gateway.requests == []


def test_prompts_for_missing_values(sleep):
    answers = iter(["237670000001", "10", "groceries"])
    prompts: list[str] = []

    def input_fn(prompt):
        prompts.append(prompt)
        return next(answers)

    code, _ = _run([], SandboxGateway(pending_rounds=0).transport(), sleep, input_fn=input_fn)
    assert code == 0
    assert len(prompts) == 3
    assert "phone number" in prompts[0]


def test_unreachable_gateway_at_initiation(sleep):
    gateway = ScriptedGateway(collect_answer=httpx.ConnectError("no route to host"))
    code, output = _run(
        ["--phone", "237670000001", "--amount", "10", "--description", "rent"],
        httpx.MockTransport(gateway),
        sleep,
    )
    assert code == 1
    assert "no usable answer" in output


def test_main_without_api_key_is_a_usage_error(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("API_KEY", raising=False)
    assert main(["--phone", "237670000001", "--amount", "10", "--description", "rent"]) == 2
    assert "Configuration error" in capsys.readouterr().err


def test_closed_stdin_is_a_usage_error(sleep):
    gateway = ScriptedGateway()

    def closed_stdin(prompt):
        raise EOFError

    code, output = _run([], httpx.MockTransport(gateway), sleep, input_fn=closed_stdin)
    assert code == 2
    assert "no input received" in output
    assert gateway.requests == []


def test_ctrl_c_at_prompt_exits_130(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("METRICS_PORT", raising=False)
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)
    monkeypatch.setattr("momocollect.services.cli.main.configure_logging", lambda *args, **kwargs: None)

    def interrupted(prompt):
        raise KeyboardInterrupt

    monkeypatch.setattr("builtins.input", interrupted)
    assert main(["--sandbox"]) == 130
    assert "Interrupted." in capsys.readouterr().err
