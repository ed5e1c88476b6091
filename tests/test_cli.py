import io
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from byexample.hit.cli import (
    Config,
    Env,
    main,
    parse_args,
    positive_int,
    run,
    run_hit,
    validate_args,
)


def _test_run(*args):
    env = Env(stdout=io.StringIO(), stderr=io.StringIO(), args=["hit", *args], dry=True)
    return env, run


@pytest.fixture
def server_url():
    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            self.send_response(200)
            self.send_header("Content-Length", "2")
            self.end_headers()
            self.wfile.write(b"ok")

        def log_message(self, format, *args):
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}/"
    server.shutdown()
    server.server_close()


def test_parse_args_all_flags():
    got = Config()
    parse_args(got, ["-n=10", "-c=5", "-rps=5", "http://test"], io.StringIO())
    assert got == Config(n=10, c=5, rps=5, url="http://test")


@pytest.mark.parametrize(
    "args",
    [
        ["-n=ONE", "http://test"],
        ["-n=0", "http://test"],
        ["-n=-1", "http://test"],
    ],
    ids=["n_syntax", "n_zero", "n_negative"],
)
def test_parse_args_invalid_input(args):
    with pytest.raises(ValueError):
        parse_args(Config(), args, io.StringIO())


def test_parse_args_separate_value_and_stops_at_positional():
    got = Config()
    parse_args(got, ["-n", "10", "http://test", "-c=3"], io.StringIO())
    assert got == Config(n=10, url="http://test")


def test_parse_args_unknown_flag_reported():
    stderr = io.StringIO()
    with pytest.raises(ValueError):
        parse_args(Config(), ["-x=1", "http://test"], stderr)
    assert "flag provided but not defined: -x" in stderr.getvalue()
    assert "usage: hit [options] url" in stderr.getvalue()


def test_parse_args_missing_flag_value():
    stderr = io.StringIO()
    with pytest.raises(ValueError):
        parse_args(Config(), ["-n"], stderr)
    assert "flag needs an argument: -n" in stderr.getvalue()


def test_parse_args_help_shows_defaults():
    stderr = io.StringIO()
    with pytest.raises(ValueError):
        parse_args(Config(n=100, c=1), ["-h"], stderr)
    out = stderr.getvalue()
    assert "(default 100)" in out
    assert "Requests per second" in out


def test_parse_args_invalid_value_message():
    stderr = io.StringIO()
    with pytest.raises(ValueError, match="should be greater than zero"):
        parse_args(Config(), ["-n=0", "http://test"], stderr)
    assert 'invalid value "0" for flag -n' in stderr.getvalue()


def test_positive_int_prefixes():
    assert positive_int("0x10") == 16
    assert positive_int("010") == 8
    assert positive_int("1_000") == 1000


@pytest.mark.parametrize("value", ["0", "-5", "abc", "", " 1"])
def test_positive_int_rejects(value):
    with pytest.raises(ValueError):
        positive_int(value)


def test_validate_args_n_less_than_c():
    with pytest.raises(ValueError, match='should be greater than -c: "2"'):
        validate_args(Config(url="http://test", n=1, c=2))


def test_validate_args_requires_url():
    with pytest.raises(ValueError, match="requires a valid url"):
        validate_args(Config(url="invalid-url", n=1, c=1))


def test_run_valid_input():
    env, runner = _test_run("http://go.dev")
    runner(env)
    assert len(env.stdout.getvalue()) > 0
    assert 'Sending 100 requests to "http://go.dev" (concurrency: 1)' in env.stdout.getvalue()
    assert env.stderr.getvalue() == ""


def test_run_invalid_input():
    env, runner = _test_run("-c=2", "-n=1", "invalid-url")
    with pytest.raises(ValueError):
        runner(env)
    assert len(env.stderr.getvalue()) > 0


def test_run_sends_requests(server_url):
    env = Env(
        stdout=io.StringIO(),
        stderr=io.StringIO(),
        args=["hit", "-n=3", "-c=1", server_url],
    )
    run(env)
    out = env.stdout.getvalue()
    assert "Sending 3 requests" in out
    assert "Requests   : 3" in out
    assert "Errors     : 0" in out
    assert "Bytes      : 6" in out
    assert env.stderr.getvalue() == ""


def test_run_hit_prints_summary(server_url):
    env = Env(stdout=io.StringIO(), stderr=io.StringIO())
    run_hit(env, Config(url=server_url, n=2, c=2))
    assert "Success    : 100%" in env.stdout.getvalue()
    assert "Requests   : 2" in env.stdout.getvalue()


def test_main_invalid_exit_status(capsys):
    assert main(["-n=0", "http://test"]) == 1
    assert "should be greater than zero" in capsys.readouterr().err