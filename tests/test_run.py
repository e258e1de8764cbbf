from unittest.mock import patch

import run


def test_parse_args_defaults():
    args = run.parse_args([])
    assert args.port == run.settings.port
    assert args.host == run.settings.host
    assert args.log_level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def test_parse_args_overrides():
    args = run.parse_args(["--port", "4000", "--host", "127.0.0.1", "--log-level", "DEBUG"])
    assert args.port == 4000
    assert args.host == "127.0.0.1"
    assert args.log_level == "DEBUG"


def test_main_starts_uvicorn():
    with patch("run.uvicorn.run") as mock_run, patch("sys.argv", ["run.py", "--port", "4100"]):
        run.main()

    mock_run.assert_called_once()
    assert mock_run.call_args.args[0] is run.app
    assert mock_run.call_args.kwargs["port"] == 4100
