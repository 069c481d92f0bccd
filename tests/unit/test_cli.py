"""
Unit tests for the command-line entry point.
"""

import socket

import pytest

from assetserver.__main__ import build_parser, main
from assetserver.config import ServerConfig


class TestBuildParser:
    """Tests for argument parsing."""

    def test_defaults_from_config(self):
        args = build_parser(ServerConfig(port=9999, static_dir="/srv")).parse_args([])
        assert args.port == 9999
        assert args.static == "/srv"
        assert args.route is None
        assert args.log_level == "INFO"

    def test_flags(self):
        args = build_parser(ServerConfig()).parse_args([
            "-H", "0.0.0.0",
            "-p", "3000",
            "-s", "./public",
            "--route", "/=home.html",
            "--route", "/a.mp3=a.mp3",
            "--compression-level", "6",
            "--log-level", "debug",
            "--log-format", "json",
        ])
        assert args.host == "0.0.0.0"
        assert args.port == 3000
        assert args.static == "./public"
        assert args.route == ["/=home.html", "/a.mp3=a.mp3"]
        assert args.compression_level == 6
        assert args.log_level == "DEBUG"
        assert args.log_format == "json"

    def test_compression_level_range(self):
        with pytest.raises(SystemExit):
            build_parser(ServerConfig()).parse_args(["--compression-level", "11"])


class TestMain:
    """Tests for main()."""

    def test_bad_route_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--route", "no-equals-sign"])
        assert exc_info.value.code == 2
        assert "Invalid route" in capsys.readouterr().err

    def test_duplicate_route_exits(self):
        with pytest.raises(SystemExit):
            main(["--route", "/=a.html", "--route", "/=b.html"])

    def test_bind_failure_is_fatal(self, tmp_path, capsys):
        """Test a port already in use makes main() return 1."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            blocker.listen(1)
            port = blocker.getsockname()[1]

            code = main(["--port", str(port), "--static", str(tmp_path), "--log-level", "ERROR"])

        assert code == 1
        assert "cannot listen" in capsys.readouterr().err
