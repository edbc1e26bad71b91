#!/usr/bin/env python3
"""
命令行入口测试
==============

测试 python -m tcp_file_uploader 的参数解析和退出行为。
"""

from unittest.mock import patch

import pytest

from tcp_file_uploader.__main__ import create_parser, main, str2bool


class TestCreateParser:
    """命令行参数解析测试"""

    def test_defaults(self):
        args = create_parser().parse_args(["--path", "/tmp"])

        assert args.server == "localhost:4040"
        assert args.path == "/tmp"
        assert args.monitor is False
        assert args.max_concurrency is None
        assert args.frame_mode == "stream"

    def test_path_required(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args([])
        assert exc_info.value.code == 2
        assert "--path" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "argv,expected",
        [
            (["--monitor"], True),
            (["--monitor", "true"], True),
            (["--monitor=true"], True),
            (["--monitor", "false"], False),
            ([], False),
        ],
    )
    def test_monitor_flag(self, argv, expected):
        args = create_parser().parse_args(["--path", "/tmp"] + argv)
        assert args.monitor is expected

    def test_invalid_bool(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--path", "/tmp", "--monitor", "maybe"])

    def test_str2bool(self):
        assert str2bool("Yes") is True
        assert str2bool("0") is False

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "1.0.0" in capsys.readouterr().out


class TestMain:
    """主函数测试"""

    def test_upload_single_file(self, tmp_path, frame_server):
        path = tmp_path / "single.txt"
        path.write_bytes(b"hello")

        main(["--server", frame_server.address, "--path", str(path)])

        assert frame_server.wait_for(1) == [b"\x0a\x00single.txthello"]

    def test_empty_directory_exits_zero(self, tmp_path, frame_server):
        main(["--server", frame_server.address, "--path", str(tmp_path)])

        assert frame_server.connections == 0

    def test_connect_failure_exits_nonzero(self, tmp_path, closed_address, capsys):
        path = tmp_path / "single.txt"
        path.write_bytes(b"hello")

        with pytest.raises(SystemExit) as exc_info:
            main(["--server", closed_address, "--path", str(path)])

        assert exc_info.value.code == 1
        assert "Fatal error:" in capsys.readouterr().err

    def test_missing_path_exits_nonzero(self, tmp_path, frame_server, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--server", frame_server.address, "--path", str(tmp_path / "nope")])

        assert exc_info.value.code == 1
        assert "无法访问路径" in capsys.readouterr().err
        assert frame_server.connections == 0

    def test_invalid_server_exits_nonzero(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--server", "no-port", "--path", str(tmp_path)])

        assert exc_info.value.code == 1
        assert "参数错误" in capsys.readouterr().err

    def test_invalid_concurrency_exits_nonzero(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--path", str(tmp_path), "--max-concurrency", "0"])

        assert exc_info.value.code == 1
        assert "参数错误" in capsys.readouterr().err

    def test_runtime_value_error_not_reported_as_argument_error(self, tmp_path, capsys):
        """上传过程中的 ValueError 不会被当作参数错误"""
        with patch(
            "tcp_file_uploader.__main__.UploadDispatcher.upload",
            side_effect=ValueError("bad value"),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main(["--path", str(tmp_path)])

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Fatal error: 程序异常: bad value" in err
        assert "参数错误" not in err

    def test_monitor_starts_after_upload(self, tmp_path, frame_server):
        (tmp_path / "a.txt").write_bytes(b"a")

        with patch("tcp_file_uploader.__main__.WatchBridge") as mock_bridge_class:
            main(["--server", frame_server.address, "--path", str(tmp_path), "--monitor"])

        dispatcher, watched = mock_bridge_class.call_args.args
        assert watched == str(tmp_path)
        assert dispatcher.uploader.files_sent == 1
        mock_bridge_class.return_value.run.assert_called_once()

    def test_no_monitor_by_default(self, tmp_path, frame_server):
        with patch("tcp_file_uploader.__main__.WatchBridge") as mock_bridge_class:
            main(["--server", frame_server.address, "--path", str(tmp_path)])

        mock_bridge_class.assert_not_called()

    def test_keyboard_interrupt(self, tmp_path):
        with patch("tcp_file_uploader.__main__.run", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                main(["--path", str(tmp_path)])
        assert exc_info.value.code == 1
