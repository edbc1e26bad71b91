#!/usr/bin/env python3
"""
TCP文件上传工具 - 模块CLI入口
=============================

支持通过 python -m tcp_file_uploader 调用
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from .config.constants import DEFAULT_SERVER, FRAME_MODES, FRAME_MODE_STREAM
from .config.settings import ServerConfig, TransferConfig
from .exceptions import ConfigError, UploadError
from .transfer.dispatcher import UploadDispatcher
from .utils.logger import configure_all, get_logger, printable
from .watch.watch_bridge import WatchBridge

logger = get_logger(__name__)

# 版本信息
VERSION = "1.0.0"
PROGRAM_NAME = "TCP文件上传工具"

EXIT_FAILURE = 1


def str2bool(value: str) -> bool:
    """解析 true/false 形式的命令行参数"""
    text = value.strip().lower()
    if text in ("1", "t", "true", "y", "yes", "on"):
        return True
    if text in ("0", "f", "false", "n", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"无效的布尔值: {value!r}")


def create_parser() -> argparse.ArgumentParser:
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        prog="tcp-file-upload",
        description=f"{PROGRAM_NAME} v{VERSION}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用示例：
  # 发送单个文件
  tcp-file-upload --server localhost:4040 --path /tmp/filename.pdf

  # 发送整个目录，并持续监控新建的文件
  tcp-file-upload --server localhost:4040 --path /tmp --monitor
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"{PROGRAM_NAME} v{VERSION}"
    )
    parser.add_argument(
        "--server", default=DEFAULT_SERVER,
        help=f"服务器地址，如 localhost:4040（默认{DEFAULT_SERVER}）",
    )
    parser.add_argument(
        "--path", required=True,
        help="要上传的文件或目录，如 /tmp/filename.pdf 或 /tmp",
    )
    parser.add_argument(
        "--monitor", type=str2bool, nargs="?", const=True, default=False,
        help="上传完成后继续监控目录中新建的文件，如 --monitor true",
    )
    parser.add_argument(
        "--max-concurrency", type=int, default=None,
        help="同时运行的上传任务上限（默认不限制）",
    )
    parser.add_argument(
        "--frame-mode", choices=FRAME_MODES, default=FRAME_MODE_STREAM,
        help="帧格式（默认stream，以连接关闭作为文件结束）",
    )
    parser.add_argument(
        "--write-timeout", type=float, default=None,
        help="写入超时时间(秒)，默认一直阻塞",
    )
    parser.add_argument("--verbose", action="store_true", help="输出调试日志")
    parser.add_argument("--log-file", default=None, help="同时写入日志文件")

    return parser


def load_configs(args: argparse.Namespace) -> Tuple[ServerConfig, TransferConfig]:
    """
    根据命令行参数创建配置

    Raises:
        ConfigError: 参数无效
    """
    try:
        server_config = ServerConfig(args.server, write_timeout=args.write_timeout)
        transfer_config = TransferConfig(
            max_concurrency=args.max_concurrency,
            frame_mode=args.frame_mode,
        )
    except ValueError as e:
        raise ConfigError(f"参数错误: {e}") from e
    return server_config, transfer_config


def run(args: argparse.Namespace) -> None:
    """
    执行上传，失败时抛出异常

    Args:
        args: 解析后的命令行参数
    """
    server_config, transfer_config = load_configs(args)
    dispatcher = UploadDispatcher(server_config, transfer_config)

    dispatcher.upload(args.path)

    if args.monitor:
        WatchBridge(dispatcher, args.path).run()


def fatal(message: str) -> None:
    """打印致命错误并退出"""
    logger.error(message)
    sys.stderr.write(f"Fatal error: {printable(message)}\n")
    sys.stderr.flush()
    sys.exit(EXIT_FAILURE)


def main(argv: Optional[List[str]] = None) -> None:
    """主函数"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose or args.log_file:
        configure_all(
            level=logging.DEBUG if args.verbose else logging.INFO,
            log_file=args.log_file,
        )

    try:
        run(args)
    except KeyboardInterrupt:
        print("\n用户中断程序，退出")
        sys.exit(EXIT_FAILURE)
    except UploadError as e:
        fatal(str(e))
    except Exception as e:
        logger.exception("程序异常")
        fatal(f"程序异常: {e}")


if __name__ == "__main__":
    main()
