#!/usr/bin/env python3
"""
目录监控示例
============

先上传目录中已有的文件，然后监控目录，新建的文件自动上传。
按 Ctrl+C 退出。
"""

import sys
from pathlib import Path

# 添加src路径到Python路径
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tcp_file_uploader import ServerConfig, UploadDispatcher, WatchBridge


def main():
    """主函数"""
    folder = sys.argv[1] if len(sys.argv) > 1 else "."
    server = sys.argv[2] if len(sys.argv) > 2 else "localhost:4040"

    dispatcher = UploadDispatcher(ServerConfig(server))
    dispatcher.upload(folder)

    print(f"开始监控 {folder}，按 Ctrl+C 退出")
    try:
        WatchBridge(dispatcher, folder).run()
    except KeyboardInterrupt:
        print("\n用户中断，停止监控")


if __name__ == "__main__":
    main()
