#!/usr/bin/env python3
"""
文件上传示例
============

演示如何在代码中上传文件或文件夹。
自动检测路径类型：
- 如果是文件，则发送单个文件
- 如果是文件夹，则递归发送文件夹中的所有文件
"""

import sys
from pathlib import Path

# 添加src路径到Python路径
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tcp_file_uploader import ServerConfig, TransferConfig, UploadDispatcher
from tcp_file_uploader.exceptions import UploadError


def main():
    """主函数"""
    if len(sys.argv) < 2:
        print("用法: python send_example.py <文件或文件夹> [host:port]")
        return

    path = sys.argv[1]
    server = sys.argv[2] if len(sys.argv) > 2 else "localhost:4040"

    dispatcher = UploadDispatcher(ServerConfig(server), TransferConfig(max_concurrency=8))
    try:
        dispatcher.upload(path)
        print(f"\n✅ 发送完成！共 {dispatcher.uploader.files_sent} 个文件")
    except UploadError as e:
        print(f"\n❌ 发送失败: {e}")


if __name__ == "__main__":
    main()
