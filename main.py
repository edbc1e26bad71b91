#!/usr/bin/env python3
"""
TCP文件上传工具 - 主程序入口
============================

不安装直接从源码目录运行。

使用方法：
    python main.py --path /tmp/filename.pdf
    python main.py --server localhost:4040 --path /tmp --monitor true
    python main.py --help
"""

import sys
from pathlib import Path

# 添加src路径到Python路径
sys.path.insert(0, str(Path(__file__).parent / "src"))

from tcp_file_uploader.__main__ import main


if __name__ == "__main__":
    main()
