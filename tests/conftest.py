"""
测试夹具
========

提供一个进程内的TCP监听端：每条连接读到关闭为止，记录收到的全部字节。
"""

import socket
import threading
import time
from typing import List, Tuple

import pytest

from tcp_file_uploader.core.frame_encoder import decode_frame


class FrameServer:
    """记录每条连接收到数据的测试服务器"""

    def __init__(self):
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(128)
        self._sock.settimeout(0.2)

        self._lock = threading.Lock()
        self._stop = threading.Event()
        self.payloads: List[bytes] = []
        self.connections = 0

        self._thread = threading.Thread(target=self._accept_loop, daemon=True)
        self._thread.start()

    @property
    def address(self) -> str:
        host, port = self._sock.getsockname()
        return f"{host}:{port}"

    def _accept_loop(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            with self._lock:
                self.connections += 1
            threading.Thread(target=self._read_all, args=(conn,), daemon=True).start()

    def _read_all(self, conn: socket.socket) -> None:
        chunks = []
        with conn:
            while True:
                data = conn.recv(65536)
                if not data:
                    break
                chunks.append(data)
        with self._lock:
            self.payloads.append(b"".join(chunks))

    def wait_for(self, count: int, timeout: float = 5.0) -> List[bytes]:
        """等待收到 count 条完整连接的数据"""
        deadline = time.time() + timeout
        while time.time() < deadline:
            with self._lock:
                if len(self.payloads) >= count:
                    return list(self.payloads)
            time.sleep(0.01)
        with self._lock:
            return list(self.payloads)

    def frames(self, count: int, timeout: float = 5.0) -> List[Tuple[str, bytes]]:
        """等待并解析 count 个帧"""
        return [decode_frame(data) for data in self.wait_for(count, timeout)]

    def close(self) -> None:
        self._stop.set()
        self._sock.close()
        self._thread.join(timeout=2)


@pytest.fixture
def frame_server():
    server = FrameServer()
    yield server
    server.close()


@pytest.fixture
def closed_address():
    """一个没有监听的本地地址"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    host, port = sock.getsockname()
    sock.close()
    return f"{host}:{port}"
