# Print job capture for ESC/POS Decoder
# Receives one ESC/POS job from a raw TCP printer port (9100) or a serial port

import logging
import socket
from typing import Callable, Optional

import serial

from .errors import SourceUnavailable

logger = logging.getLogger(__name__)

CUT_SEQUENCE = b'\x1d\x56'  # GS V
DEFAULT_PORT = 9100
DEFAULT_IDLE_TIMEOUT = 2.0
DEFAULT_MAX_BYTES = 1024 * 1024
CHUNK_SIZE = 4096

# Returns the next chunk, b'' when the peer closed, None on idle timeout
ChunkReader = Callable[[], Optional[bytes]]


class PrintJobCapture:
    """Captures a single print job the way a printer would receive it"""

    def __init__(self, idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
                 max_bytes: int = DEFAULT_MAX_BYTES,
                 accept_timeout: Optional[float] = None):
        self.idle_timeout = idle_timeout
        self.max_bytes = max_bytes
        self.accept_timeout = accept_timeout

    def collect(self, read_chunk: ChunkReader) -> bytes:
        """
        Accumulate chunks until the job is over: the sender closes,
        the line goes idle (after a cut or after any data), or max_bytes is hit.
        """
        buffer = b''
        while len(buffer) < self.max_bytes:
            chunk = read_chunk()
            if chunk is None:
                if buffer:
                    if CUT_SEQUENCE in buffer:
                        logger.debug("Idle after cut, job complete")
                    else:
                        logger.debug("Idle with %d bytes buffered, job complete", len(buffer))
                    break
                continue
            if not chunk:
                logger.debug("Sender closed the connection")
                break
            buffer += chunk

        if len(buffer) >= self.max_bytes:
            logger.warning("Job truncated at %d bytes", self.max_bytes)
            buffer = buffer[:self.max_bytes]

        logger.info("Captured print job of %d bytes", len(buffer))
        return buffer

    def capture_network(self, host: str = '0.0.0.0', port: int = DEFAULT_PORT) -> bytes:
        """Listen on host:port, accept one client and return its job"""
        try:
            server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server.bind((host, port))
            server.listen(1)
        except OSError as e:
            raise SourceUnavailable(f"Cannot listen on {host}:{port}: {e}") from e

        logger.info("Waiting for a print job on %s:%s", host, port)
        try:
            server.settimeout(self.accept_timeout)
            try:
                conn, addr = server.accept()
            except socket.timeout as e:
                raise SourceUnavailable(f"No print job received on {host}:{port}") from e
            logger.info("Connection from %s", addr)

            with conn:
                conn.settimeout(self.idle_timeout)

                def read_chunk():
                    try:
                        return conn.recv(CHUNK_SIZE)
                    except socket.timeout:
                        return None
                    except (ConnectionResetError, BrokenPipeError) as e:
                        logger.warning("Connection lost: %s", e)
                        return b''

                return self.collect(read_chunk)
        except SourceUnavailable:
            raise
        except OSError as e:
            raise SourceUnavailable(f"Network capture failed: {e}") from e
        finally:
            server.close()

    def capture_serial(self, port: str, baudrate: int = 9600) -> bytes:
        """Read one job from a serial port (pyserial)"""
        try:
            ser = serial.Serial(port, baudrate, timeout=self.idle_timeout)
        except serial.SerialException as e:
            raise SourceUnavailable(f"Cannot open serial port {port}: {e}") from e

        logger.info("Serial port %s opened at %d baud", port, baudrate)

        def read_chunk():
            # A serial line never closes; an empty read is an idle timeout
            data = ser.read(CHUNK_SIZE)
            return data or None

        try:
            return self.collect(read_chunk)
        except serial.SerialException as e:
            raise SourceUnavailable(f"Serial read failed on {port}: {e}") from e
        finally:
            ser.close()
