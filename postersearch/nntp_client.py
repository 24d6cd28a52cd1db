#!/usr/bin/env python3.13
from __future__ import annotations
import logging
import socket
import ssl

NNTPOverviewRecord = dict[str, str]

LOGGER = logging.getLogger("postersearch.nntp")

CRLF = "\r\n"
TERMINATOR = ".\r\n"
RAW_TERMINATOR = b".\r\n"


class NNTPError(Exception):
    pass


class NNTPConnectionError(NNTPError, ConnectionError):
    pass


class NNTPIOError(NNTPError, IOError):
    pass


class NNTPAuthError(NNTPError):
    def __init__(self, message: str, step: str):
        super().__init__(message)
        self.step = step


class NNTPProtocolError(NNTPError):
    pass


def _insecure_context() -> ssl.SSLContext:
    # Certificates are not verified: connectivity over authenticity.
    # Do not reuse this context for anything that needs a trusted peer.
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def _to_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


class NNTPClient:
    def __init__(self, host: str, port: int, use_ssl: bool = False, timeout: float | None = None):
        self.host = host
        self.port = port
        self.use_ssl = use_ssl
        self.timeout = timeout
        self.sock = None
        self.file = None

    def connect(self) -> str:
        """Open the stream and return the server greeting line."""
        address = f"{self.host}:{self.port}"
        try:
            self.sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
            if self.use_ssl:
                self.sock = _insecure_context().wrap_socket(self.sock, server_hostname=self.host)
            self.file = self.sock.makefile("rwb", buffering=0)
        except OSError as exc:
            self.close()
            raise NNTPConnectionError(f"connect to {address} failed: {exc}") from exc
        LOGGER.debug("connected to %s (ssl=%s)", address, self.use_ssl)
        try:
            return self.read_line()
        except NNTPIOError as exc:
            self.close()
            raise NNTPConnectionError(f"no greeting from {address}: {exc}") from exc

    def close(self) -> None:
        if self.file:
            self.file.close()
            self.file = None
        if self.sock:
            self.sock.close()
            self.sock = None

    def send_command(self, line: str) -> None:
        if not self.file:
            raise NNTPIOError("Not connected")
        if line.upper().startswith("AUTHINFO PASS"):
            LOGGER.debug("> AUTHINFO PASS ****")
        else:
            LOGGER.debug("> %s", line)
        try:
            self.file.write(f"{line}{CRLF}".encode("utf-8"))
        except OSError as exc:
            raise NNTPIOError(f"write failed: {exc}") from exc

    def read_raw_line(self) -> bytes:
        if not self.file:
            raise NNTPIOError("Not connected")
        try:
            line = self.file.readline()
        except OSError as exc:
            raise NNTPIOError(f"read failed: {exc}") from exc
        if not line:
            raise NNTPIOError("Connection closed")
        return line

    def read_line(self) -> str:
        return self.read_raw_line().decode("utf-8", errors="replace")

    def read_multiline_block(self) -> list[str]:
        """Read lines up to the dot-terminator.

        A read failure ends the block early; whatever arrived so far is
        returned. Lines are kept verbatim, terminators included.
        """
        lines = []
        while True:
            try:
                line = self.read_line()
            except NNTPIOError as exc:
                LOGGER.warning("multiline block truncated after %d lines: %s", len(lines), exc)
                break
            if line == TERMINATOR:
                break
            lines.append(line)
        return lines

    def auth(self, user: str, password: str) -> None:
        self.send_command(f"AUTHINFO USER {user}")
        response = self.read_line()
        if not response.startswith("381"):
            raise NNTPAuthError(f"unexpected response to USER: {response.strip()}", step="user")
        self.send_command(f"AUTHINFO PASS {password}")
        response = self.read_line()
        if not response.startswith("281"):
            raise NNTPAuthError(f"authentication failed: {response.strip()}", step="pass")

    def list_groups(self, pattern: str = "") -> list[str]:
        command = f"LIST ACTIVE {pattern}" if pattern else "LIST ACTIVE"
        self.send_command(command)
        try:
            status = self.read_line()
        except NNTPIOError as exc:
            LOGGER.warning("%s: no response: %s", command, exc)
            return []
        if not status.startswith("2"):
            LOGGER.warning("%s refused: %s", command, status.strip())
            return []
        groups = []
        for line in self.read_multiline_block():
            parts = line.split()
            if parts:
                groups.append(parts[0])
        return groups

    def group(self, group: str) -> tuple[int, int, int, str] | None:
        command = f"GROUP {group}"
        self.send_command(command)
        try:
            line = self.read_line()
        except NNTPIOError as exc:
            raise NNTPIOError(f"{command}: {exc}") from exc
        if not line.startswith("211 "):
            LOGGER.info("skipping group %s: %s", group, line.strip())
            return None
        # 211 count first last group
        parts = line.split()
        if len(parts) < 4:
            raise NNTPProtocolError(f"unexpected group response for {group}: {line.strip()}")
        count = _to_int(parts[1])
        first = _to_int(parts[2])
        last = _to_int(parts[3])
        name = parts[4] if len(parts) > 4 else group
        return count, first, last, name

    def xover(self, start: int, end: int) -> list[NNTPOverviewRecord]:
        command = f"XOVER {start}-{end}"
        self.send_command(command)
        try:
            status = self.read_line()
        except NNTPIOError as exc:
            LOGGER.warning("%s: no response: %s", command, exc)
            return []
        if not status.startswith("2"):
            LOGGER.info("%s refused: %s", command, status.strip())
            return []
        results = []
        for line in self.read_multiline_block():
            parts = line.split("\t")
            if len(parts) < 4:
                continue
            results.append(
                {
                    "article": parts[0],
                    "subject": parts[1],
                    "from": parts[2],
                    "date": parts[3],
                    "raw": line,
                }
            )
        return results

    def article(self, group: str, article_id: str) -> bytes:
        """Fetch one article as raw bytes behind a ``--- Article group:id ---`` header.

        Lines are kept byte for byte; articles are often not UTF-8.
        """
        command = f"ARTICLE {article_id}"
        self.send_command(command)
        content = [f"--- Article {group}:{article_id} ---{CRLF}".encode("utf-8")]
        first = True
        while True:
            try:
                line = self.read_raw_line()
            except NNTPIOError as exc:
                raise NNTPIOError(f"{command} in {group}: {exc}") from exc
            if first:
                first = False
                if not line.startswith(b"2"):
                    status = line.decode("utf-8", errors="replace").strip()
                    raise NNTPProtocolError(f"{command} in {group}: {status}")
            if line == RAW_TERMINATOR:
                break
            content.append(line)
        return b"".join(content)

    def quit(self) -> None:
        try:
            self.send_command("QUIT")
            self.read_line()
        except NNTPError as exc:
            LOGGER.debug("QUIT not acknowledged: %s", exc)
        finally:
            self.close()
