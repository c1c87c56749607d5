"""
Server session module.

The local blob server is started at most once per process. It runs its own
asyncio loop on a daemon thread so that it outlives any caller's event loop,
and it stays up until the process exits.
"""

import asyncio
import secrets
import threading
from enum import Enum
from typing import Optional

from aiohttp import web

from blobwriter.common.errors import ServerStartError
from blobwriter.common.protocol_definitions import SessionInfo
from blobwriter.server.utils.config import ServerConfig
from blobwriter.server.utils.logger import logger
from blobwriter.server.write_handler import StreamingWriteHandler


class SessionState(Enum):
    STOPPED = 'stopped'
    STARTING = 'starting'
    RUNNING = 'running'


class ServerSession:
    """Process-wide, lazily started loopback server."""

    _lock = threading.Lock()
    _instance: Optional['ServerSession'] = None
    _state = SessionState.STOPPED

    def __init__(self, config: ServerConfig):
        self.config = config
        self.token = secrets.token_urlsafe(config.token_bytes)
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self.thread: Optional[threading.Thread] = None
        self.runner: Optional[web.AppRunner] = None
        self.info: Optional[SessionInfo] = None

    @classmethod
    def acquire(cls, config: Optional[ServerConfig] = None) -> SessionInfo:
        """Return the running session, starting it on first use.

        Callers arriving while another thread is starting the server block
        until it is running and get the same session. The config is only
        used by the call that actually starts the server.
        """
        instance = cls._instance
        if instance is not None:
            return instance.info

        with cls._lock:
            if cls._instance is None:
                cls._state = SessionState.STARTING
                session = cls(config or ServerConfig())
                try:
                    session._start()
                except Exception as e:
                    cls._state = SessionState.STOPPED
                    logger.log_error("starting blob server", e)
                    raise ServerStartError(f"Failed to start blob server: {e}") from e
                cls._instance = session
                cls._state = SessionState.RUNNING
            return cls._instance.info

    @classmethod
    async def acquire_async(cls, config: Optional[ServerConfig] = None) -> SessionInfo:
        """acquire() without blocking the calling event loop."""
        instance = cls._instance
        if instance is not None:
            return instance.info
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, cls.acquire, config)

    @classmethod
    def state(cls) -> SessionState:
        """Get the current lifecycle state."""
        return cls._state

    def _start(self):
        """Spin up the server thread and wait until the listener is bound."""
        logger.set_log_dir(self.config.log_dir)

        self.loop = asyncio.new_event_loop()
        self.thread = threading.Thread(target=self._run_loop, name='blobwriter-server', daemon=True)
        self.thread.start()

        future = asyncio.run_coroutine_threadsafe(self._start_site(), self.loop)
        try:
            port = future.result(timeout=self.config.start_timeout)
        except Exception:
            future.cancel()
            self.loop.call_soon_threadsafe(self.loop.stop)
            raise

        self.info = SessionInfo(host=self.config.host, port=port, token=self.token)
        logger.log_session_started(self.info.host, self.info.port)

    def _run_loop(self):
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    async def _start_site(self) -> int:
        app = web.Application()
        StreamingWriteHandler(self.token, self.config).register(app)

        self.runner = web.AppRunner(app, access_log=None)
        await self.runner.setup()
        connection = self.config.get_connection_info()
        site = web.TCPSite(self.runner, connection['host'], connection['port'])
        await site.start()

        port = self._resolve_port(site, self.runner)
        if port is None:
            raise RuntimeError("Blob server started but no listening socket was reported")
        return port

    @staticmethod
    def _resolve_port(site, runner) -> Optional[int]:
        for address in getattr(runner, 'addresses', None) or ():
            if isinstance(address, tuple) and len(address) >= 2:
                return address[1]
        # aiohttp releases without AppRunner.addresses
        sockets = getattr(getattr(site, '_server', None), 'sockets', None) or ()
        if sockets:
            return sockets[0].getsockname()[1]
        return None
