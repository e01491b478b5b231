"""Connection lifecycle: connect, reconnect with backoff, heartbeat, ordered sends."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Iterable, Callable

from relaychat.state.session import ConnectionSession
from relaychat.state.settings import ConnectionSettings
from relaychat.events.registry import Callback, CallbackRegistry
from relaychat.events.dispatcher import EventDispatcher
from relaychat.state.connection_state import ConnectionState
from relaychat.frames import encode_frame, encode_flat_frame, encode_subscription_frame
from relaychat.errors import (
    ConnectAbortedError,
    TransportFailureError,
    RetriesExhaustedError,
    AuthenticationUnavailableError,
)
from relaychat.events.taxonomy import (
    EVENT_ERROR,
    EVENT_CONNECTED,
    EVENT_DISCONNECTED,
    EVENT_RECONNECTING,
    EVENT_STATE_CHANGE,
)
from relaychat.config.websocket import (
    WS_TYPE_PING,
    WS_CLOSE_CLIENT_REQUEST_CODE,
    WS_CLOSE_CLIENT_REQUEST_REASON,
)

from .outbound import OutboundQueue
from .heartbeat import HeartbeatMonitor
from .scheduler import SleepFn, ReconnectScheduler
from .auth import TokenProvider, build_url, resolve_token
from .transport import Opener, Socket, describe_close, websocket_opener

logger = logging.getLogger(__name__)


class ConnectionStateMachine:
    """Owns the socket and drives the reconnect, heartbeat and queue components.

    Everything runs on one event loop. The only suspension points are the
    token fetch and the socket open; both re-check that their session is
    still current afterwards, so a `disconnect()` or a newer attempt always
    wins over a stale one.
    """

    def __init__(
        self,
        settings: ConnectionSettings,
        token_provider: TokenProvider,
        *,
        opener: Opener | None = None,
        sleep_fn: SleepFn | None = None,
    ) -> None:
        self.settings = settings
        self._token_provider = token_provider
        self._open = opener or websocket_opener(settings)
        self._events = CallbackRegistry()
        self._dispatcher = EventDispatcher(self._events.emit)
        self._queue = OutboundQueue()
        self._scheduler = ReconnectScheduler(
            base_interval_ms=settings.reconnect_interval_ms,
            max_attempts=settings.max_reconnect_attempts,
            max_delay_ms=settings.max_reconnect_delay_ms,
            sleep_fn=sleep_fn,
        )
        self._heartbeat = HeartbeatMonitor(interval_ms=settings.heartbeat_interval_ms, sleep_fn=sleep_fn)
        self._state = ConnectionState.DISCONNECTED
        self._session = ConnectionSession()
        self._auto_reconnect = settings.auto_reconnect
        self._closing: set[asyncio.Task] = set()

    # -- Introspection --------------------------------------------------------

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED and self._session.socket is not None

    @property
    def epoch(self) -> int:
        return self._session.epoch

    @property
    def reconnect_attempts(self) -> int:
        return self._scheduler.attempts

    @property
    def reconnect_pending(self) -> bool:
        return self._scheduler.pending

    @property
    def heartbeat_running(self) -> bool:
        return self._heartbeat.running

    @property
    def pending_frames(self) -> int:
        return len(self._queue)

    @property
    def scheduler(self) -> ReconnectScheduler:
        return self._scheduler

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    # -- Subscriptions ----------------------------------------------------------

    def on(self, event: str, callback: Callback) -> Callable[[], None]:
        return self._events.on(event, callback)

    def once(self, event: str, callback: Callback) -> Callable[[], None]:
        return self._events.once(event, callback)

    def off(self, event: str, callback: Callback | None = None) -> None:
        self._events.off(event, callback)

    def emit(self, event: str, *args: Any) -> int:
        return self._events.emit(event, *args)

    # -- Connect / Disconnect -------------------------------------------------

    async def connect(self) -> None:
        """Open the connection; a no-op while already connecting or connected.

        Raises AuthenticationUnavailableError when no credential is available,
        TransportFailureError when the socket cannot be opened (a retry is
        scheduled), and ConnectAbortedError when disconnect() interrupts it.
        """
        if self._state in (ConnectionState.CONNECTING, ConnectionState.CONNECTED):
            return
        self._auto_reconnect = self.settings.auto_reconnect
        self._scheduler.cancel()
        self._scheduler.reset()
        await self._connect_once(self._new_session())

    def disconnect(self) -> None:
        """Tear everything down synchronously. Safe to call repeatedly."""
        self._auto_reconnect = False
        self._scheduler.cancel()
        self._heartbeat.stop()

        previous = self._state
        session = self._session
        # Frames sent while connected are still written, ahead of the close frame.
        if previous is ConnectionState.CONNECTED and session.socket is not None:
            flush = self._queue.take_live()
        else:
            flush = []
            self._queue.clear()

        session.closed = True
        session.cancel_tasks()
        socket = session.socket
        session.socket = None
        # Supersede any connect() still awaiting a token or the socket open.
        self._session = ConnectionSession(epoch=session.epoch + 1)
        if socket is not None:
            self._close_socket_later(
                socket,
                code=WS_CLOSE_CLIENT_REQUEST_CODE,
                reason=WS_CLOSE_CLIENT_REQUEST_REASON,
                flush=flush,
            )

        if previous is ConnectionState.DISCONNECTED:
            return
        self._set_state(ConnectionState.DISCONNECTED)
        logger.info("disconnected by client (was %s)", previous.value)
        if previous is ConnectionState.CONNECTED:
            self._events.emit(EVENT_DISCONNECTED, WS_CLOSE_CLIENT_REQUEST_REASON)

    async def wait_closed(self) -> None:
        """Wait for background close handshakes started by disconnect() or a failure."""
        if self._closing:
            await asyncio.gather(*list(self._closing), return_exceptions=True)

    # -- Sending --------------------------------------------------------------

    def send(self, msg_type: str, payload: Any = None) -> None:
        """Send a generic envelope; queued until the connection is open."""
        self._enqueue(encode_frame(msg_type, {} if payload is None else payload))

    def send_flat(self, msg_type: str, fields: dict[str, Any]) -> None:
        self._enqueue(encode_flat_frame(msg_type, fields))

    def send_subscription(self, action: str, conversation_ids: Iterable[str]) -> None:
        self._enqueue(encode_subscription_frame(action, conversation_ids))

    def _enqueue(self, frame: str) -> None:
        connected = self._state is ConnectionState.CONNECTED
        self._queue.push(frame, live=connected)
        if not connected:
            logger.debug("queued frame while %s (%s pending)", self._state.value, len(self._queue))

    def _send_ping(self) -> None:
        if self._state is ConnectionState.CONNECTED:
            self.send(WS_TYPE_PING, {})

    # -- Internals ------------------------------------------------------------

    def _set_state(self, new: ConnectionState) -> None:
        old = self._state
        if old is new:
            return
        self._state = new
        logger.debug("state %s -> %s", old.value, new.value)
        self._events.emit(EVENT_STATE_CHANGE, old, new)

    def _new_session(self) -> ConnectionSession:
        self._session.closed = True
        self._session.cancel_tasks()
        self._session = ConnectionSession(epoch=self._session.epoch + 1)
        return self._session

    def _abandon(self, session: ConnectionSession) -> None:
        if session is not self._session:
            return
        session.closed = True
        self._set_state(ConnectionState.DISCONNECTED)

    async def _connect_once(self, session: ConnectionSession) -> None:
        self._set_state(ConnectionState.CONNECTING)

        try:
            token = await resolve_token(self._token_provider)
        except AuthenticationUnavailableError:
            if session is not self._session:
                raise ConnectAbortedError() from None
            logger.warning("no authentication token available; not connecting")
            self._abandon(session)
            raise
        except asyncio.CancelledError:
            self._abandon(session)
            raise
        if session is not self._session:
            raise ConnectAbortedError()

        try:
            socket = await self._open(build_url(self.settings.url, token))
        except asyncio.CancelledError:
            self._abandon(session)
            raise
        except Exception as exc:
            if session is not self._session:
                raise ConnectAbortedError() from exc
            reason = f"{type(exc).__name__}: {exc}"
            logger.warning("websocket open failed: %s", reason)
            self._handle_close(session, reason)
            raise TransportFailureError(reason) from exc

        if session is not self._session:
            self._close_socket_later(socket)
            raise ConnectAbortedError()

        self._on_open(session, socket)

    def _on_open(self, session: ConnectionSession, socket: Socket) -> None:
        session.socket = socket
        self._scheduler.reset()
        # The writer drains frames queued during the outage before anything sent from here on.
        session.writer_task = asyncio.create_task(self._write_loop(session))
        session.reader_task = asyncio.create_task(self._read_loop(session))
        self._heartbeat.start(self._send_ping)
        logger.info("connected (epoch=%s, %s queued frame(s))", session.epoch, len(self._queue))
        self._set_state(ConnectionState.CONNECTED)
        if session is self._session:
            self._events.emit(EVENT_CONNECTED)

    async def _reconnect_step(self, epoch: int) -> None:
        if epoch != self._session.epoch or self._state is not ConnectionState.RECONNECTING:
            logger.debug("ignoring reconnect timer from epoch %s", epoch)
            return
        logger.info("reconnecting (attempt %s/%s)", self._scheduler.attempts, self._scheduler.max_attempts)
        try:
            await self._connect_once(self._new_session())
        except AuthenticationUnavailableError as exc:
            self._events.emit(EVENT_ERROR, exc)
        except (TransportFailureError, ConnectAbortedError):
            # Already handled: the close path armed the next attempt or gave up.
            return

    async def _write_loop(self, session: ConnectionSession) -> None:
        try:
            await self._queue.drain(session.socket.send)
        except asyncio.CancelledError:
            return
        except Exception as exc:
            self._handle_close(session, f"write failed: {type(exc).__name__}: {exc}")

    async def _read_loop(self, session: ConnectionSession) -> None:
        socket = session.socket
        try:
            async for raw in socket:
                if session is not self._session:
                    return
                try:
                    self._dispatcher.dispatch(raw)
                except Exception:
                    logger.exception("dispatch failed; frame dropped")
        except asyncio.CancelledError:
            return
        except Exception as exc:
            reason = describe_close(socket) if getattr(socket, "close_code", None) else f"{type(exc).__name__}: {exc}"
        else:
            reason = describe_close(socket)
        self._handle_close(session, reason)

    def _handle_close(self, session: ConnectionSession, reason: str) -> None:
        if session is not self._session or session.closed:
            return
        session.closed = True
        self._heartbeat.stop()
        session.cancel_tasks()
        socket = session.socket
        session.socket = None
        if socket is not None:
            self._close_socket_later(socket)

        was_connected = self._state is ConnectionState.CONNECTED
        if was_connected:
            logger.info("connection lost: %s", reason)

        if self._auto_reconnect and not self._scheduler.exhausted:
            self._set_state(ConnectionState.RECONNECTING)
            if session is not self._session:
                # A state listener called disconnect().
                return
            delay = self._scheduler.schedule(self._reconnect_step, session.epoch)
            if was_connected:
                self._events.emit(EVENT_DISCONNECTED, reason)
            if delay is not None:
                logger.info("reconnect attempt %s in %.0f ms", self._scheduler.attempts, delay)
                self._events.emit(EVENT_RECONNECTING, self._scheduler.attempts, delay)
            return

        self._set_state(ConnectionState.DISCONNECTED)
        if was_connected:
            self._events.emit(EVENT_DISCONNECTED, reason)
        if self._auto_reconnect:
            error = RetriesExhaustedError(attempts=self._scheduler.attempts)
            logger.error("%s", error)
            self._events.emit(EVENT_ERROR, error)

    def _close_socket_later(
        self,
        socket: Socket,
        *,
        code: int = WS_CLOSE_CLIENT_REQUEST_CODE,
        reason: str = "",
        flush: list[str] | None = None,
    ) -> None:
        async def _close() -> None:
            try:
                for frame in flush or ():
                    await socket.send(frame)
            except Exception:
                logger.warning("flush before close failed", exc_info=True)
            with contextlib.suppress(Exception):
                await socket.close(code=code, reason=reason)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("no running loop; socket close skipped")
            return
        task = loop.create_task(_close())
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)


__all__ = ["ConnectionStateMachine"]
