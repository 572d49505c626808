"""Process supervision for the wrapped ffmpeg run.

Spawns ffmpeg with the caller's arguments, interprets its stderr in a
background task and decides the exit status of fpb itself:

- ffmpeg succeeded: finish the bar, hide its diagnostics, exit 0
- ffmpeg failed: replay its diagnostics verbatim, exit with its status
- interrupted: kill ffmpeg, exit 128 + signal number
- fpb could not spawn or read ffmpeg: report, exit 1
"""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Any, Optional, TextIO

from fpb.config.settings import Settings, get_settings
from fpb.core.notifier import ProgressNotifier
from fpb.core.progress_model import ProgressModel
from fpb.core.prompt import PromptForwarder
from fpb.core.session import Session, Unit
from fpb.display.progress import ProgressBar
from fpb.display.styles import PlainStyle, resolve_style
from fpb.errors import FpbError, SpawnError, StreamReadError
from fpb.utils.logging import get_logger

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
SIGNAL_EXIT_BASE = 128

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)

logger = get_logger("fpb.supervisor")


def exit_status(return_code: int) -> int:
    """Map a subprocess return code to a shell exit status.

    asyncio reports death by signal N as ``-N``; shells report it as
    ``128 + N``.
    """
    if return_code < 0:
        return SIGNAL_EXIT_BASE - return_code
    return return_code


class ProcessSupervisor:
    """Runs ffmpeg with a live progress display.

    Example:
        >>> supervisor = ProcessSupervisor(["-i", "in.mp4", "out.webm"])
        >>> code = asyncio.run(supervisor.run())
    """

    def __init__(
        self,
        args: list[str],
        *,
        settings: Optional[Settings] = None,
        program: Optional[str] = None,
        stream: Optional[TextIO] = None,
        user_input: Optional[TextIO] = None,
        style: Optional[PlainStyle] = None,
        handle_signals: bool = True,
    ) -> None:
        """Initialize the supervisor.

        Args:
            args: Arguments passed through unmodified to the program
            settings: Settings, loaded globally when omitted
            program: Program to run instead of the configured one
            stream: Diagnostic stream for the display (defaults to stderr)
            user_input: Source of prompt answers (defaults to stdin)
            style: Rendering strategy, detected from ``stream`` when omitted
            handle_signals: Install SIGINT/SIGTERM handlers while running
        """
        self.args = list(args)
        self.settings = settings or get_settings()
        self.program = program or self.settings.wrapper.program
        self.stream = stream or sys.stderr
        self.user_input = user_input
        self.style = style or resolve_style(self.stream)
        self.handle_signals = handle_signals

        self.session = Session()
        self.diagnostics = bytearray()
        self.notifier: Optional[ProgressNotifier] = None
        self._stop = asyncio.Event()
        self._signal_number: Optional[int] = None

    @property
    def command(self) -> list[str]:
        return [self.program, *self.args]

    def _make_bar(self, description: str, total: int, unit: Unit, start_time: float) -> ProgressBar:
        return ProgressBar(
            description,
            total,
            unit,
            stream=self.stream,
            style=self.style,
            settings=self.settings.wrapper,
            start_time=start_time,
        )

    def _build_notifier(self, process: asyncio.subprocess.Process) -> ProgressNotifier:
        loop = asyncio.get_running_loop()
        wrapper = self.settings.wrapper

        def send(data: bytes) -> None:
            # Called from the forwarder thread
            loop.call_soon_threadsafe(self._write_stdin, process, data)

        model = ProgressModel(
            self.session,
            self._make_bar,
            placeholder=wrapper.placeholder_label,
        )
        forwarder = PromptForwarder(
            send,
            stream=self.stream,
            style=self.style,
            user_input=self.user_input,
            suffix=wrapper.prompt_suffix,
        )
        return ProgressNotifier(model, forwarder)

    @staticmethod
    def _write_stdin(process: asyncio.subprocess.Process, data: bytes) -> None:
        writer = process.stdin
        if writer is None or writer.is_closing():
            logger.debug("stdin_closed", dropped=len(data))
            return
        try:
            writer.write(data)
        except (BrokenPipeError, ConnectionResetError) as exc:
            logger.debug("stdin_write_failed", error=str(exc))

    async def _spawn(self) -> asyncio.subprocess.Process:
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as exc:
            raise SpawnError(self.program, exc) from exc
        logger.debug("process_started", pid=process.pid, command=self.command)
        return process

    async def _pump(self, process: asyncio.subprocess.Process) -> None:
        """Feed stderr into the interpreter until EOF."""
        assert process.stderr is not None
        assert self.notifier is not None
        chunk_size = self.settings.wrapper.read_chunk_size
        while True:
            try:
                chunk = await process.stderr.read(chunk_size)
            except (OSError, ValueError) as exc:
                raise StreamReadError(self.program, exc) from exc
            if not chunk:
                return
            self.diagnostics.extend(chunk)
            self.notifier.feed(chunk)

    def _on_signal(self, signum: int) -> None:
        if self._signal_number is None:
            self._signal_number = signum
        self._stop.set()

    def _install_signal_handlers(self) -> list[tuple[int, Any]]:
        """Route SIGINT/SIGTERM to the stop event.

        Returns the previous handlers; ``None`` marks a loop-level handler.
        """
        loop = asyncio.get_running_loop()
        previous: list[tuple[int, Any]] = []
        for sig in HANDLED_SIGNALS:
            try:
                loop.add_signal_handler(sig, self._on_signal, sig)
                previous.append((sig, None))
            except NotImplementedError:
                # No loop signal support (Windows); fall back to a plain handler
                handler = signal.signal(
                    sig,
                    lambda signum, frame: loop.call_soon_threadsafe(self._on_signal, signum),
                )
                previous.append((sig, signal.SIG_DFL if handler is None else handler))
        return previous

    def _restore_signal_handlers(self, previous: list[tuple[int, Any]]) -> None:
        loop = asyncio.get_running_loop()
        for sig, handler in previous:
            if handler is None:
                loop.remove_signal_handler(sig)
            else:
                signal.signal(sig, handler)

    def _report(self, message: str) -> None:
        self.stream.write(self.style.error(message) + "\n")
        self.stream.flush()

    async def run(self) -> int:
        """Run the program to completion and return fpb's exit status."""
        previous = self._install_signal_handlers() if self.handle_signals else []
        try:
            return await self._run()
        except FpbError as exc:
            logger.debug("supervisor_failed", error=str(exc))
            self._report(str(exc))
            return exc.exit_code
        finally:
            if previous:
                self._restore_signal_handlers(previous)

    async def _run(self) -> int:
        process = await self._spawn()
        self.notifier = self._build_notifier(process)

        reader = asyncio.create_task(self._pump(process), name="fpb-stderr-reader")
        stopper = asyncio.create_task(self._stop.wait(), name="fpb-signal-wait")
        done, _ = await asyncio.wait(
            {reader, stopper}, return_when=asyncio.FIRST_COMPLETED
        )

        if stopper in done:
            reader.cancel()
            return await self._interrupt(process)

        stopper.cancel()
        try:
            # Re-raises StreamReadError from the reading task
            reader.result()
        except StreamReadError:
            self.notifier.abort()
            await self._terminate(process)
            raise

        return_code = await process.wait()
        self._close_stdin(process)
        logger.debug("process_exited", return_code=return_code)

        if return_code != 0:
            self.notifier.abort()
            self._replay()
            return exit_status(return_code)

        self.notifier.close()
        return EXIT_SUCCESS

    async def _interrupt(self, process: asyncio.subprocess.Process) -> int:
        signum = self._signal_number or signal.SIGINT
        if self.notifier is not None:
            self.notifier.abort()
        self.stream.write(self.style.error("Exiting.") + "\n")
        self.stream.flush()
        await self._terminate(process)
        logger.debug("process_killed", signal=int(signum))
        return SIGNAL_EXIT_BASE + int(signum)

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()
        self._close_stdin(process)

    def _replay(self) -> None:
        """Write the captured stderr back out byte for byte."""
        self.stream.flush()
        raw = getattr(self.stream, "buffer", None)
        if raw is None:
            # Text-only stream (StringIO)
            self.stream.write(self.diagnostics.decode("utf-8", errors="replace"))
        else:
            raw.write(bytes(self.diagnostics))
            raw.flush()
        self.stream.flush()

    @staticmethod
    def _close_stdin(process: asyncio.subprocess.Process) -> None:
        if process.stdin is not None and not process.stdin.is_closing():
            process.stdin.close()

    def interrupt(self, signum: int = signal.SIGINT) -> None:
        """Request the same shutdown a received signal would cause."""
        self._on_signal(signum)


def run_wrapped(args: list[str], **kwargs: Any) -> int:
    """Run ffmpeg with ``args`` under a fresh event loop."""
    return asyncio.run(ProcessSupervisor(args, **kwargs).run())
