"""Dispatch façade: turns user actions into encoded commands on the link."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from haptiknit.codec import CommandEncoder
from haptiknit.exceptions import HaptiKnitError, collect_errors
from haptiknit.model_manager import ObserverManager
from haptiknit.models import Channel, CommandConfig, CommandKind
from haptiknit.protocols import DispatchEvent, DispatchObserver
from haptiknit.services import PressureService
from haptiknit.transport import TransportSession

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class DispatchResult:
    """
    Outcome of one command or read.

    Attributes:
        kind: Command site, or None for a read
        channel: Channel written or read
        value: Logical value (or the value read)
        payload: Byte actually sent, None if encoding failed
        index: Pressure slot for PRESSURE commands
        error: Why the command did not reach the device
    """

    kind: Optional[CommandKind]
    channel: Channel
    value: Optional[int]
    payload: Optional[int] = None
    index: Optional[int] = None
    error: Optional[HaptiKnitError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class SubmitReport:
    """Per-value outcome of a pressure submission."""

    results: list[DispatchResult] = field(default_factory=list)
    summary: str = ""

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results)

    @property
    def sent(self) -> list[DispatchResult]:
        return [result for result in self.results if result.ok]

    @property
    def failed(self) -> list[DispatchResult]:
        return [result for result in self.results if not result.ok]

    @property
    def is_empty(self) -> bool:
        """Check if there was nothing to submit."""
        return not self.results


class Dispatcher:
    """
    Sends console commands through the transport session.

    Every method returns a result instead of raising for transport or
    encoding failures, so one failed command never breaks the console.
    Writes are awaited one after another and the session serializes
    concurrent callers per channel.

    Command sites and their default encodings:
        - dispatch_action: SELECT, offset (actuator id + 1)
        - submit_pressures: PRESSURE, direct
        - dispatch_all_stop: STOP_ALL, direct (100)
        - dispatch_all_start: INFLATE_ALL, direct (11)
    """

    def __init__(
        self,
        session: TransportSession,
        commands: CommandConfig,
        pressure: PressureService,
        include_first_slot: bool = False,
    ):
        """
        Initialize the dispatcher.

        Args:
            session: Transport session to write through
            commands: Reserved values and encoding modes
            pressure: Source of staged setpoints
            include_first_slot: Submit the first actuator's setpoint too
        """
        self._session = session
        self._commands = commands
        self._pressure = pressure
        self.include_first_slot = include_first_slot
        self._observers = ObserverManager[DispatchObserver](observer_type_name="dispatch")

    def register_observer(self, observer: DispatchObserver) -> None:
        """Register an observer to receive dispatch events."""
        self._observers.register(observer)

    def unregister_observer(self, observer: DispatchObserver) -> None:
        """Unregister an observer."""
        self._observers.unregister(observer)

    def _record(self, result: DispatchResult) -> DispatchResult:
        if result.ok:
            self._observers.notify("on_dispatch_event", DispatchEvent.SENT, result)
        else:
            logger.error(f"{result.kind.value if result.kind else 'read'} failed: {result.error}")
            self._observers.notify("on_dispatch_event", DispatchEvent.FAILED, result)
        return result

    async def _write(self, kind: CommandKind, value: int) -> int:
        """Encode and write one command. Returns the payload sent."""
        payload = CommandEncoder.encode(value, self._commands.mode_for(kind))
        await self._session.write(Channel.COMMAND, payload)
        return payload

    async def _dispatch(self, kind: CommandKind, value: int) -> DispatchResult:
        try:
            payload = await self._write(kind, value)
        except HaptiKnitError as e:
            return self._record(DispatchResult(kind=kind, channel=Channel.COMMAND, value=value, error=e))
        return self._record(DispatchResult(kind=kind, channel=Channel.COMMAND, value=value, payload=payload))

    # =================================================================
    # Commands
    # =================================================================

    async def dispatch_action(self, actuator_id: int) -> DispatchResult:
        """Fire a single actuator."""
        logger.info(f"Action for actuator {actuator_id + 1}")
        return await self._dispatch(CommandKind.SELECT, actuator_id)

    async def dispatch_all_stop(self) -> DispatchResult:
        """Deflate every actuator."""
        logger.info("Stop all")
        return await self._dispatch(CommandKind.STOP_ALL, self._commands.stop_all_value)

    async def dispatch_all_start(self) -> DispatchResult:
        """Inflate every actuator."""
        logger.info("Inflate all")
        return await self._dispatch(CommandKind.INFLATE_ALL, self._commands.inflate_all_value)

    async def submit_pressures(self) -> SubmitReport:
        """
        Send every staged setpoint, ascending by actuator.

        A failed value does not stop the ones after it.

        Returns:
            Report with one result per staged value
        """
        staged = self._pressure.staged_values(self.include_first_slot)
        report = SubmitReport()
        if not staged:
            report.summary = "No pressure values to submit"
            logger.info(report.summary)
            return report

        collector = collect_errors("submit pressures")
        for index, value in staged:
            errors_before = collector.error_count
            payload: Optional[int] = None
            with collector.try_operation(f"actuator {index + 1} ({value} kPa)"):
                payload = await self._write(CommandKind.PRESSURE, value)

            error = collector.errors[-1][1] if collector.error_count > errors_before else None
            report.results.append(self._record(DispatchResult(
                kind=CommandKind.PRESSURE,
                channel=Channel.COMMAND,
                value=value,
                payload=payload,
                index=index,
                error=error,
            )))

        report.summary = collector.get_summary()
        if collector.has_errors:
            logger.warning(report.summary)
        else:
            logger.info(f"Submitted {len(report.results)} pressure values")
        return report

    async def read_battery(self) -> DispatchResult:
        """Read the battery level."""
        try:
            level = await self._session.read(Channel.BATTERY)
        except HaptiKnitError as e:
            logger.error(f"Battery read failed: {e}")
            return DispatchResult(kind=None, channel=Channel.BATTERY, value=None, error=e)
        logger.info(f"Battery level: {level}")
        return DispatchResult(kind=None, channel=Channel.BATTERY, value=level, payload=level)
