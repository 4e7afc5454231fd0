"""Register access, motion commands and current-loop tuning of a brushless drive."""

from __future__ import annotations

from dataclasses import dataclass

from .commands import Command
from .constants import (
    LIMITCHECK_ON,
    EncoderDirection,
    EncoderType,
    Level,
    ModeBit,
    MotorCommand,
    MotorStatus,
)
from .serialcom import BusError, send, send_command

MODE_REGISTER = 77

_IQ_PID_BASE = 43
_ID_PID_BASE = 31


class DriveError(IOError):
    """The drive rejected a request or could not be reached."""


@dataclass
class PIDParams:
    """Gains and output limits of one PID regulator."""

    kp: int = 0
    ki: int = 0
    kd: int = 0
    kc: int = 0
    out_max: int = 0
    out_min: int = 0

    def as_tuple(self) -> tuple[int, int, int, int, int, int]:
        """The values in register order: KP, KI, KD, KC, OutMax, OutMin."""
        return (self.kp, self.ki, self.kd, self.kc, self.out_max, self.out_min)


def _to_signed32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _be(data: bytes, size: int) -> int:
    """Big-endian unsigned value of the first ``size`` bytes, zero-padded."""
    return int.from_bytes(bytes(data[:size]).ljust(size, b"\0"), "big")


class DriveBase:
    """A brushless drive module at one bus address.

    ``serial_com_active`` set to false suspends command traffic: commands
    then return no data and register reads return zero.
    """

    def __init__(self, comm, address):
        self.comm = comm
        self.address = address
        self.serial_com_active = True
        self.firmware = (0, 0)

    # ------------------------------------------------------------------ helpers

    def _require_address(self) -> None:
        if self.address == 0:
            raise DriveError("operation not allowed on the broadcast address")

    def _send(self, command, payload=b"") -> bytes:
        try:
            return send(self.comm, self.address, command, payload)
        except BusError as exc:
            raise DriveError(f"drive {self.address}: command {int(command)} failed") from exc

    def _command(self, command, value=None) -> bytes:
        try:
            return send_command(self.comm, self.address, command, value, self.serial_com_active)
        except BusError as exc:
            raise DriveError(f"drive {self.address}: command {int(command)} failed") from exc

    def _command_u32(self, command) -> int:
        return _be(self._command(command), 4)

    def _read_pair(self, register: int) -> tuple[int, int]:
        return self.read_register(register), self.read_register(register + 1)

    def _write_pid(self, base: int, params: PIDParams) -> None:
        for offset, value in enumerate(params.as_tuple()):
            self.write_register32(base + 2 * offset, value)

    def _read_pid(self, base: int) -> PIDParams:
        self._require_address()
        return PIDParams(*(self.read_register32(base + 2 * i) for i in range(6)))

    # ---------------------------------------------------------------- registers

    def read_register(self, register):
        """Read a 16-bit register of the drive."""
        if not self.serial_com_active:
            return 0
        data = self._send(Command.READREGISTER, bytes((register & 0xFF,)))
        if len(data) < 2:
            raise DriveError(f"short reply reading register {register}")
        return _be(data, 2)

    def write_register(self, register, value):
        """Write a 16-bit register of the drive."""
        value &= 0xFFFF
        self._send(Command.WRITEREGISTER, bytes((register & 0xFF, value >> 8, value & 0xFF)))

    def read_register32(self, register):
        """Read a signed 32-bit value held in ``register`` (high) and the next one (low)."""
        high, low = self._read_pair(register)
        return _to_signed32((high << 16) + low)

    def write_register32(self, register, value):
        """Write a 32-bit value to ``register`` (high word) and the next one (low word)."""
        self.write_register(register, (value >> 16) & 0xFFFF)
        self.write_register(register + 1, value & 0xFFFF)

    # ------------------------------------------------------------------- motion

    def get_version(self):
        """Firmware version as ``(major << 8) + minor``; also stored in ``firmware``."""
        data = self._command(Command.GETVERSION)
        major, minor = _be(data[:1], 1), _be(data[1:2], 1)
        self.firmware = (major, minor)
        return (major << 8) + minor

    def set_nominal_current(self, value):
        """Set the nominal motor current and apply it."""
        self.write_register(135, value)
        self._command(Command.UPDATECURRENT)

    def get_nominal_current(self):
        """Read the nominal motor current register."""
        return self.read_register(0x12)

    def stop_rotation(self, ramp=None):
        """Stop the motor immediately; ``ramp`` is accepted but not used by the drive."""
        self._command(Command.IMMEDIATESTOP)

    def actual_position(self):
        """Current target position, as an unsigned 32-bit value."""
        high, low = self._read_pair(5)
        return (high << 16) + low

    def home(self):
        """Move to the home position."""
        self._command(Command.HOME)

    def goto_pos0(self, position):
        """Move to the absolute ``position``."""
        self.write_register32(5, position)
        self._command(Command.POSUPDATE)

    def minimum_freq(self, freq):
        """Set the start/stop speed."""
        self.write_register32(79, freq)

    def maximum_freq(self, freq):
        """Set the running speed."""
        self.write_register32(3, freq)

    def acceleration(self, value):
        """Set the acceleration."""
        self.write_register32(81, value)

    def deceleration(self, value):
        """Set the deceleration."""
        self.write_register32(103, value)

    def actual_velocity(self):
        """Read back the configured running speed."""
        self._require_address()
        return self.read_register32(3)

    def motor_status(self):
        """Motor status flags."""
        self._require_address()
        return MotorStatus(self.read_register(74))

    def actual_inputs(self):
        """State of the digital inputs."""
        self._require_address()
        return self.read_register(1)

    def set_limits_check(self, enabled, level=Level.LOW):
        """Enable or disable the limit switch check and choose its active level."""
        mode = self.read_register(MODE_REGISTER)
        if enabled == LIMITCHECK_ON:
            mode |= ModeBit.LIMITS.mask
        else:
            mode &= ~ModeBit.LIMITS.mask
        if level == Level.HIGH:
            mode |= ModeBit.LIMITS_LEVEL.mask
        else:
            mode &= ~ModeBit.LIMITS_LEVEL.mask
        self.write_register(MODE_REGISTER, mode)

    def reset_alarms(self):
        """Clear the alarm conditions."""
        self._command(Command.ALARMRESET)

    def motor_enable(self, command):
        """Switch the control loop off, on, or on in speed mode."""
        commands = {
            MotorCommand.OFF: Command.LOOPDISABLE,
            MotorCommand.ON: Command.LOOPENABLE,
            MotorCommand.SPD_ON: Command.LOOPSPDENABLE,
        }
        try:
            code = commands[MotorCommand(command)]
        except ValueError as exc:
            raise ValueError(f"unknown motor command {command!r}") from exc
        self._command(code)

    def reset_drive(self):
        """Reset the drive microcontroller."""
        self._command(Command.MICRORESET)

    def get_encoder_actual_position(self):
        """Encoder position, as an unsigned 32-bit value."""
        return self._command_u32(Command.GETENCODER)

    def encoder_mode(self, encoder_type, direction):
        """Set the counting direction of the quadrature or serial encoder."""
        normal = direction == EncoderDirection.NORMAL
        if encoder_type == EncoderType.QEP:
            code = Command.SETENCODERQEPNORM if normal else Command.SETENCODERQEPINV
        else:
            code = Command.SETENCODERSERNORM if normal else Command.SETENCODERSERINV
        self._command(code)

    def get_encoder_mode(self, encoder_type):
        """Counting direction of the quadrature or serial encoder."""
        self._require_address()
        if encoder_type == EncoderType.QEP:
            data = self._command(Command.GETENCODERQEPMODE)
        else:
            data = self._command(Command.GETENCODERSERMODE)
        return _be(data, 1)

    def inputs_setting(self, value):
        """Configure the inputs (32-bit setting word)."""
        self.write_register32(75, value)

    def search_pos0(self, direction):
        """Start the home search in ``direction``."""
        self._command(Command.HOMESEARCH, direction)

    def suspend_drive(self):
        """Suspend the serial handling of the drive."""
        self._command(Command.SUSPENDSERIAL)

    def set_pid_iq_params(self, params):
        """Write and apply the parameters of the Iq current PID."""
        self._write_pid(_IQ_PID_BASE, params)
        self._command(Command.PIDIQUPDATE)

    def get_pid_iq_params(self):
        """Read the parameters of the Iq current PID."""
        return self._read_pid(_IQ_PID_BASE)

    def set_pid_id_params(self, params):
        """Write and apply the parameters of the Id current PID."""
        self._write_pid(_ID_PID_BASE, params)
        self._command(Command.PIDIDUPDATE)

    def get_pid_id_params(self):
        """Read the parameters of the Id current PID."""
        return self._read_pid(_ID_PID_BASE)