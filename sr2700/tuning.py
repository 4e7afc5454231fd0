"""Encoder, logger, PID and diagnostic settings of a brushless drive."""

from __future__ import annotations

from .commands import Command
from .constants import (
    ADCCAL_OFF,
    ADCCAL_ON,
    ELECTTHETA_ON,
    LOG_BUF_SIZE,
    PWM_OFF,
    PWM_ON,
    RAMP_ON,
    AdcChannel,
    LogChannel,
    ModeBit,
    PIDSet,
    SpeedUnit,
)
from .motion import MODE_REGISTER, DriveBase, PIDParams, _be

_SPD_GAIN_BASES = {PIDSet.DEF: 7, PIDSet.ZERO: 83, PIDSet.SPD: 121}
_SPD_LIMITS_BASE = 15
_POS_GAIN_BASES = {PIDSet.DEF: 19, PIDSet.ZERO: 91}
_POS_LIMITS_BASE = 27

_LOG_COMMANDS = {
    LogChannel.CH1: (Command.GETLOG1L, Command.GETLOG1H),
    LogChannel.CH2: (Command.GETLOG2L, Command.GETLOG2H),
    LogChannel.CH3: (Command.GETLOG3L, Command.GETLOG3H),
    LogChannel.CH4: (Command.GETLOG4L, Command.GETLOG4H),
}
_LOG_HALF = LOG_BUF_SIZE // 2

_SPEED_COMMANDS = {
    SpeedUnit.PU: Command.GETSPEEDPU,
    SpeedUnit.RPM: Command.GETSPEEDRPM,
    SpeedUnit.MS: Command.GETSPEEDMS,
}

_ADC_OFFSET_REGISTERS = {AdcChannel.CH0: 66, AdcChannel.CH1: 68, AdcChannel.CH2: 136}


def _gain_base(table: dict, pid_set) -> int:
    try:
        return table.get(PIDSet(pid_set), table[PIDSet.DEF])
    except ValueError:
        return table[PIDSet.DEF]


def _adc_register(channel) -> int | None:
    try:
        return _ADC_OFFSET_REGISTERS[AdcChannel(channel)]
    except ValueError:
        return None


class TuningDrive(DriveBase):
    """Drive module with access to its tuning and diagnostic settings.

    Logger buffers fetched with :meth:`get_logger_channel_data` are kept in
    ``log_data`` by channel.
    """

    def __init__(self, comm, address):
        super().__init__(comm, address)
        self.log_data: dict[LogChannel, list[int]] = {}

    # ------------------------------------------------------------------ helpers

    def _read_pid_set(self, gain_base: int, limits_base: int) -> PIDParams:
        self._require_address()
        gains = [self.read_register32(gain_base + 2 * i) for i in range(4)]
        limits = [self.read_register32(limits_base + 2 * i) for i in range(2)]
        return PIDParams(*gains, *limits)

    def _read_checked(self, register: int) -> int:
        self._require_address()
        return self.read_register(register)

    def _read_checked32(self, register: int) -> int:
        self._require_address()
        return self.read_register32(register)

    # ---------------------------------------------------------------------- PID

    def get_pid_spd_params(self, pid_set):
        """Read one parameter set of the speed PID."""
        return self._read_pid_set(_gain_base(_SPD_GAIN_BASES, pid_set), _SPD_LIMITS_BASE)

    def set_pid_pos_params(self, pid_set, params):
        """Write one parameter set of the position PID.

        The standstill set (``PIDSet.ZERO``) is applied straight away.
        """
        base = _gain_base(_POS_GAIN_BASES, pid_set)
        values = params.as_tuple()
        for offset, value in enumerate(values[:4]):
            self.write_register32(base + 2 * offset, value)
        self.write_register32(_POS_LIMITS_BASE, params.out_max)
        self.write_register32(_POS_LIMITS_BASE + 2, params.out_min)
        if pid_set == PIDSet.ZERO:
            self._command(Command.PIDPOSUPDATE)

    def get_pid_pos_params(self, pid_set):
        """Read one parameter set of the position PID."""
        return self._read_pid_set(_gain_base(_POS_GAIN_BASES, pid_set), _POS_LIMITS_BASE)

    # ------------------------------------------------------------------ encoder

    def get_line_encoder(self):
        """Lines of the encoder."""
        return self._read_checked32(55)

    def set_line_encoder(self, lines):
        """Set and apply the lines of the encoder."""
        self.write_register32(55, lines)
        self._command(Command.LINEENCUPDATE)

    def get_pulses_per_rev(self):
        """Encoder pulses per motor revolution."""
        return self._read_checked32(138)

    def set_pulses_per_rev(self, ppr):
        """Set and apply the encoder pulses per revolution."""
        self.write_register32(138, ppr)
        self._command(Command.PPRUPDATE)

    def get_poles(self):
        """Number of motor poles."""
        return self._read_checked(58)

    def set_poles(self, poles):
        """Set and apply the number of motor poles."""
        self.write_register(58, poles)
        self._command(Command.ENCPARAMUPDATE)

    def get_calibrated_angle(self):
        """Calibrated electrical zero angle."""
        return self._read_checked(59)

    def set_calibrated_angle(self, angle):
        """Set and apply the calibrated electrical zero angle."""
        self.write_register(59, angle)
        self._command(Command.CALANGUPDATE)

    # ------------------------------------------------------------------- logger

    def get_logger_trigger(self):
        """Trigger setting of the data logger."""
        return self._read_checked(60)

    def set_logger_trigger(self, trigger):
        """Set and apply the data logger trigger."""
        self.write_register(60, trigger)
        self._command(Command.LOGTRIGUPDATE)

    def get_logger_prescaler(self):
        """Sampling prescaler of the data logger."""
        return self._read_checked(61)

    def set_logger_prescaler(self, prescaler):
        """Set and apply the data logger prescaler."""
        self.write_register(61, prescaler)
        self._command(Command.LOGPRESCALUPDATE)

    def get_logger_channel_data(self, channel):
        """Fetch the buffer of a logger channel as signed 16-bit samples."""
        try:
            channel = LogChannel(channel)
        except ValueError as exc:
            raise ValueError(f"unknown logger channel {channel!r}") from exc
        samples: list[int] = []
        for code in _LOG_COMMANDS[channel]:
            data = bytes(self._command(code)[: 2 * _LOG_HALF]).ljust(2 * _LOG_HALF, b"\0")
            samples.extend(
                int.from_bytes(data[pos : pos + 2], "big", signed=True)
                for pos in range(0, 2 * _LOG_HALF, 2)
            )
        self.log_data[channel] = samples
        return samples

    def set_logger_channel_input(self, channel, source):
        """Route the signal ``source`` to logger ``channel``."""
        self.write_register(62 + channel, source)

    # -------------------------------------------------------------- diagnostics

    def get_encoder_actual_speed(self, unit):
        """Encoder speed in the requested unit, as an unsigned 32-bit value."""
        try:
            code = _SPEED_COMMANDS[SpeedUnit(unit)]
        except ValueError as exc:
            raise ValueError(f"unknown speed unit {unit!r}") from exc
        return self._command_u32(code)

    def pwm_enable(self, command):
        """Switch the PWM outputs on or off; other values do nothing."""
        if command == PWM_OFF:
            self._command(Command.PWMDISABLE)
        elif command == PWM_ON:
            self._command(Command.PWMENABLE)

    def phase_enable(self, phase, command):
        """Switch the PWM of one motor phase on or off; other values do nothing."""
        if command == PWM_OFF:
            self._command(Command.PHASEDISABLE, phase)
        elif command == PWM_ON:
            self._command(Command.PHASEENABLE, phase)

    def adc_cal_enable(self, command):
        """Enter or leave ADC calibration mode; other values do nothing."""
        if command == ADCCAL_OFF:
            self._command(Command.ADCCALDISABLE)
        elif command == ADCCAL_ON:
            self._command(Command.ADCCALENABLE)

    def get_clarke_a(self):
        """Clarke transform alpha output."""
        return self._command_u32(Command.GETCLARKEA)

    def get_clarke_b(self):
        """Clarke transform beta output."""
        return self._command_u32(Command.GETCLARKEB)

    def get_adc_offset(self, channel):
        """Offset of a current ADC channel; zero for an unknown channel."""
        self._require_address()
        register = _adc_register(channel)
        if register is None:
            return 0
        return self.read_register32(register)

    def set_adc_offset(self, channel, value):
        """Set the offset of a current ADC channel; unknown channels are ignored."""
        register = _adc_register(channel)
        if register is not None:
            self.write_register32(register, value)

    def get_pid_iq_out(self):
        """Output of the Iq PID."""
        return self._command_u32(Command.GETPIDIQOUT)

    def get_pid_id_out(self):
        """Output of the Id PID."""
        return self._command_u32(Command.GETPIDIDOUT)

    def get_pid_spd_out(self):
        """Output of the speed PID."""
        return self._command_u32(Command.GETPIDSPDOUT)

    def get_pid_pos_out(self):
        """Output of the position PID."""
        return self._command_u32(Command.GETPIDPOSOUT)

    def get_pid_iq_fdb(self):
        """Feedback of the Iq PID."""
        return self._command_u32(Command.GETPIDIQFDB)

    def get_pid_id_fdb(self):
        """Feedback of the Id PID."""
        return self._command_u32(Command.GETPIDIDFDB)

    def get_pid_spd_fdb(self):
        """Feedback of the speed PID."""
        return self._command_u32(Command.GETPIDSPDFDB)

    def get_pid_pos_fdb(self):
        """Feedback of the position PID."""
        return self._command_u32(Command.GETPIDPOSFDB)

    def get_iq_ref(self):
        """Reference of the Iq current."""
        return self._read_checked32(70)

    def set_iq_ref(self, value):
        """Set the reference of the Iq current."""
        self.write_register32(70, value)

    def get_id_ref(self):
        """Reference of the Id current."""
        return self._read_checked32(72)

    def set_id_ref(self, value):
        """Set the reference of the Id current."""
        self.write_register32(72, value)

    def get_encoder_type(self):
        """Encoder interface in use."""
        self._require_address()
        return _be(self._command(Command.GETENCODERTYPE), 1)

    def set_encoder_type(self, encoder_type):
        """Select the encoder interface."""
        self._command(Command.SETENCODERTYPE, encoder_type)

    def elec_theta_generation(self, mode):
        """Turn generation of the electrical angle from the encoder on or off."""
        if mode == ELECTTHETA_ON:
            self._command(Command.ENCODERENABLE)
        else:
            self._command(Command.ENCODERDISABLE)

    def get_max_speed(self):
        """Maximum motor speed."""
        return self._read_checked(78)

    def set_max_speed(self, speed):
        """Set and apply the maximum motor speed."""
        self.write_register(78, speed)
        self._command(Command.ENCPARAMUPDATE)

    def get_ramps(self):
        """Ramp bit of the mode register: 0 with ramps on, 1 with ramps off."""
        self._require_address()
        return (self.read_register(MODE_REGISTER) >> ModeBit.RAMP) & 1

    def set_ramps(self, mode):
        """Turn acceleration and deceleration ramps on or off."""
        self._require_address()
        value = self.read_register(MODE_REGISTER)
        if mode == RAMP_ON:
            value &= ~ModeBit.RAMP.mask
        else:
            value |= ModeBit.RAMP.mask
        self.write_register(MODE_REGISTER, value)