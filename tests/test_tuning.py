from collections import defaultdict

import pytest

from sr2700.commands import Command
from sr2700.comminterface import SlotState
from sr2700.constants import (
    ELECTTHETA_OFF,
    ELECTTHETA_ON,
    PWM_OFF,
    PWM_ON,
    RAMP_OFF,
    RAMP_ON,
    AdcChannel,
    LogChannel,
    PIDSet,
    SpeedUnit,
)
from sr2700.motion import DriveError, PIDParams
from sr2700.serialcom import build_frame
from sr2700.tuning import TuningDrive

_REGISTER_COMMANDS = (Command.READREGISTER, Command.WRITEREGISTER)


class FakeBus:
    """Answers requests like a drive with a register file."""

    def __init__(self):
        self.registers = defaultdict(int)
        self.responses = {}
        self.requests = []
        self.frames = []
        self.fail = False
        self._replies = {}
        self._next = 0

    def send(self, data, expected_bytes=0):
        address, code = data[0], data[1]
        length = int.from_bytes(data[2:4], "big")
        payload = bytes(data[4 : 4 + length])
        self.requests.append((Command(code), payload))
        self.frames.append(bytes(data))
        if code == Command.READREGISTER:
            reply = self.registers[payload[0]].to_bytes(2, "big")
        elif code == Command.WRITEREGISTER:
            self.registers[payload[0]] = int.from_bytes(payload[1:3], "big")
            reply = b""
        else:
            reply = self.responses.get(code, b"")
        slot = self._next
        self._next += 1
        self._replies[slot] = build_frame(address, code, reply)
        return slot

    def receive(self, slot):
        reply = self._replies.pop(slot)
        if self.fail:
            return SlotState.ERROR, b""
        return SlotState.DONE, reply

    def commands(self):
        return [request for request in self.requests if request[0] not in _REGISTER_COMMANDS]

    def command_frames(self):
        return [frame for frame in self.frames if frame[1] not in _REGISTER_COMMANDS]


@pytest.fixture
def bus():
    return FakeBus()


@pytest.fixture
def drive(bus):
    return TuningDrive(bus, 3)


@pytest.mark.parametrize("pid_set", [PIDSet.DEF, PIDSet.ZERO])
def test_pid_pos_round_trip(drive, pid_set):
    params = PIDParams(100, 200, 300, 400, 70000, -70000)
    drive.set_pid_pos_params(pid_set, params)
    assert drive.get_pid_pos_params(pid_set) == params


def test_pid_pos_zero_set_is_applied(drive, bus):
    drive.set_pid_pos_params(PIDSet.ZERO, PIDParams(1, 2, 3, 4, 5, 6))
    assert bus.command_frames() == [build_frame(3, Command.PIDPOSUPDATE, b"")]
    assert drive.read_register(92) == 1


def test_pid_pos_default_set_not_applied(drive, bus):
    drive.set_pid_pos_params(PIDSet.DEF, PIDParams(1, 2, 3, 4, 5, 6))
    assert bus.commands() == []
    assert drive.read_register(20) == 1
    assert drive.read_register(28) == 5


def test_pid_spd_reads_set_registers(drive, bus):
    for register, value in {84: 11, 86: 12, 88: 13, 90: 14, 16: 15, 18: 16}.items():
        bus.registers[register] = value
    assert drive.get_pid_spd_params(PIDSet.ZERO) == PIDParams(11, 12, 13, 14, 15, 16)


def test_pid_spd_unknown_set_uses_default(drive, bus):
    bus.registers[8] = 9
    assert drive.get_pid_spd_params(7).kp == 9


def test_broadcast_address_rejected(bus):
    drive = TuningDrive(bus, 0)
    with pytest.raises(DriveError):
        drive.get_poles()
    with pytest.raises(DriveError):
        drive.get_pid_spd_params(PIDSet.DEF)


def test_line_encoder_round_trip(drive, bus):
    drive.set_line_encoder(100000)
    assert drive.get_line_encoder() == 100000
    assert bus.commands() == [(Command.LINEENCUPDATE, b"")]


def test_pulses_per_rev_round_trip(drive, bus):
    drive.set_pulses_per_rev(4096)
    assert drive.get_pulses_per_rev() == 4096
    assert bus.registers[139] == 4096
    assert bus.commands() == [(Command.PPRUPDATE, b"")]


@pytest.mark.parametrize(
    ("setter", "getter", "register", "command"),
    [
        ("set_poles", "get_poles", 58, Command.ENCPARAMUPDATE),
        ("set_calibrated_angle", "get_calibrated_angle", 59, Command.CALANGUPDATE),
        ("set_logger_trigger", "get_logger_trigger", 60, Command.LOGTRIGUPDATE),
        ("set_logger_prescaler", "get_logger_prescaler", 61, Command.LOGPRESCALUPDATE),
        ("set_max_speed", "get_max_speed", 78, Command.ENCPARAMUPDATE),
    ],
)
def test_single_register_settings(drive, bus, setter, getter, register, command):
    getattr(drive, setter)(42)
    assert bus.registers[register] == 42
    assert getattr(drive, getter)() == 42
    assert bus.commands() == [(command, b"")]


def test_logger_channel_data(drive, bus):
    low = b"".join(i.to_bytes(2, "big") for i in range(50))
    high = b"\xff\xff" * 50
    bus.responses[Command.GETLOG2L] = low
    bus.responses[Command.GETLOG2H] = high
    samples = drive.get_logger_channel_data(LogChannel.CH2)
    assert len(samples) == 100
    assert samples[:50] == list(range(50))
    assert samples[50:] == [-1] * 50
    assert drive.log_data[LogChannel.CH2] == samples


def test_logger_channel_invalid(drive):
    with pytest.raises(ValueError):
        drive.get_logger_channel_data(4)


def test_logger_channel_input(drive, bus):
    drive.set_logger_channel_input(LogChannel.CH3, 5)
    assert drive.read_register(64) == 5


@pytest.mark.parametrize(
    ("unit", "command"),
    [
        (SpeedUnit.PU, Command.GETSPEEDPU),
        (SpeedUnit.RPM, Command.GETSPEEDRPM),
        (SpeedUnit.MS, Command.GETSPEEDMS),
    ],
)
def test_encoder_speed(drive, bus, unit, command):
    bus.responses[command] = b"\x00\x00\x01\x00"
    assert drive.get_encoder_actual_speed(unit) == 0x100
    assert bus.commands() == [(command, b"")]


def test_encoder_speed_invalid_unit(drive):
    with pytest.raises(ValueError):
        drive.get_encoder_actual_speed(9)


def test_pwm_enable(drive, bus):
    drive.pwm_enable(PWM_ON)
    drive.pwm_enable(PWM_OFF)
    drive.pwm_enable(7)
    assert bus.frames == [
        build_frame(3, Command.PWMENABLE, b""),
        build_frame(3, Command.PWMDISABLE, b""),
    ]


def test_phase_enable_sends_phase(drive, bus):
    drive.phase_enable(2, PWM_ON)
    drive.phase_enable(1, PWM_OFF)
    assert bus.frames == [
        build_frame(3, Command.PHASEENABLE, b"\x00\x02"),
        build_frame(3, Command.PHASEDISABLE, b"\x00\x01"),
    ]


def test_adc_offset_channel2(drive, bus):
    drive.set_adc_offset(AdcChannel.CH2, 0x00010002)
    assert bus.registers[136] == 1
    assert bus.registers[137] == 2
    assert drive.get_adc_offset(AdcChannel.CH2) == 0x00010002


def test_adc_offset_unknown_channel(drive, bus):
    drive.set_adc_offset(5, 1234)
    assert bus.requests == []
    assert drive.get_adc_offset(5) == 0


def test_iq_and_id_refs_signed(drive):
    drive.set_iq_ref(-5)
    drive.set_id_ref(123456)
    assert drive.get_iq_ref() == -5
    assert drive.get_id_ref() == 123456


def test_diagnostic_reads(drive, bus):
    bus.responses[Command.GETPIDIQOUT] = b"\x12\x34\x56\x78"
    bus.responses[Command.GETCLARKEA] = b"\x00\x00\x00\x07"
    assert drive.get_pid_iq_out() == 0x12345678
    assert drive.get_clarke_a() == 7


def test_encoder_type(drive, bus):
    bus.responses[Command.GETENCODERTYPE] = b"\x01"
    assert drive.get_encoder_type() == 1
    drive.set_encoder_type(1)
    assert bus.commands()[-1] == (Command.SETENCODERTYPE, b"\x00\x01")


def test_elec_theta_generation(drive, bus):
    drive.elec_theta_generation(ELECTTHETA_ON)
    drive.elec_theta_generation(ELECTTHETA_OFF)
    assert bus.frames == [
        build_frame(3, Command.ENCODERENABLE, b""),
        build_frame(3, Command.ENCODERDISABLE, b""),
    ]


def test_ramps_toggle_mode_bit(drive, bus):
    bus.registers[77] = 0b11
    drive.set_ramps(RAMP_OFF)
    assert bus.registers[77] == 0b111
    assert drive.get_ramps() == 1
    drive.set_ramps(RAMP_ON)
    assert bus.registers[77] == 0b11
    assert drive.get_ramps() == 0


def test_inactive_serial_skips_traffic(drive, bus):
    bus.registers[58] = 8
    drive.serial_com_active = False
    assert drive.get_poles() == 0
    assert drive.get_clarke_b() == 0
    assert bus.requests == []


def test_bus_failure_raises(drive, bus):
    bus.fail = True
    with pytest.raises(DriveError):
        drive.get_poles()