"""Complete brushless drive module: motion profile, safety and I/O settings."""

from __future__ import annotations

from .commands import Command
from .constants import (
    DANGERLIMIT_ON,
    DECCOMP_ON,
    LOWTOHIGH_TRIG,
    SECURITYCHECK_ON,
    EncoderStatus,
    HomingSpeed,
    Level,
    ModeBit,
    PIDStatus,
)
from .motion import MODE_REGISTER, _be
from .tuning import TuningDrive

# First firmware release that knows the speed reset command.
_RESET_SPEED_FIRMWARE = (5, 1)


def _u32(value: int) -> bytes:
    return (value & 0xFFFFFFFF).to_bytes(4, "big")


class BrushlessModule(TuningDrive):
    """A brushless drive module with its full command set."""

    # ------------------------------------------------------------ motion profile

    def actual_start_stop_velocity(self):
        """Configured start/stop speed."""
        return self._read_checked32(79)

    def actual_acceleration(self):
        """Configured acceleration."""
        return self._read_checked32(81)

    def actual_deceleration(self):
        """Configured deceleration."""
        return self._read_checked32(103)

    def set_actual_pid_spd(self, pid_set):
        """Select the active parameter set of the speed PID."""
        self._command(Command.SETACTPIDSPD, pid_set)

    def set_actual_pid_pos(self, pid_set):
        """Select the active parameter set of the position PID."""
        self._command(Command.SETACTPIDPOS, pid_set)

    def logger_trigger_mode(self, mode):
        """Trigger the logger on a rising or a falling edge."""
        if mode == LOWTOHIGH_TRIG:
            self._command(Command.LOWTOHIGHTRIG)
        else:
            self._command(Command.HIGHTOLOWTRIG)

    def get_encoder_actual_pulses(self):
        """Encoder pulse count, as an unsigned 32-bit value."""
        return self._command_u32(Command.GETENCODERPULSES)

    def set_phase_current(self, value):
        """Set the phase current."""
        self.write_register32(99, value)

    def get_phase_current(self):
        """Configured phase current."""
        return self._read_checked32(99)

    def get_deceleration_advance(self):
        """Deceleration advance."""
        return self._read_checked(101)

    def set_deceleration_advance(self, value):
        """Set the deceleration advance."""
        self.write_register(101, value)

    def get_pulses_to_mm(self):
        """Encoder pulses per millimetre."""
        return self._read_checked(102)

    def set_pulses_to_mm(self, ptm):
        """Set and apply the encoder pulses per millimetre."""
        self.write_register(102, ptm)
        self._command(Command.PTMUPDATE)

    def dec_compensation_mode(self, mode):
        """Turn deceleration compensation on or off."""
        if mode == DECCOMP_ON:
            self._command(Command.DECCOMPENABLE)
        else:
            self._command(Command.DECCOMPDISABLE)

    def set_proximity_gap(self, value):
        """Set the distance at which the target counts as near."""
        self.write_register32(105, value)

    def get_proximity_gap(self):
        """Distance at which the target counts as near."""
        return self._read_checked32(105)

    def set_pid_pos_activation_gap(self, value):
        """Set the distance at which the position PID takes over."""
        self.write_register32(107, value)

    def get_pid_pos_activation_gap(self):
        """Distance at which the position PID takes over."""
        return self._read_checked32(107)

    def set_ipark_angle(self, value):
        """Set the inverse Park transform angle."""
        self.write_register32(109, value)

    def get_ipark_angle(self):
        """Inverse Park transform angle."""
        return self._read_checked32(109)

    # -------------------------------------------------------------------- safety

    def get_danger_limit(self, limit):
        """Software movement limit on the low or high side."""
        return self._read_checked32(111 if limit == Level.LOW else 113)

    def set_danger_limit(self, limit, value):
        """Set the software movement limit on the low or high side."""
        self.write_register32(111 if limit == Level.LOW else 113, value)

    def danger_limit_mode(self, mode):
        """Turn the software movement limits on or off."""
        if mode == DANGERLIMIT_ON:
            self._command(Command.DANGERENABLE)
        else:
            self._command(Command.DANGERDISABLE)

    def reset_encoder(self):
        """Zero the encoder count."""
        self._command(Command.RESETENCODER)

    def home_sensor_input(self, value):
        """Select the input wired to the home sensor."""
        self.write_register(115, value)

    def get_homing_speed(self, speed):
        """Slow or fast homing speed."""
        return self._read_checked32(118 if speed == HomingSpeed.SLOW else 116)

    def set_homing_speed(self, speed, value):
        """Set the slow or fast homing speed."""
        self.write_register32(118 if speed == HomingSpeed.SLOW else 116, value)

    def get_over_speed(self):
        """Overspeed threshold."""
        return self._read_checked(120)

    def set_over_speed(self, value):
        """Set the overspeed threshold."""
        self.write_register(120, value)

    def set_reference_actual_pos(self):
        """Take the current position as the reference."""
        self._command(Command.SETREFACTUALPOS)

    def reset_pid_spd(self):
        """Reset the speed PID."""
        self._command(Command.PIDSPDRESET)

    def reset_pid_pos(self):
        """Reset the position PID."""
        self._command(Command.PIDPOSRESET)

    def pid_status(self):
        """Which PID parameter sets are active."""
        return PIDStatus(self._read_checked(133))

    def get_max_read_current(self):
        """Maximum measurable current."""
        return self._read_checked(134)

    def set_max_read_current(self, value):
        """Set and apply the maximum measurable current."""
        self.write_register(134, value)
        self._command(Command.UPDATECURRENT)

    # -------------------------------------------------------------- diagnostics

    def get_phase_c(self):
        """Current of phase C."""
        return self._command_u32(Command.GETPHASEC)

    def get_encoder360_actual_position(self):
        """Encoder position within one revolution."""
        return self._command_u32(Command.GETENCODER360)

    def get_elec_theta(self):
        """Electrical angle."""
        return self._command_u32(Command.GETELECTHETA)

    # ------------------------------------------------------------- feed-forward

    def get_acc_ffwd(self):
        """Acceleration feed-forward."""
        return self._read_checked32(147)

    def set_acc_ffwd(self, value):
        """Set the acceleration feed-forward."""
        self.write_register32(147, value)

    def get_spd_ffwd(self):
        """Speed feed-forward."""
        return self._read_checked32(149)

    def set_spd_ffwd(self, value):
        """Set the speed feed-forward."""
        self.write_register32(149, value)

    def get_max_jerk(self):
        """Maximum jerk."""
        return self._read_checked(144)

    def set_max_jerk(self, value):
        """Set the maximum jerk."""
        self.write_register(144, value)

    def get_c_friction(self):
        """Coulomb friction compensation."""
        return self._read_checked32(153)

    def set_c_friction(self, value):
        """Set the Coulomb friction compensation."""
        self.write_register32(153, value)

    def get_end_movement_speed(self):
        """Speed below which a movement counts as finished."""
        return self._read_checked32(145)

    def set_end_movement_speed(self, value):
        """Set the speed below which a movement counts as finished."""
        self.write_register32(145, value)

    def get_end_movement_delta(self):
        """Position window of the movement end; only the low word is reported."""
        self._require_address()
        _high, low = self._read_pair(142)
        return low

    def set_end_movement_delta(self, value):
        """Set the position window of the movement end."""
        self.write_register32(142, value)

    # ---------------------------------------------------------------- multi-move

    def goto_pos0_multi(
        self, add_x, pos_x, add_y, pos_y, max_freq, acc, proximity_delta_x, proximity_delta_y
    ):
        """Move two axes to absolute positions together."""
        payload = (
            bytes((add_x & 0xFF,))
            + _u32(pos_x)
            + _u32(proximity_delta_x)
            + bytes((add_y & 0xFF,))
            + _u32(pos_y)
            + _u32(proximity_delta_y)
            + _u32(max_freq)
            + _u32(acc)
        )
        self._send(Command.MULTIMOVE, payload)

    def reset_flag_multi(self):
        """Clear the multi-move completion flag."""
        self._command(Command.RESET_MULTIMOVE)

    # ------------------------------------------------------------ second encoder

    def get_encoder2_actual_position(self):
        """Position of the second encoder."""
        return self._command_u32(Command.GETENCODER2)

    def get_encoder2_actual_pulses(self):
        """Pulse count of the second encoder."""
        return self._command_u32(Command.GETENCODER2PULSES)

    def get_line_encoder2(self):
        """Lines of the second encoder."""
        return self._read_checked32(140)

    def set_line_encoder2(self, lines):
        """Set and apply the lines of the second encoder."""
        self.write_register32(140, lines)
        self._command(Command.LINEENC2UPDATE)

    def get_encoder_interp_actual_position(self):
        """Interpolated encoder position."""
        return self._command_u32(Command.GETENCODERINTERP)

    def get_status_reset_flag_multi(self):
        """Motor status, clearing the multi-move flag."""
        self._require_address()
        return _be(self._command(Command.GETSTATUS_RESETMM), 2)

    def set_following_error(self, value):
        """Set the tolerated trajectory following error."""
        self.write_register32(162, value)

    def get_following_error(self):
        """Tolerated trajectory following error."""
        return self._read_checked32(162)

    def encoder_status(self):
        """Serial encoder error flags."""
        return EncoderStatus(self._read_checked(164))

    def set_start_ticks(self, ticks):
        """Set the start ticks."""
        self.write_register(2, ticks & 0xFFFF)

    def set_phase_rotation(self, value):
        """Rotate the phases without encoder in the given direction."""
        self._command(Command.ROTATEPHASE, value)

    def set_phase_rotation_number(self, value):
        """Set the number of phase rotations."""
        self.write_register(57, value)

    def set_speed_filter(self, window):
        """Set the window of the speed filter."""
        self._command(Command.UPDATESPDFILTER, window)

    def set_security_check(self, enabled, level):
        """Enable or disable the security sensor check and choose its active level."""
        mode = self.read_register(MODE_REGISTER)
        if enabled == SECURITYCHECK_ON:
            mode |= ModeBit.SECURITY.mask
        else:
            mode &= ~ModeBit.SECURITY.mask
        if level == Level.HIGH:
            mode |= ModeBit.SECURITY_LEVEL.mask
        else:
            mode &= ~ModeBit.SECURITY_LEVEL.mask
        self.write_register(MODE_REGISTER, mode)

    def set_security_input(self, value):
        """Select the input wired to the security sensor."""
        self.write_register(166, value & 0xFFFF)

    # ------------------------------------------------------- newer firmware only

    def get_v_power(self):
        """Power supply voltage."""
        return self._command_u32(Command.GETVPWR)

    def get_temperature(self):
        """Sensor temperature."""
        return _be(self._command(Command.GETSENSORTEMP), 2)

    def set_steady_pos_follow_error(self, value):
        """Set the tolerated error while holding position."""
        self.write_register32(167, value)

    def get_steady_pos_follow_error(self):
        """Tolerated error while holding position."""
        return self._read_checked32(167)

    def set_encoder_spike_delta(self, delta):
        """Set the encoder spike rejection threshold."""
        self.write_register(169, delta & 0xFFFF)

    def get_encoder_spike_delta(self):
        """Encoder spike rejection threshold."""
        return self._read_checked(169)

    def set_speed_profile(self, mode):
        """Select the motion profile shape."""
        self._command(Command.SETPROFILE, mode)

    def update_over_speed(self):
        """Apply the overspeed threshold."""
        self._command(Command.UPDATEOVERSPEED)

    def over_speed_check(self, enable):
        """Turn the overspeed check on or off."""
        self._command(Command.OVERSPEEDCHECK, enable)

    def set_home_sensor_level(self, level):
        """Set the active level of the home sensor."""
        self._command(Command.HOMESENSORMODE, level)

    def set_outputs(self, output, level):
        """Drive a digital output low or high."""
        if level == Level.LOW:
            self._command(Command.SET_OUTPUT_LOW, output)
        else:
            self._command(Command.SET_OUTPUT_HIGH, output)

    def reset_speed(self):
        """Reset the speed; ignored by firmware older than the stored version 5.1."""
        if self.firmware < _RESET_SPEED_FIRMWARE:
            return
        self._command(Command.RESETSPEED)