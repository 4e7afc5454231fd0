"""Flags, modes and selectors used by the brushless drive interface."""

from enum import IntEnum, IntFlag

MOTOR_DATA_LEN = 512
LOG_BUF_SIZE = 100

# Motion direction and misc selectors
CW = 0x01
CCW = 0x00

# Electrical zero calibration parameters
CAL_ANGLE_CURRENT = 0.3
CAL_PHASE_ROT_DELAY = 2000
CAL_ANGLE_DELAY = 2000
CAL_PARKANGLE = 0.1
CAL_ERROR = 40

# On/off switches whose encodings differ between functions
LIMITCHECK_OFF = 0
LIMITCHECK_ON = 1
SECURITYCHECK_OFF = 0
SECURITYCHECK_ON = 1
PWM_OFF = 0
PWM_ON = 1
ADCCAL_OFF = 0
ADCCAL_ON = 1
RAMP_ON = 0
RAMP_OFF = 1
DECCOMP_ON = 0
DECCOMP_OFF = 1
DANGERLIMIT_ON = 0
DANGERLIMIT_OFF = 1
ELECTTHETA_ON = 0
ELECTTHETA_OFF = 1
LOWTOHIGH_TRIG = 0
HIGHTOLOW_TRIG = 1
ZEROSEARCH_POS = 0
ZEROSEARCH_NEG = 1
ZEROLEVEL_HIGH = 0
ZEROLEVEL_LOW = 1
PHASEROT_DISABLE = 0
PHASEROT_POS = 1
PHASEROT_NEG = 2


class MotorStatus(IntFlag):
    """Bits of the motor status register."""

    RUNNING = 0x0001
    OVERCURRENT = 0x0002
    PROCERROR = 0x0004
    TIMEOUT = 0x0008
    ZERO = 0x0010
    OVERRUN = 0x0020
    DANGER = 0x0040
    OVERSPEED = 0x0080
    NOENC = 0x0100
    PIDSPDON = 0x0200
    PIDPOSON = 0x0400
    NEARTARGET = 0x0800
    MULTIMOVE = 0x1000
    NO_FOLLOW = 0x2000
    SECURITY = 0x4000
    STEADYPOS = 0x8000


class PIDStatus(IntFlag):
    """Bits of the PID status register: which parameter sets are active."""

    SPD_DEF = 0x0001
    SPD_0 = 0x0002
    SPD_SPD = 0x0004
    POS_DEF = 0x0008
    POS_0 = 0x0010


class EncoderStatus(IntFlag):
    """Bits of the serial encoder status register."""

    MF_ERROR = 0x0001
    OVERRUN_ERROR = 0x0002
    FRAME_ERROR = 0x0004


class LogChannel(IntEnum):
    """Channels of the on-drive data logger."""

    CH1 = 0
    CH2 = 1
    CH3 = 2
    CH4 = 3


class LoggerInput(IntEnum):
    """Signals that can be routed to a logger channel."""

    MECHTHETA = 0
    SPEED = 1
    CLARKA = 2
    CLARKB = 3
    PIDIDOUT = 4
    PIDIQOUT = 5
    PIDIDFDB = 6
    PIDIQFDB = 7
    PIDIDREF = 8
    PIDIQREF = 9
    SPEEDREF = 10
    POSREF = 11
    POSERR = 12
    PIDIDERR = 13
    PIDIQERR = 14
    SPEEDERR = 15
    SPEEDREFNOPOS = 16
    ELECERROR = 17
    ELECRAMP = 18
    VPWR = 19


class MotorCommand(IntEnum):
    """Control loop activation commands."""

    OFF = 0
    ON = 1
    SPD_ON = 2


class EncoderType(IntEnum):
    """Encoder interface: quadrature or serial."""

    QEP = 0
    SER = 1


class EncoderDirection(IntEnum):
    """Counting direction of the encoder."""

    NORMAL = 0
    INVERTED = 1


class SpeedUnit(IntEnum):
    """Unit in which the encoder speed is reported."""

    PU = 0
    RPM = 1
    MS = 2


class PIDSet(IntEnum):
    """Parameter set of the speed or position PID."""

    DEF = 0
    ZERO = 1
    SPD = 2


class AdcChannel(IntEnum):
    """Current measurement ADC channels."""

    CH0 = 0
    CH1 = 1
    CH2 = 2


class HomingSpeed(IntEnum):
    """Speed used during the homing search."""

    SLOW = 0
    FAST = 1


class Level(IntEnum):
    """Logic level of a signal or limit side."""

    LOW = 0
    HIGH = 1


class ModeBit(IntEnum):
    """Bit positions inside the drive mode register."""

    LIMITS = 0
    LIMITS_LEVEL = 1
    RAMP = 2
    SECURITY = 3
    SECURITY_LEVEL = 4

    @property
    def mask(self) -> int:
        """Register mask selecting this bit."""
        return 1 << self.value


class SpeedProfile(IntEnum):
    """Motion profile shape."""

    FIFTH_DEGREE = 0
    TRAPEZOIDAL = 1