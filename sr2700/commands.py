"""Command codes understood by the brushless drive firmware."""

from enum import IntEnum, unique


@unique
class Command(IntEnum):
    """Command byte sent in the second position of every bus frame."""

    READREGISTER = 1
    WRITEREGISTER = 2
    GETVERSION = 3
    MICRORESET = 4
    SUSPENDSERIAL = 5
    LOOPENABLE = 6
    LOOPDISABLE = 7
    GETENCODER = 8
    PIDIQUPDATE = 9
    PIDIDUPDATE = 10
    PIDSPDUPDATE = 11
    PIDPOSUPDATE = 12
    ENCPARAMUPDATE = 13
    CALANGUPDATE = 14
    PPRUPDATE = 15
    LINEENCUPDATE = 16
    LOGTRIGUPDATE = 17
    LOGPRESCALUPDATE = 18
    GETLOG1L = 19
    GETLOG1H = 20
    GETLOG2L = 21
    GETLOG2H = 22
    GETLOG3L = 23
    GETLOG3H = 24
    GETLOG4L = 25
    GETLOG4H = 26
    LOOPSPDENABLE = 27
    GETSPEEDPU = 28
    RESETENCODER = 29
    PWMENABLE = 30
    PWMDISABLE = 31
    PHASEENABLE = 32
    PHASEDISABLE = 33
    ADCCALENABLE = 34
    ADCCALDISABLE = 35
    GETCLARKEA = 36
    GETCLARKEB = 37
    GETPIDIQOUT = 38
    GETPIDIDOUT = 39
    GETPIDSPDOUT = 40
    GETPIDPOSOUT = 41
    GETENCODERTYPE = 42
    SETENCODERTYPE = 43
    GETPIDIQFDB = 44
    GETPIDIDFDB = 45
    GETPIDSPDFDB = 46
    GETPIDPOSFDB = 47
    GETSPEEDRPM = 48
    SETENCODERQEPNORM = 49
    SETENCODERQEPINV = 50
    GETENCODERQEPMODE = 51
    ENCODERDISABLE = 52
    ENCODERENABLE = 53
    POSUPDATE = 54
    DECCOMPDISABLE = 55
    DECCOMPENABLE = 56
    SETACTPIDSPD = 57
    SETACTPIDPOS = 58
    LOWTOHIGHTRIG = 59
    HIGHTOLOWTRIG = 60
    GETENCODERPULSES = 61
    PTMUPDATE = 62
    GETSPEEDMS = 63
    IMMEDIATESTOP = 64
    ALARMRESET = 65
    DANGERDISABLE = 66
    DANGERENABLE = 67
    HOME = 68
    HOMESEARCH = 69
    SETREFACTUALPOS = 70
    PIDSPDRESET = 71
    PIDPOSRESET = 72
    UPDATECURRENT = 73
    GETPHASEC = 74
    GETENCODER360 = 75
    GETELECTHETA = 76
    SET_OUTPUT_LOW = 77
    SET_OUTPUT_HIGH = 78
    MULTIMOVE = 79
    RESET_MULTIMOVE = 80
    GETENCODER2 = 81
    GETENCODER2PULSES = 82
    GETENCODERTRANSITIONS = 83
    LINEENC2UPDATE = 84
    SETENCODERSERNORM = 85
    SETENCODERSERINV = 86
    GETENCODERSERMODE = 87
    GETENCODERINTERP = 88
    GETSTATUS_RESETMM = 89
    ROTATEPHASE = 90
    GETCOMPLEXSTATUS = 91
    UPDATESPDFILTER = 92
    # firmware 4.10 and later
    GETVPWR = 93
    # firmware 4.11 and later
    GETSENSORTEMP = 94
    # firmware 4.12 and later
    SETPROFILE = 95
    # firmware 4.15 and later
    UPDATEOVERSPEED = 96
    OVERSPEEDCHECK = 97
    # firmware 4.18 and later
    HOMESENSORMODE = 98
    # firmware 5.1 and later
    RESETSPEED = 99