# sr2700

A Python driver for brushless motor control modules that speak an
addressed, CRC-checked request/response protocol over a serial line.

## What is in the package

- `sr2700.serialport.SerialLink`: a serial port (opened through pyserial's
  `serial_for_url`, so device names and pyserial URLs both work) whose
  `read(size)` and `write(data)` move whole buffers within `timeout_ms`.
  On a half-duplex line `write` also consumes the echo of what it sent.
  `discard_input()` drops pending input. It can be used as a context manager.
- `sr2700.comminterface.CommInterface`: a queue of 128 transaction slots
  serviced by a worker. `start()` runs the worker in a background thread,
  `stop()` ends it, and `process_pending()` carries out one queued
  transaction by hand. `send(data, expected_bytes)` queues a frame and
  returns its slot number; `receive(slot)` returns `(SlotState, reply)` and
  frees a finished slot. Replies are framed per `Protocol.TWS` (length taken
  from the reply header) or `Protocol.EVER` (a fixed expected length).
  Frames addressed to 0 are broadcasts and get no reply. It is also a
  context manager that starts and stops the worker.
- `sr2700.serialcom`: `crc_modbus(data)` (Modbus CRC-16, high byte first
  as sent on the wire), `build_frame(address, command, payload)`, and
  `send(...)` / `send_command(...)`, which retry a request up to three
  times on a missing or corrupt reply and return the reply's data bytes.
  `send_command` with `activated=False` sends nothing and returns `b""`.
- `sr2700.drive.BrushlessModule`: the full drive API. It builds on
  `sr2700.tuning.TuningDrive` (encoders, logger, PID sets, ADC offsets,
  diagnostics) and `sr2700.motion.DriveBase` (register access, motion,
  current-loop PIDs). PID gains and limits travel as
  `sr2700.motion.PIDParams`.
- `sr2700.commands.Command`: the command codes of the bus protocol.
- `sr2700.constants`: flags and selectors such as `MotorStatus`,
  `PIDStatus`, `EncoderStatus`, `MotorCommand`, `PIDSet`, `EncoderType`,
  `EncoderDirection`, `SpeedUnit`, `LogChannel`, `LoggerInput`,
  `AdcChannel`, `HomingSpeed`, `Level`, `ModeBit` and `SpeedProfile`.

## Installation

```
pip install .
```

## Usage

```python
from sr2700.serialport import SerialLink
from sr2700.comminterface import CommInterface, Protocol
from sr2700.drive import BrushlessModule
from sr2700.constants import MotorCommand, MotorStatus, SpeedUnit

link = SerialLink(port=None, timeout_ms=100, half_duplex=False)
link.open("/dev/ttyUSB0", 57600, False)

comm = CommInterface(link, Protocol.TWS)
comm.start()

drive = BrushlessModule(comm, 1)
print("firmware:", hex(drive.get_version()))

drive.motor_enable(MotorCommand.ON)
drive.maximum_freq(20000)
drive.acceleration(50000)
drive.goto_pos0(100000)

if drive.motor_status() & MotorStatus.RUNNING:
    print("moving, speed =", drive.get_encoder_actual_speed(SpeedUnit.RPM))

comm.stop()
link.close()
```

A few points about values and behaviour:

- `get_version()` returns `(major << 8) + minor` and keeps `(major, minor)`
  in `drive.firmware`. `reset_speed()` does nothing until the stored
  version is 5.1 or later.
- 32-bit values held in two registers (`read_register32`) are read as
  signed; values returned by commands (encoder position, speeds, PID
  outputs and feedbacks) and `actual_position()` are unsigned 32-bit.
- `get_logger_channel_data(channel)` returns 100 signed 16-bit samples and
  also stores them in `drive.log_data[channel]`.
- Setting `drive.serial_com_active = False` suspends command traffic:
  commands return no data and register reads return 0.
- Several read methods refuse the broadcast address 0.

## Errors

Failures raise exceptions:

- `sr2700.serialport.SerialError` for link problems and timeouts;
- `sr2700.comminterface.QueueFullError` when no queue slot is free;
- `sr2700.serialcom.BusError` when a request fails after its retries or
  its payload is too long;
- `sr2700.motion.DriveError` for drive-level errors (bus failures are
  re-raised as this, and reads on the broadcast address raise it);
- `ValueError` for an unknown motor command, speed unit or logger channel.

## What it does not do

This package is a library only. It has no graphical interface, no camera
view and no command-line program; machine screens and operator controls
are left to the application that uses it.

## Tests

```
pip install .[test]
pytest
```