# parker_oem750x/constants.py
"""
Constants for the Parker OEM750X driver library.
Includes the wire delimiter, serial defaults, command mnemonics and the
argument ranges documented for the OEM750X indexer/drive.
"""

# Framing
CR = b"\r"
CR_STR = "\r"
NUL = b"\x00"
REPLY_MARKER = "*"

# Default serial parameters (9600 8N1 as used on the bench)
SERIAL_DEFAULT_BAUDRATE = 9600
SERIAL_DEFAULT_BYTESIZE = 8
SERIAL_DEFAULT_PARITY = "N"
SERIAL_DEFAULT_STOPBITS = 1
SERIAL_TIMEOUT_SECONDS = 1.0  # Read/write timeout for a single delimiter-terminated frame

# Channels (daisy-chain device addresses)
MIN_CHANNEL = 1
MAX_CHANNEL = 255

# Command mnemonics
CMD_NORMAL_MODE = "MN"
CMD_CONTINUOUS_MODE = "MC"
CMD_ABSOLUTE_MODE = "MPA"
CMD_INCREMENTAL_MODE = "MPI"
CMD_ZERO_POSITION = "PZ"
CMD_GO = "G"
CMD_STOP = "S"
CMD_KILL = "K"
CMD_RESET = "Z"
CMD_RESET_COMMUNICATION = "%"
CMD_GO_HOME = "GH"
CMD_VELOCITY = "V"
CMD_ACCELERATION = "A"
CMD_DISTANCE = "D"
CMD_RESOLUTION = "MR"
CMD_MOVEMENT_MODE = "FSA"
CMD_END_LIMITS_STATE = "OSA"
CMD_INDEXER_MODE = "FSB"
CMD_POLARITY = "CMDDIR"
CMD_ERROR_CHECKING = "SSE"
CMD_SHUTDOWN = "ST"
CMD_DISABLE_SWITCH = "LD"
CMD_DIRECTION = "H"

# Query mnemonics
CMD_PART_NUMBER = "RV"
CMD_INDEXER_STATUS = "R"
CMD_LIMITS_STATUS = "RA"  # Closed-loop and limit status share this register
CMD_ABSOLUTE_POSITION = "PR"
CMD_RELATIVE_POSITION = "W3"

# Argument ranges
VELOCITY_MIN = 0.001  # rps
VELOCITY_MAX = 50.0
ACCELERATION_MIN = 0.01  # rps^2
ACCELERATION_MAX = 999.0
DISTANCE_MIN = -2147483648  # steps
DISTANCE_MAX = 2147483648
RESOLUTION_MIN = 200  # steps/rev
RESOLUTION_MAX = 50800
HOMING_SPEED_MIN = 0.01  # rps, the GH command documents a tighter lower bound than V
HOMING_SPEED_MAX = 50.00

# Hard homing
HOMING_POLL_INTERVAL_SECONDS = 0.1
HOMING_RELEASE_POLL_INTERVAL_SECONDS = 0.0
HOMING_RETRACT_VELOCITY = 0.01

# Relative position (W3) decoding
POSITION_WORD_MASK = 0xFFFFFFFF
POSITION_SIGN_BIT = 0x80000000
