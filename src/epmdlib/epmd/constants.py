# epmdlib/epmd/constants.py
"""
EPMD protocol constants.

Spec: https://www.erlang.org/doc/apps/erts/erl_dist_protocol.html
"""

import re

# Default port EPMD listens on
EPMD_DEFAULT_PORT = 4369

# Request opcodes
ALIVE2_REQ = 120
PORT_PLEASE2_REQ = 122
NAMES_REQ = 110
DUMP_REQ = 100
KILL_REQ = 107

# Response opcodes
ALIVE_RESP = 121
ALIVE2_X_RESP = 118   # 4-byte creation (OTP 23+)
PORT2_RESP = 119

# Node types
NODE_TYPE_NORMAL = 77   # 'M'
NODE_TYPE_HIDDEN = 72   # 'H'

# Protocols
PROTOCOL_IPV4 = 0

# Distribution versions understood by this client
HIGHEST_VERSION = 6
LOWEST_VERSION = 5

# One line of a NAMES_REQ / DUMP_REQ listing, e.g.
#   name foo at port 34567
#   active name     <foo> at port 34567, fd = 7
NODE_REGEXP = re.compile(r'.*name\s*<?([^>\s]+)>?\s.*at port (\d+)(, fd = (\d+))?.*', re.IGNORECASE | re.ASCII)

# Creation bytes following the status byte of a successful ALIVE reply
CREATION_SIZE = {
    ALIVE_RESP: 2,
    ALIVE2_X_RESP: 4,
}

# NAMES/DUMP replies open with EPMD's own port as a u32
EPMD_PORT_PREFIX_SIZE = 4
