"""Protocol version and wire limits."""

# Increment when making breaking changes to the wire format.
# 0 is reserved on the wire to mean "unspecified, use the baseline".
PROTOCOL_VERSION = 1

# Largest accepted line, in UTF-8 bytes, newline excluded.
MAX_MESSAGE_SIZE = 10 * 1024 * 1024
