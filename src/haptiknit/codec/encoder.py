"""
Single-byte command encoder for the PortFlow8 firmware.

The Wire Format
===============

Every command the console sends is exactly one byte written to the
``command`` characteristic::

    [payload]
     0..255

The firmware reads two dialects of that byte:

- **DIRECT**: the payload is the logical value unmodified.
- **OFFSET**: the payload is the value plus one, so that 0 stays free as a
  sentinel on the wire.

Message Flow
------------

::

    Operator clicks actuator 3 (id 2)
          ↓
    Dispatcher.dispatch_action(2)
      mode = config.commands.mode_for(CommandKind.SELECT)   # OFFSET
          ↓
    CommandEncoder.payload(2, OFFSET)  ->  b"\\x03"
          ↓
    TransportSession.write(Channel.COMMAND, 3)

Reserved values (stop-all = 100, inflate-all = 11) are configuration
constants. The encoder treats them like any other integer.
"""

import logging

from haptiknit.exceptions import EncodingRangeError
from haptiknit.models import EncodingMode

logger = logging.getLogger(__name__)

BYTE_MIN = 0
BYTE_MAX = 255


class CommandEncoder:
    """
    Maps logical values to wire payloads.

    All methods are static; the encoder holds no state.
    """

    @staticmethod
    def encode(value: int, mode: EncodingMode = EncodingMode.DIRECT) -> int:
        """
        Encode a logical value into a payload byte value.

        Args:
            value: Logical action or pressure value
            mode: Encoding mode

        Returns:
            Payload in 0-255

        Raises:
            EncodingRangeError: If the value is not an integer or the payload
                does not fit in one byte
        """
        # bool is an int subclass but never a valid command
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingRangeError(value)

        payload = value + 1 if mode == EncodingMode.OFFSET else value

        if not BYTE_MIN <= payload <= BYTE_MAX:
            raise EncodingRangeError(value, payload)

        logger.debug(f"Encoded {value} ({mode.value}) -> {payload}")
        return payload

    @staticmethod
    def payload(value: int, mode: EncodingMode = EncodingMode.DIRECT) -> bytes:
        """Encode a logical value into the bytes sent on the wire."""
        return bytes([CommandEncoder.encode(value, mode)])
