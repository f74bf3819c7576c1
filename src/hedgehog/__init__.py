"""hedgehog -- Remote-control client for the Hedgehog rover.

Keeps a TCP session to the device open and sends it single-byte movement
commands. The device answers nothing; when it closes the connection, or
sends anything at all, the session ends.
"""

__version__ = "0.1.0"
