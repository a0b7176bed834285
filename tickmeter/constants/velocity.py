"""MIDI velocity constants.

The score model carries no dynamics, so every exported note uses the same
attack strength.
"""

DEFAULT_EXPORT_VELOCITY = 60

# MIDI standard range
MIN_VELOCITY = 0
MAX_VELOCITY = 127
