"""Tick resolutions (pulses per quarter note).

A resolution is the number of ticks in one quarter note. Reading uses
whatever resolution the source declares; writing uses ``EXPORT_RESOLUTION``
unless the settings say otherwise.
"""

EXPORT_RESOLUTION = 480

# A quarter note is a quarter of a whole note: ticks per measure are
# resolution * QUARTERS_PER_WHOLE * numerator / denominator.
QUARTERS_PER_WHOLE = 4
