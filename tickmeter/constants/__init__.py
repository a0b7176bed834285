"""Constants for tickmeter.

- ``tickmeter.constants.pulses`` - tick resolutions used when reading and writing MIDI
- ``tickmeter.constants.velocity`` - velocities used when exporting notes

The quantization and default-value constants live here directly because
every stage of the conversion pipeline reads them.
"""

# Quantization: a continuous position snaps to the first n/d (d = 1, 2, ...)
# within QUANTIZE_TOLERANCE of it.
QUANTIZE_TOLERANCE = 0.001
MAX_DENOMINATOR = 59

# Values assumed when a file carries no meter or tempo of its own.
DEFAULT_METER_NUMERATOR = 4
DEFAULT_METER_DENOMINATOR = 4
DEFAULT_BPM = 120

# Measures appended after the last exported meter change so that trailing
# positions can still be interpolated.
EXPORT_TAIL_MEASURES = 10000

# General MIDI reserves channel 10 (index 9) for percussion.
MIDI_PERCUSSION_CHANNEL = 9
MIDI_CHANNELS = 16
