"""
Immutable value types shared by every stage: meters, tempi and quantized positions.

All three compare by value, so two ``Meter(3, 8)`` instances are
interchangeable as dictionary keys or timeline values.
"""

import dataclasses
import fractions
import math

import mido

import tickmeter.constants
import tickmeter.constants.pulses
import tickmeter.errors


@dataclasses.dataclass (frozen=True)
class Meter:

	"""
	A time signature. The denominator must be a power of two of at least 2: a
	MIDI denominator power of 0 is read as malformed, so a meter over 1 could be
	written but never read back.
	"""

	numerator: int
	denominator: int

	def __post_init__ (self) -> None:

		if self.numerator <= 0 or self.denominator < 2 or self.denominator & (self.denominator - 1):
			raise tickmeter.errors.InvalidMeter(self.numerator, self.denominator)

	@classmethod
	def from_midi (cls, numerator: int, denominator_power: int) -> "Meter":

		"""
		Build a meter from the bytes of a MIDI time signature message.

		The denominator is stored in the file as a power of two; a power of
		zero (a denominator of 1) is malformed and raises ``InvalidMeter``.
		"""

		denominator = 2 ** denominator_power if denominator_power > 0 else 0

		return cls(numerator, denominator)

	@property
	def denominator_power (self) -> int:

		"""The denominator as the power of two MIDI stores."""

		return self.denominator.bit_length() - 1

	def ticks_per_measure (self, resolution: int) -> float:

		"""
		Number of ticks in one measure at ``resolution`` ticks per quarter note.
		"""

		return resolution * tickmeter.constants.pulses.QUARTERS_PER_WHOLE * self.numerator / self.denominator

	def __str__ (self) -> str:

		return f"{self.numerator}/{self.denominator}"


DEFAULT_METER = Meter(tickmeter.constants.DEFAULT_METER_NUMERATOR, tickmeter.constants.DEFAULT_METER_DENOMINATOR)


@dataclasses.dataclass (frozen=True)
class Tempo:

	"""
	A tempo in whole beats (quarter notes) per minute.
	"""

	bpm: int

	def __post_init__ (self) -> None:

		if self.bpm <= 0:
			raise ValueError(f"Tempo must be positive, got {self.bpm}")

	@classmethod
	def from_microseconds (cls, microseconds_per_quarter: int) -> "Tempo":

		"""
		Build a tempo from a MIDI ``set_tempo`` value (microseconds per quarter note).
		"""

		if microseconds_per_quarter <= 0:
			raise ValueError(f"Microseconds per quarter must be positive, got {microseconds_per_quarter}")

		return cls(max(1, int(round(mido.tempo2bpm(microseconds_per_quarter)))))

	@property
	def microseconds_per_quarter (self) -> int:

		return int(mido.bpm2tempo(self.bpm))

	def __str__ (self) -> str:

		return f"{self.bpm} bpm"


DEFAULT_TEMPO = Tempo(tickmeter.constants.DEFAULT_BPM)


@dataclasses.dataclass (frozen=True, order=True)
class Count:

	"""
	A quantized metric position: a whole number of measures plus a fraction of one.

	The position is held as a single ``Fraction`` in lowest terms, so
	``numerator`` and ``denominator`` describe the whole position:
	one and a third measures is ``numerator=4, denominator=3``.

	Example:
		```python
		count = Count.of(1, 1, 3)

		count.measure        # 1
		count.beat_fraction  # Fraction(1, 3)
		count.numerator      # 4
		```
	"""

	value: fractions.Fraction

	def __post_init__ (self) -> None:

		if not isinstance(self.value, fractions.Fraction):
			object.__setattr__(self, "value", fractions.Fraction(self.value))

	@classmethod
	def of (cls, measure: int, numerator: int = 0, denominator: int = 1) -> "Count":

		"""
		Build the position ``measure + numerator / denominator``.
		"""

		if denominator <= 0:
			raise ValueError(f"Denominator must be positive, got {denominator}")

		return cls(measure + fractions.Fraction(numerator, denominator))

	@property
	def measure (self) -> int:

		return math.floor(self.value)

	@property
	def numerator (self) -> int:

		return self.value.numerator

	@property
	def denominator (self) -> int:

		return self.value.denominator

	@property
	def beat_fraction (self) -> fractions.Fraction:

		"""The position within its measure, in ``[0, 1)``."""

		return self.value - self.measure

	@property
	def is_downbeat (self) -> bool:

		return self.value.denominator == 1

	def __float__ (self) -> float:

		return float(self.value)

	def __str__ (self) -> str:

		if self.is_downbeat:
			return str(self.measure)

		return f"{self.measure}+{self.beat_fraction}"
