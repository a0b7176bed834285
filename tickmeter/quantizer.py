import fractions
import logging
import math

import tickmeter.config
import tickmeter.constants
import tickmeter.errors
import tickmeter.values


logger = logging.getLogger(__name__)


class Quantizer:

	"""
	Snaps continuous time to the simplest nearby rational position.
	"""

	def __init__ (
		self,
		tolerance: float = tickmeter.constants.QUANTIZE_TOLERANCE,
		max_denominator: int = tickmeter.constants.MAX_DENOMINATOR,
		on_failure: str = "raise"
	) -> None:

		if tolerance <= 0:
			raise ValueError("Tolerance must be positive")

		if max_denominator < 1:
			raise ValueError("Max denominator must be at least 1")

		if on_failure not in tickmeter.config.QUANTIZE_FAILURE_POLICIES:
			raise ValueError(f"on_failure must be one of {tickmeter.config.QUANTIZE_FAILURE_POLICIES}, got {on_failure!r}")

		self.tolerance = tolerance
		self.max_denominator = max_denominator
		self.on_failure = on_failure

	@classmethod
	def from_settings (cls, settings: tickmeter.config.Settings) -> "Quantizer":

		return cls(settings.tolerance, settings.max_denominator, settings.on_quantize_failure)

	def closest_count (self, time: float) -> tickmeter.values.Count:

		"""
		Quantize a continuous time to a ``Count``.

		The fractional part of ``time`` is compared against multiples of
		``1/d`` for ``d = 1, 2, ... max_denominator`` in turn, and the first
		``d`` with a multiple closer than ``tolerance`` wins, so the result
		always has the smallest denominator that fits.

		When no denominator fits, the ``on_failure`` policy applies: ``"raise"``
		raises ``QuantizationFailure``; ``"nearest"`` returns the nearest
		multiple of ``1 / max_denominator``.

		Example:
			```python
			Quantizer().closest_count(1.3333)   # Count(Fraction(4, 3))
			```
		"""

		if not math.isfinite(time):
			raise ValueError(f"Cannot quantize non-finite time {time!r}")

		measure = math.floor(time)
		remainder = time - measure

		for denominator in range(1, self.max_denominator + 1):

			increment = 1 / denominator
			closest_snap_point = increment * round(remainder / increment)

			if abs(remainder - closest_snap_point) < self.tolerance:
				return tickmeter.values.Count(fractions.Fraction(round(time * denominator), denominator))

		if self.on_failure == "nearest":
			logger.debug(f"No denominator within {self.tolerance} of {time!r}, snapping to 1/{self.max_denominator}")
			return tickmeter.values.Count(fractions.Fraction(round(time * self.max_denominator), self.max_denominator))

		raise tickmeter.errors.QuantizationFailure(time, self.tolerance, self.max_denominator)


def closest_count (
	time: float,
	tolerance: float = tickmeter.constants.QUANTIZE_TOLERANCE,
	max_denominator: int = tickmeter.constants.MAX_DENOMINATOR
) -> tickmeter.values.Count:

	"""
	Quantize ``time`` with the default policy (raise on failure). See ``Quantizer.closest_count``.
	"""

	return Quantizer(tolerance, max_denominator).closest_count(time)
