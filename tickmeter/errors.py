import typing


class TickmeterError (Exception):

	"""
	Base class for every error raised or recorded by tickmeter.
	"""


class InvalidMeter (TickmeterError, ValueError):

	"""
	A meter with a non-positive numerator or a denominator that is not a power of two of at least 2.
	"""

	def __init__ (self, numerator: int, denominator: int) -> None:

		self.numerator = numerator
		self.denominator = denominator

		super().__init__(f"Invalid meter {numerator}/{denominator}: numerator must be positive and denominator a power of two of at least 2")


class MissingInitialTempoOrMeter (TickmeterError):

	"""
	A timeline was built without any tempo or meter; a default was substituted.
	"""

	def __init__ (self, kind: str, default: typing.Any) -> None:

		self.kind = kind
		self.default = default

		super().__init__(f"No {kind} found, defaulting to {default}")


class UnterminatedNote (TickmeterError):

	"""
	A note-on with no note-off of the same pitch at or after its position.
	"""

	def __init__ (self, track: int, pitch: int, start: typing.Any) -> None:

		self.track = track
		self.pitch = pitch
		self.start = start

		super().__init__(f"Track {track}: note-on for pitch {pitch} at {start} has no matching note-off")


class UnrecognizedMessage (TickmeterError):

	"""
	A message kind the classifier does not handle. Logged and skipped.
	"""

	def __init__ (self, track: int, tick: int, message: typing.Any) -> None:

		self.track = track
		self.tick = tick
		self.message = message

		super().__init__(f"Track {track}: unrecognized message at tick {tick}: {message!r}")


class QuantizationFailure (TickmeterError, ValueError):

	"""
	No denominator up to the bound approximates a position within tolerance.
	"""

	def __init__ (self, time: float, tolerance: float, max_denominator: int) -> None:

		self.time = time
		self.tolerance = tolerance
		self.max_denominator = max_denominator

		super().__init__(f"Cannot quantize {time!r}: no denominator up to {max_denominator} is within {tolerance}")


class TimelineLookupOutOfRange (TickmeterError, LookupError):

	"""
	A lookup outside the span covered by a timeline's breakpoints.
	"""

	def __init__ (self, value: typing.Any, span: typing.Optional[typing.Tuple[typing.Any, typing.Any]]) -> None:

		self.value = value
		self.span = span

		if span is None:
			message = f"Cannot look up {value!r}: the timeline has no breakpoints"
		else:
			message = f"Cannot look up {value!r}: outside the recorded span {span[0]!r}..{span[1]!r}"

		super().__init__(message)
