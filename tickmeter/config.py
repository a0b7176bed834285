import dataclasses
import logging
import os
import typing

import yaml

import tickmeter.constants
import tickmeter.constants.pulses
import tickmeter.constants.velocity
import tickmeter.values


logger = logging.getLogger(__name__)


QUANTIZE_FAILURE_POLICIES = ("raise", "nearest")


@dataclasses.dataclass (frozen=True)
class Settings:

	"""
	Tunable parameters for one import or export run.

	Parameters:
		tolerance: Largest allowed distance between a position and its quantized fraction.
		max_denominator: Largest denominator the quantizer tries.
		on_quantize_failure: ``"raise"`` reports a ``QuantizationFailure`` for the
			event; ``"nearest"`` snaps to the closest multiple of ``1 / max_denominator``.
		default_meter: Meter assumed when the input carries none.
		default_bpm: Tempo assumed when the input carries none.
		default_instrument: Program used for tracks that have notes but no
			program change. When None such tracks are skipped.
		export_resolution: Ticks per quarter note of exported events.
		export_velocity: Velocity of exported notes.
	"""

	tolerance: float = tickmeter.constants.QUANTIZE_TOLERANCE
	max_denominator: int = tickmeter.constants.MAX_DENOMINATOR
	on_quantize_failure: str = "raise"
	default_meter: tickmeter.values.Meter = tickmeter.values.DEFAULT_METER
	default_bpm: int = tickmeter.constants.DEFAULT_BPM
	default_instrument: typing.Optional[int] = None
	export_resolution: int = tickmeter.constants.pulses.EXPORT_RESOLUTION
	export_velocity: int = tickmeter.constants.velocity.DEFAULT_EXPORT_VELOCITY

	def __post_init__ (self) -> None:

		if self.tolerance <= 0:
			raise ValueError("Tolerance must be positive")

		if self.max_denominator < 1:
			raise ValueError("Max denominator must be at least 1")

		if self.on_quantize_failure not in QUANTIZE_FAILURE_POLICIES:
			raise ValueError(f"on_quantize_failure must be one of {QUANTIZE_FAILURE_POLICIES}, got {self.on_quantize_failure!r}")

		if self.default_bpm <= 0:
			raise ValueError("Default BPM must be positive")

		if self.default_instrument is not None and not 0 <= self.default_instrument <= 127:
			raise ValueError("Default instrument must be a MIDI program number (0-127)")

		if self.export_resolution <= 0:
			raise ValueError("Export resolution must be positive")

		if not tickmeter.constants.velocity.MIN_VELOCITY < self.export_velocity <= tickmeter.constants.velocity.MAX_VELOCITY:
			raise ValueError("Export velocity must be between 1 and 127")

	@property
	def default_tempo (self) -> tickmeter.values.Tempo:

		return tickmeter.values.Tempo(self.default_bpm)


def settings_from_dict (data: typing.Mapping[str, typing.Any]) -> Settings:

	"""
	Build settings from a plain mapping, as loaded from YAML.

	``default_meter`` may be given as ``"3/4"`` or ``[3, 4]``.
	"""

	known = {field.name for field in dataclasses.fields(Settings)}
	unknown = sorted(set(data) - known)

	if unknown:
		raise ValueError(f"Unknown settings: {', '.join(unknown)}")

	values = dict(data)

	if "default_meter" in values:
		values["default_meter"] = _parse_meter(values["default_meter"])

	return Settings(**values)


def _parse_meter (value: typing.Any) -> tickmeter.values.Meter:

	if isinstance(value, tickmeter.values.Meter):
		return value

	if isinstance(value, str):
		numerator, _, denominator = value.partition("/")
		return tickmeter.values.Meter(int(numerator), int(denominator))

	numerator, denominator = value
	return tickmeter.values.Meter(int(numerator), int(denominator))


def load_settings (config_path: str = "tickmeter.yaml") -> Settings:

	"""
	Load settings from a YAML file, falling back to defaults when it does not exist.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return Settings()

	with open(config_path, "r") as f:
		data = yaml.safe_load(f)

	if data is None:
		return Settings()

	if not isinstance(data, dict):
		raise ValueError(f"Config file {config_path} must contain a mapping")

	return settings_from_dict(data)
