import dataclasses
import logging
import typing

import tickmeter.config
import tickmeter.errors


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class RunContext:

	"""
	State of a single import or export run, passed explicitly to every stage.

	``warnings`` collects problems that were recovered with a default;
	``errors`` collects per-item failures (an event or note that was dropped).
	Neither list is ever shared between runs.
	"""

	settings: tickmeter.config.Settings = dataclasses.field(default_factory=tickmeter.config.Settings)
	resolution: int = 0
	warnings: typing.List[str] = dataclasses.field(default_factory=list)
	errors: typing.List[tickmeter.errors.TickmeterError] = dataclasses.field(default_factory=list)

	def warn (self, message: str, source_logger: typing.Optional[logging.Logger] = None) -> None:

		"""
		Record a recovered problem and log it as a warning.
		"""

		self.warnings.append(message)
		(source_logger or logger).warning(message)

	def fail (self, error: tickmeter.errors.TickmeterError, source_logger: typing.Optional[logging.Logger] = None) -> None:

		"""
		Record a per-item failure and log it as an error. The run continues.
		"""

		self.errors.append(error)
		(source_logger or logger).error(str(error))
