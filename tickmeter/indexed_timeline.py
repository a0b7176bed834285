"""
An ordered position -> value table.

Every stage of the conversion keeps its data in ``IndexedTimeline`` tables and
differs only in the position type: ticks (``int``), continuous time
(``float``) or quantized ``Count``. Moving data from one stage to the next is
a single ``rekey()`` call with the conversion function for that boundary.
"""

import bisect
import typing


K = typing.TypeVar("K")
V = typing.TypeVar("V")
K2 = typing.TypeVar("K2")


class IndexedTimeline (typing.Generic[K, V]):

	"""
	A mapping kept sorted by key, with floor/ceiling lookups.

	Keys must be mutually orderable. Lookups are ``O(log n)``; inserting a new
	key is ``O(n)``, which is fine for the event counts of a single piece.

	Example:
		```python
		meters = IndexedTimeline({0: Meter(4, 4), 1920: Meter(3, 8)})

		meters.floor(2000)     # (1920, Meter(3, 8))
		meters.higher(0)       # (1920, Meter(3, 8))
		```
	"""

	def __init__ (self, items: typing.Optional[typing.Union[typing.Mapping[K, V], typing.Iterable[typing.Tuple[K, V]]]] = None) -> None:

		self._keys: typing.List[K] = []
		self._values: typing.Dict[K, V] = {}

		if items is not None:
			pairs = items.items() if isinstance(items, typing.Mapping) else items
			for key, value in pairs:
				self[key] = value

	def __setitem__ (self, key: K, value: V) -> None:

		if key not in self._values:
			bisect.insort(self._keys, key)  # type: ignore[type-var]

		self._values[key] = value

	def __getitem__ (self, key: K) -> V:

		return self._values[key]

	def __delitem__ (self, key: K) -> None:

		del self._values[key]
		self._keys.pop(bisect.bisect_left(self._keys, key))  # type: ignore[type-var]

	def __contains__ (self, key: object) -> bool:

		return key in self._values

	def __len__ (self) -> int:

		return len(self._keys)

	def __bool__ (self) -> bool:

		return bool(self._keys)

	def __iter__ (self) -> typing.Iterator[K]:

		return iter(list(self._keys))

	def __eq__ (self, other: object) -> bool:

		if not isinstance(other, IndexedTimeline):
			return NotImplemented

		return self._keys == other._keys and self._values == other._values

	def __repr__ (self) -> str:

		return f"IndexedTimeline({dict(self.items())!r})"

	def get (self, key: K, default: typing.Optional[V] = None) -> typing.Optional[V]:

		return self._values.get(key, default)

	def setdefault (self, key: K, factory: typing.Callable[[], V]) -> V:

		"""
		Return the value at ``key``, storing ``factory()`` there first if it is missing.
		"""

		if key not in self._values:
			self[key] = factory()

		return self._values[key]

	def keys (self) -> typing.List[K]:

		return list(self._keys)

	def values (self) -> typing.List[V]:

		return [self._values[key] for key in self._keys]

	def items (self) -> typing.List[typing.Tuple[K, V]]:

		return [(key, self._values[key]) for key in self._keys]

	def first (self) -> typing.Optional[typing.Tuple[K, V]]:

		if not self._keys:
			return None

		key = self._keys[0]
		return key, self._values[key]

	def last (self) -> typing.Optional[typing.Tuple[K, V]]:

		if not self._keys:
			return None

		key = self._keys[-1]
		return key, self._values[key]

	def floor (self, key: K) -> typing.Optional[typing.Tuple[K, V]]:

		"""
		The entry with the greatest key ``<= key``, or None.
		"""

		index = bisect.bisect_right(self._keys, key)  # type: ignore[type-var]

		if index == 0:
			return None

		found = self._keys[index - 1]
		return found, self._values[found]

	def ceiling (self, key: K) -> typing.Optional[typing.Tuple[K, V]]:

		"""
		The entry with the smallest key ``>= key``, or None.
		"""

		index = bisect.bisect_left(self._keys, key)  # type: ignore[type-var]

		if index == len(self._keys):
			return None

		found = self._keys[index]
		return found, self._values[found]

	def higher (self, key: K) -> typing.Optional[typing.Tuple[K, V]]:

		"""
		The entry with the smallest key strictly ``> key``, or None.
		"""

		index = bisect.bisect_right(self._keys, key)  # type: ignore[type-var]

		if index == len(self._keys):
			return None

		found = self._keys[index]
		return found, self._values[found]

	def rekey (
		self,
		convert: typing.Callable[[K], typing.Optional[K2]],
		merge: typing.Optional[typing.Callable[[V, V], V]] = None
	) -> "IndexedTimeline[K2, V]":

		"""
		Build a new table whose keys are ``convert(key)``.

		``convert`` must be non-decreasing so the relative order of entries is
		kept. Entries whose key converts to None are dropped. When two keys
		convert to the same new key, ``merge(earlier, later)`` combines their
		values; without ``merge`` the later value wins.
		"""

		result: IndexedTimeline[K2, V] = IndexedTimeline()

		for key in self._keys:

			new_key = convert(key)

			if new_key is None:
				continue

			value = self._values[key]

			if merge is not None and new_key in result:
				value = merge(result[new_key], value)

			result[new_key] = value

		return result
