from typing import Iterable, List, Optional


class Interval:
    """
    a closed integer interval. Both the start and the end are inclusive, which matches the
    one-based coordinates used in the output nomenclature
    """

    def __init__(self, start: int, end: Optional[int] = None):
        """
        Args:
            start: the start of the interval (inclusive)
            end: the end of the interval (inclusive)
        """
        self.start = int(start)
        self.end = int(end) if end is not None else self.start
        if self.start > self.end:
            raise AttributeError('interval start > end is not allowed', self.start, self.end)

    def __getitem__(self, index):
        try:
            index = int(index)
        except ValueError:
            raise IndexError('index input accessor must be an integer', index)
        if index == 0:
            return self.start
        elif index == 1:
            return self.end
        raise IndexError('index input accessor is out of bounds: 1 or 2 only', index)

    def __and__(self, other):  # intersection
        """the intersection of two intervals

        Example:
            >>> Interval(1, 10) & Interval(5, 50)
            Interval(5, 10)
            >>> print(Interval(1, 2) & Interval(10, 11))
            None
        """
        return Interval.intersection(self, other)

    def __or__(self, other):  # union
        """the union of two intervals

        Example:
            >>> Interval(1, 10) | Interval(5, 50)
            Interval(1, 50)
            >>> Interval(1, 2) | Interval(10, 11)
            Interval(1, 11)
        """
        return Interval.union(self, other)

    @classmethod
    def overlaps(cls, first, other) -> bool:
        """
        checks if two intervals have any portion of their given ranges in common

        Example:
            >>> Interval.overlaps(Interval(1, 4), Interval(5, 7))
            False
            >>> Interval.overlaps(Interval(1, 10), Interval(10, 11))
            True
            >>> Interval.overlaps((1, 10), (10, 11))
            True
        """
        if first[1] < other[0]:
            return False
        elif first[0] > other[1]:
            return False
        return True

    def __len__(self):
        """
        the number of positions in the interval

        Example:
            >>> len(Interval(1, 11))
            11
        """
        return self.length()

    def length(self) -> int:
        return self[1] - self[0] + 1

    def __lt__(self, other):
        if self[0] < other[0]:
            return True
        elif self[0] == other[0] and self[1] < other[1]:
            return True
        return False

    def __repr__(self):
        return '{}({}, {})'.format(self.__class__.__name__, self.start, self.end)

    def __eq__(self, other):
        try:
            return self[0] == other[0] and self[1] == other[1]
        except (TypeError, IndexError):
            return NotImplemented

    def __hash__(self):
        return hash((self[0], self[1]))

    def __contains__(self, other):
        try:
            if other[0] >= self[0] and other[1] <= self[1]:
                return True
        except TypeError:
            if other >= self[0] and other <= self[1]:
                return True
        return False

    @classmethod
    def dist(cls, first, other) -> int:
        """returns the minimum distance between intervals

        Example:
            >>> Interval.dist((1, 4), (5, 7))
            -1
            >>> Interval.dist((5, 7), (1, 4))
            1
            >>> Interval.dist((5, 8), (7, 9))
            0
        """
        if first[1] < other[0]:
            return first[1] - other[0]
        elif first[0] > other[1]:
            return first[0] - other[1]
        return 0

    @classmethod
    def union(cls, *intervals) -> 'Interval':
        """
        returns the union of the set of input intervals

        Example:
            >>> Interval.union((1, 2), (4, 6), (4, 9), (20, 21))
            Interval(1, 21)
        """
        if len(intervals) < 1:
            raise AttributeError('cannot compute the union of an empty set of intervals')
        return Interval(min([i[0] for i in intervals]), max([i[1] for i in intervals]))

    @classmethod
    def intersection(cls, *intervals) -> Optional['Interval']:
        """
        returns None if there is no intersection

        Example:
            >>> Interval.intersection((1, 10), (2, 8), (7, 15))
            Interval(7, 8)
            >>> print(Interval.intersection((1, 2), (5, 6)))
            None
        """
        if len(intervals) < 1:
            raise AttributeError('cannot intersect an empty set of intervals')
        low = max([i[0] for i in intervals])
        high = min([i[1] for i in intervals])
        if low > high:
            return None
        return Interval(low, high)

    @classmethod
    def overlapping_pairs(cls, intervals: Iterable) -> List:
        """
        pairs of overlapping intervals from the input (after sorting)

        Example:
            >>> Interval.overlapping_pairs([(1, 4), (5, 9), (9, 12)])
            [((5, 9), (9, 12))]
        """
        ordered = sorted(intervals, key=lambda x: (x[0], x[1]))
        result = []
        for i in range(0, len(ordered) - 1):
            if cls.overlaps(ordered[i], ordered[i + 1]):
                result.append((ordered[i], ordered[i + 1]))
        return result
