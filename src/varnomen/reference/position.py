"""
strand and origin aware positions and intervals on a reference genome

Internally everything is stored zero-based (intervals are half-open). The position type flag
is only used when converting to/from the external representation
"""
import re
from typing import Dict, Optional, Union

from ..constants import POSITION_TYPE, STRAND
from ..error import NotSpecifiedError
from ..interval import Interval


class ReferenceName(str):
    """
    Class for reference sequence names. Ensures that hg19/hg38 chromosome names match.

    Example:
        >>> ReferenceName('chr1') == ReferenceName('1')
        True
    """

    def __eq__(self, other):
        options = {str(self)}
        if self.startswith('chr'):
            options.add(str(self[3:]))
        else:
            options.add('chr' + str(self))
        return other in options

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(re.sub('^chr', '', str(self)))

    def is_sex_chromosome_x(self) -> bool:
        return self == 'X'


class ReferenceDictionary:
    """
    lengths of the contigs of a reference genome, required for converting coordinates between strands
    """

    def __init__(self, contig_lengths: Dict[str, int]):
        self._lengths: Dict[ReferenceName, int] = {
            ReferenceName(name): int(length) for name, length in contig_lengths.items()
        }

    def contig_length(self, chr: str) -> int:
        try:
            return self._lengths[ReferenceName(chr)]
        except KeyError:
            raise NotSpecifiedError('contig is not in the reference dictionary', chr)

    def __contains__(self, chr):
        return ReferenceName(chr) in self._lengths

    def __len__(self):
        return len(self._lengths)

    def __eq__(self, other):
        if not isinstance(other, ReferenceDictionary):
            return NotImplemented
        return self._lengths == other._lengths

    def __hash__(self):
        return hash(tuple(sorted((str(k), v) for k, v in self._lengths.items())))

    @classmethod
    def hg19(cls) -> 'ReferenceDictionary':
        return HG19


HG19 = ReferenceDictionary(
    {
        'chr1': 249250621,
        'chr2': 243199373,
        'chr3': 198022430,
        'chr4': 191154276,
        'chr5': 180915260,
        'chr6': 171115067,
        'chr7': 159138663,
        'chr8': 146364022,
        'chr9': 141213431,
        'chr10': 135534747,
        'chr11': 135006516,
        'chr12': 133851895,
        'chr13': 115169878,
        'chr14': 107349540,
        'chr15': 102531392,
        'chr16': 90354753,
        'chr17': 81195210,
        'chr18': 78077248,
        'chr19': 59128983,
        'chr20': 63025520,
        'chr21': 48129895,
        'chr22': 51304566,
        'chrX': 155270560,
        'chrY': 59373566,
        'chrM': 16571,
    }
)


def _check_strand(strand: str) -> str:
    if STRAND.enforce(strand) == STRAND.NS:
        raise NotSpecifiedError('genomic coordinates require a specified strand')
    return strand


class GenomePosition:
    """
    a single base on a given strand of a reference contig
    """

    def __init__(
        self,
        ref_dict: ReferenceDictionary,
        chr: str,
        pos: int,
        strand: str = STRAND.POS,
        pos_type: str = POSITION_TYPE.ZERO_BASED,
    ):
        """
        Args:
            ref_dict: the reference the contig belongs to
            chr: the contig name
            pos: the position on the given strand
            strand: the strand the position is given relative to
            pos_type: the origin of the input position
        """
        self._ref_dict = ref_dict
        self._chr = ReferenceName(chr)
        self._strand = _check_strand(strand)
        self._pos = int(pos) - (1 if POSITION_TYPE.enforce(pos_type) == POSITION_TYPE.ONE_BASED else 0)

    @property
    def ref_dict(self) -> ReferenceDictionary:
        return self._ref_dict

    @property
    def chr(self) -> ReferenceName:
        return self._chr

    @property
    def strand(self) -> str:
        return self._strand

    @property
    def pos(self) -> int:
        """zero-based position"""
        return self._pos

    def one_based(self) -> int:
        return self._pos + 1

    def with_strand(self, strand: str) -> 'GenomePosition':
        """
        the same base, described relative to the given strand
        """
        if strand == self.strand:
            return self
        length = self.ref_dict.contig_length(self.chr)
        return GenomePosition(self.ref_dict, self.chr, length - self.pos - 1, _check_strand(strand))

    def shifted(self, delta: int) -> 'GenomePosition':
        return GenomePosition(self.ref_dict, self.chr, self.pos + delta, self.strand)

    def _compatible(self, other: 'GenomePosition') -> 'GenomePosition':
        if other.chr != self.chr:
            raise ValueError('cannot compare positions on different contigs', self, other)
        return other.with_strand(self.strand)

    def differ(self, other: 'GenomePosition') -> int:
        """
        signed distance from other to this position, on the strand of this position
        """
        return self.pos - self._compatible(other).pos

    def __lt__(self, other):
        return self.pos < self._compatible(other).pos

    def __le__(self, other):
        return self.pos <= self._compatible(other).pos

    def __gt__(self, other):
        return self.pos > self._compatible(other).pos

    def __ge__(self, other):
        return self.pos >= self._compatible(other).pos

    def __eq__(self, other):
        if not isinstance(other, GenomePosition):
            return NotImplemented
        if other.chr != self.chr:
            return False
        return self.pos == other.with_strand(self.strand).pos

    def __hash__(self):
        forward = self.with_strand(STRAND.POS) if self.strand != STRAND.POS else self
        return hash((re.sub('^chr', '', str(self.chr)), forward.pos))

    def __repr__(self):
        return '{}({}:{}, {})'.format(self.__class__.__name__, self.chr, self.pos, self.strand)


class GenomeInterval:
    """
    a half-open interval [begin, end) on a given strand of a reference contig
    """

    def __init__(
        self,
        ref_dict: ReferenceDictionary,
        chr: str,
        begin: int,
        end: int,
        strand: str = STRAND.POS,
        pos_type: str = POSITION_TYPE.ZERO_BASED,
    ):
        """
        Args:
            begin: first base of the interval
            end: the end of the interval, exclusive for zero-based input and inclusive for one-based input
        """
        self._ref_dict = ref_dict
        self._chr = ReferenceName(chr)
        self._strand = _check_strand(strand)
        self._begin = int(begin) - (
            1 if POSITION_TYPE.enforce(pos_type) == POSITION_TYPE.ONE_BASED else 0
        )
        self._end = int(end)
        if self._begin > self._end:
            raise AttributeError('interval begin > end is not allowed', self._begin, self._end)

    @classmethod
    def from_position(cls, pos: GenomePosition, length: int) -> 'GenomeInterval':
        return cls(pos.ref_dict, pos.chr, pos.pos, pos.pos + length, pos.strand)

    @property
    def ref_dict(self) -> ReferenceDictionary:
        return self._ref_dict

    @property
    def chr(self) -> ReferenceName:
        return self._chr

    @property
    def strand(self) -> str:
        return self._strand

    @property
    def begin(self) -> int:
        return self._begin

    @property
    def end(self) -> int:
        return self._end

    @property
    def begin_pos(self) -> GenomePosition:
        return GenomePosition(self.ref_dict, self.chr, self.begin, self.strand)

    @property
    def end_pos(self) -> GenomePosition:
        """the position just past the last base"""
        return GenomePosition(self.ref_dict, self.chr, self.end, self.strand)

    def length(self) -> int:
        return self.end - self.begin

    def __len__(self):
        return self.length()

    def with_strand(self, strand: str) -> 'GenomeInterval':
        if strand == self.strand:
            return self
        length = self.ref_dict.contig_length(self.chr)
        return GenomeInterval(
            self.ref_dict, self.chr, length - self.end, length - self.begin, _check_strand(strand)
        )

    def shifted(self, delta: int) -> 'GenomeInterval':
        return GenomeInterval(
            self.ref_dict, self.chr, self.begin + delta, self.end + delta, self.strand
        )

    def with_more_padding(self, upstream: int, downstream: Optional[int] = None) -> 'GenomeInterval':
        """
        extend the interval on either side, clipped to the contig
        """
        downstream = upstream if downstream is None else downstream
        begin = max(0, self.begin - upstream)
        end = self.end + downstream
        if self.chr in self.ref_dict:
            end = min(end, self.ref_dict.contig_length(self.chr))
        return GenomeInterval(self.ref_dict, self.chr, begin, end, self.strand)

    def _same_strand(self, other):
        if other.chr != self.chr:
            return None
        return other.with_strand(self.strand)

    def contains(self, other: Union[GenomePosition, 'GenomeInterval']) -> bool:
        other = self._same_strand(other)
        if other is None:
            return False
        if isinstance(other, GenomePosition):
            return self.begin <= other.pos < self.end
        return self.begin <= other.begin and other.end <= self.end

    def __contains__(self, other):
        return self.contains(other)

    def overlaps(self, other: 'GenomeInterval') -> bool:
        other = self._same_strand(other)
        if other is None:
            return False
        return other.begin < self.end and self.begin < other.end

    def intersection(self, other: 'GenomeInterval') -> Optional['GenomeInterval']:
        other = self._same_strand(other)
        if other is None:
            return None
        begin = max(self.begin, other.begin)
        end = min(self.end, other.end)
        if begin > end:
            return None
        return GenomeInterval(self.ref_dict, self.chr, begin, end, self.strand)

    def is_left_of(self, pos: GenomePosition) -> bool:
        """the interval ends before the given position"""
        return self.end <= self._compatible_pos(pos)

    def is_right_of(self, pos: GenomePosition) -> bool:
        """the interval starts after the given position"""
        return self.begin > self._compatible_pos(pos)

    def _compatible_pos(self, pos: GenomePosition) -> int:
        if pos.chr != self.chr:
            raise ValueError('cannot compare positions on different contigs', self, pos)
        return pos.with_strand(self.strand).pos

    def to_interval(self) -> Interval:
        """
        the one-based closed representation of a non-empty interval

        Example:
            >>> GenomeInterval(HG19, 'chr1', 10, 20).to_interval()
            Interval(11, 20)
        """
        return Interval(self.begin + 1, self.end)

    def __eq__(self, other):
        if not isinstance(other, GenomeInterval):
            return NotImplemented
        other = self._same_strand(other)
        if other is None:
            return False
        return (self.begin, self.end) == (other.begin, other.end)

    def __hash__(self):
        forward = self.with_strand(STRAND.POS) if self.strand != STRAND.POS else self
        return hash((re.sub('^chr', '', str(self.chr)), forward.begin, forward.end))

    def __repr__(self):
        return '{}({}:{}-{}, {})'.format(
            self.__class__.__name__, self.chr, self.begin, self.end, self.strand
        )
