from ..constants import DNA_PATTERN, STRAND, VARIANT_SHAPE, reverse_complement
from ..error import InvalidGenomeChange
from .position import GenomeInterval, GenomePosition

TRANSITIONS = {('A', 'G'), ('G', 'A'), ('C', 'T'), ('T', 'C')}


class GenomeVariant:
    """
    a change of the reference sequence starting at a given position. The reference allele spans
    the interval [pos, pos + len(ref)); insertions have an empty reference and are placed before pos
    """

    def __init__(self, pos: GenomePosition, ref: str, alt: str):
        ref = '' if ref in {None, '-', '.'} else str(ref).upper()
        alt = '' if alt in {None, '-', '.'} else str(alt).upper()
        if not ref and not alt:
            raise InvalidGenomeChange('reference and alternate alleles cannot both be empty')
        if ref == alt:
            raise InvalidGenomeChange('reference and alternate alleles are identical', ref)
        for seq in [ref, alt]:
            if not DNA_PATTERN.match(seq):
                raise InvalidGenomeChange('unexpected characters in allele', seq)
        self._pos = pos
        self._ref = ref
        self._alt = alt

    @property
    def pos(self) -> GenomePosition:
        return self._pos

    @property
    def ref(self) -> str:
        return self._ref

    @property
    def alt(self) -> str:
        return self._alt

    @property
    def chr(self):
        return self._pos.chr

    @property
    def strand(self) -> str:
        return self._pos.strand

    @property
    def interval(self) -> GenomeInterval:
        return GenomeInterval.from_position(self.pos, len(self.ref))

    def with_strand(self, strand: str) -> 'GenomeVariant':
        """
        describe the same change relative to the other strand. The alleles are reverse complemented
        """
        if strand == self.strand:
            return self
        if self.ref:
            pos = self.pos.shifted(len(self.ref) - 1).with_strand(strand)
        else:  # insertion point sits between pos - 1 and pos
            pos = self.pos.shifted(-1).with_strand(strand)
        return GenomeVariant(pos, reverse_complement(self.ref), reverse_complement(self.alt))

    def trimmed(self) -> 'GenomeVariant':
        """
        remove the common prefix and then the common suffix of the alleles

        Example:
            >>> v = GenomeVariant(GenomePosition(HG19, 'chr1', 100), 'CAT', 'CGT').trimmed()
            >>> v.pos.pos, v.ref, v.alt
            (101, 'A', 'G')
        """
        ref, alt = self.ref, self.alt
        prefix = 0
        while prefix < min(len(ref), len(alt)) and ref[prefix] == alt[prefix]:
            prefix += 1
        ref, alt = ref[prefix:], alt[prefix:]
        suffix = 0
        while suffix < min(len(ref), len(alt)) and ref[-1 - suffix] == alt[-1 - suffix]:
            suffix += 1
        if suffix:
            ref, alt = ref[:-suffix], alt[:-suffix]
        if prefix == 0 and suffix == 0:
            return self
        return GenomeVariant(self.pos.shifted(prefix), ref, alt)

    def shape(self, structural_min_length: int = 0) -> str:
        """
        the structural category of the change

        Args:
            structural_min_length: changes with an allele at least this long are structural (0 to disable)
        """
        if structural_min_length and max(len(self.ref), len(self.alt)) >= structural_min_length:
            return VARIANT_SHAPE.STRUCTURAL
        if not self.ref:
            return VARIANT_SHAPE.INSERTION
        if not self.alt:
            return VARIANT_SHAPE.DELETION
        if len(self.ref) == 1 and len(self.alt) == 1:
            return VARIANT_SHAPE.SNV
        return VARIANT_SHAPE.BLOCK_SUBSTITUTION

    def is_transition(self) -> bool:
        return (self.ref, self.alt) in TRANSITIONS

    def is_inversion(self) -> bool:
        return len(self.ref) > 1 and self.alt == reverse_complement(self.ref)

    def __eq__(self, other):
        if not isinstance(other, GenomeVariant):
            return NotImplemented
        other = other.with_strand(self.strand)
        return (self.pos, self.ref, self.alt) == (other.pos, other.ref, other.alt)

    def __hash__(self):
        forward = self.with_strand(STRAND.POS)
        return hash((forward.pos, forward.ref, forward.alt))

    def __repr__(self):
        return '{}({}:{}, {}>{}, {})'.format(
            self.__class__.__name__,
            self.chr,
            self.pos.pos,
            self.ref or '-',
            self.alt or '-',
            self.strand,
        )

    def __str__(self):
        """
        one-based genomic description on the forward strand

        Example:
            >>> str(GenomeVariant(GenomePosition(HG19, 'chr1', 100), 'C', 'T'))
            'chr1:101C>T'
        """
        forward = self.with_strand(STRAND.POS)
        return '{}:{}{}>{}'.format(
            forward.chr, forward.pos.one_based(), forward.ref or '-', forward.alt or '-'
        )
