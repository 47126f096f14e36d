"""
conversion of positions between the genomic, transcript (cDNA), CDS and protein coordinate systems
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from ..constants import CODON_SIZE, RANK_TYPE
from ..error import ProjectionError
from .position import GenomeInterval, GenomePosition
from .transcript import TranscriptModel, genome_position
from .variant import GenomeVariant


@dataclass(frozen=True)
class CDSPosition:
    """
    a zero-based offset into the CDS. Intronic positions and positions outside the CDS are
    flagged since they do not correspond to translated bases
    """

    pos: int
    in_intron: bool = False
    outside_cds: bool = False

    @property
    def frameshift(self) -> int:
        return self.pos % CODON_SIZE

    @property
    def aa_pos(self) -> int:
        return self.pos // CODON_SIZE

    def shifted(self, delta: int) -> 'CDSPosition':
        return CDSPosition(self.pos + delta, self.in_intron, self.outside_cds)


class TranscriptProjector:
    """
    projects positions for a single transcript. Genomic positions may be given on either strand,
    they are converted to the strand of the transcript before projection
    """

    def __init__(self, transcript: TranscriptModel):
        self.transcript = transcript
        self._cds_begin_tx_pos = self._exonic_bases_before(transcript.cds_region.begin)
        self._cds_end_tx_pos = self._exonic_bases_before(transcript.cds_region.end)

    def _to_transcript_strand(self, pos: GenomePosition) -> int:
        if pos.chr != self.transcript.chr:
            raise ProjectionError('position is not on the same contig as the transcript', pos)
        return pos.with_strand(self.transcript.strand).pos

    def _exonic_bases_before(self, pos: int) -> int:
        """
        the number of exonic bases strictly upstream of a position (on the transcript strand). For
        exonic positions this is the transcript offset, for intronic positions it is the offset of the
        first base of the next exon
        """
        total = 0
        for exon in self.transcript.exon_regions:
            total += min(max(pos - exon.begin, 0), exon.length())
        return total

    def exon_index(self, pos: GenomePosition) -> Optional[int]:
        """
        zero-based index (in transcript order) of the exon containing the position
        """
        tpos = self._to_transcript_strand(pos)
        for index, exon in enumerate(self.transcript.exon_regions):
            if exon.begin <= tpos < exon.end:
                return index
        return None

    @property
    def cds_begin_tx_pos(self) -> int:
        return self._cds_begin_tx_pos

    @property
    def cds_end_tx_pos(self) -> int:
        """transcript offset just past the last CDS base"""
        return self._cds_end_tx_pos

    def cds_length(self) -> int:
        return self._cds_end_tx_pos - self._cds_begin_tx_pos

    def genome_to_transcript_pos(self, pos: GenomePosition) -> int:
        """
        Raises:
            ProjectionError: the position is not exonic
        """
        if self.exon_index(pos) is None:
            raise ProjectionError('position is not exonic', pos, self.transcript.accession)
        return self._exonic_bases_before(self._to_transcript_strand(pos))

    def transcript_to_genome_pos(self, tx_pos: int) -> GenomePosition:
        """
        the genomic position (on the transcript strand) of a zero-based transcript offset
        """
        offset = 0
        if tx_pos >= 0:
            for exon in self.transcript.exon_regions:
                if tx_pos < offset + exon.length():
                    return genome_position(self.transcript, exon.begin + tx_pos - offset)
                offset += exon.length()
        raise ProjectionError('transcript position outside the transcript', tx_pos)

    def genome_to_cds_pos(self, pos: GenomePosition) -> int:
        """
        the CDS offset of an exonic position. Negative for the 5' UTR
        """
        return self.genome_to_transcript_pos(pos) - self._cds_begin_tx_pos

    def cds_to_genome_pos(self, cds_pos: int) -> GenomePosition:
        return self.transcript_to_genome_pos(cds_pos + self._cds_begin_tx_pos)

    def project_genome_to_cds_position(self, pos: GenomePosition) -> CDSPosition:
        """
        project any position onto the CDS. Intronic positions take the offset following the nearest
        upstream exon. Positions before the CDS are clamped to 0 and positions past it to the CDS length
        """
        tpos = self._to_transcript_strand(pos)
        cds = self.transcript.cds_region
        if tpos < cds.begin:
            return CDSPosition(0, outside_cds=True)
        elif tpos >= cds.end:
            return CDSPosition(self.cds_length(), outside_cds=True)
        in_intron = self.exon_index(pos) is None
        return CDSPosition(self._exonic_bases_before(tpos) - self._cds_begin_tx_pos, in_intron=in_intron)

    def reconstruct_cds_sequence(self) -> str:
        """the wild-type coding sequence"""
        return self.transcript.sequence[self._cds_begin_tx_pos:self._cds_end_tx_pos]

    def transcript_starting_at_cds(self) -> str:
        """the transcript sequence from the start of the CDS to the end of the transcript"""
        return self.transcript.sequence[self._cds_begin_tx_pos:]

    def transcript_with_variant(self, variant: GenomeVariant) -> str:
        """
        splice a genomic change into the transcript sequence. Intronic parts of the change are dropped
        and the alternate allele is placed at the first exonic base at/after the start of the change
        """
        if variant.chr != self.transcript.chr:
            raise ProjectionError('variant is not on the same contig as the transcript', variant)
        interval = variant.with_strand(self.transcript.strand).interval
        begin = self._exonic_bases_before(interval.begin)
        end = self._exonic_bases_before(interval.end)
        alt = variant.with_strand(self.transcript.strand).alt
        seq = self.transcript.sequence
        return seq[:begin] + alt + seq[end:]

    def apply_variant_to_cds(self, variant: GenomeVariant) -> str:
        """
        the variant transcript sequence starting at the CDS start
        """
        return self.transcript_with_variant(variant)[self._cds_begin_tx_pos:]

    def locate(self, interval: GenomeInterval) -> Optional[Tuple[str, int, int]]:
        """
        the exon (preferred) or intron rank of an interval

        Returns:
            the rank type, the one-based rank and the total number of exons/introns or None when the
            interval does not overlap the transcript
        """
        interval = interval.with_strand(self.transcript.strand)
        exons = self.transcript.exon_regions
        for index, exon in enumerate(exons):
            if exon.overlaps(interval):
                return (RANK_TYPE.EXON, index + 1, len(exons))
        introns = self.transcript.intron_regions()
        for index, intron in enumerate(introns):
            if intron.overlaps(interval):
                return (RANK_TYPE.INTRON, index + 1, len(introns))
        return None

    def _transcript_coordinate(self, tpos: int) -> Optional[int]:
        """
        the transcript offset of an exonic position, extended linearly outside the transcript. None
        for intronic positions
        """
        tx_region = self.transcript.tx_region
        if tpos < tx_region.begin:
            return tpos - tx_region.begin
        elif tpos >= tx_region.end:
            return self.transcript.transcript_length() + tpos - tx_region.end
        for exon in self.transcript.exon_regions:
            if exon.begin <= tpos < exon.end:
                return self._exonic_bases_before(tpos)
        return None

    def _format_transcript_coordinate(self, tx_pos: int) -> str:
        if not self.transcript.is_coding():
            if tx_pos < 0:
                return str(tx_pos)
            elif tx_pos >= self.transcript.transcript_length():
                return '*{}'.format(tx_pos - self.transcript.transcript_length() + 1)
            return str(tx_pos + 1)
        if tx_pos < self._cds_begin_tx_pos:
            return str(tx_pos - self._cds_begin_tx_pos)
        elif tx_pos >= self._cds_end_tx_pos:
            return '*{}'.format(tx_pos - self._cds_end_tx_pos + 1)
        return str(tx_pos - self._cds_begin_tx_pos + 1)

    def hgvs_position(self, pos: GenomePosition) -> str:
        """
        the position in coding (c.) or non-coding (n.) transcript notation, without the prefix

        Example:
            - exonic CDS base: '10'
            - 5' UTR: '-8'
            - 3' UTR: '*6'
            - intronic: '10+31' or '11-5' (relative to the closest exon boundary)
        """
        tpos = self._to_transcript_strand(pos)
        tx_pos = self._transcript_coordinate(tpos)
        if tx_pos is not None:
            return self._format_transcript_coordinate(tx_pos)
        exons = self.transcript.exon_regions
        for prev, curr in zip(exons, exons[1:]):
            if prev.end <= tpos < curr.begin:
                upstream = tpos - (prev.end - 1)
                downstream = curr.begin - tpos
                if upstream <= downstream:
                    anchor = self._format_transcript_coordinate(self._exonic_bases_before(prev.end) - 1)
                    return '{}+{}'.format(anchor, upstream)
                anchor = self._format_transcript_coordinate(self._exonic_bases_before(curr.begin))
                return '{}-{}'.format(anchor, downstream)
        raise ProjectionError('position could not be placed relative to the transcript', pos)

    def hgvs_prefix(self) -> str:
        return 'c.' if self.transcript.is_coding() else 'n.'
