from typing import Iterable, List, Optional, Tuple

from ..constants import CODON_SIZE, STRAND
from ..error import MalformedTranscriptError
from ..interval import Interval
from .position import HG19, GenomeInterval, GenomePosition, ReferenceDictionary


class TranscriptModel:
    """
    the exon/CDS structure of a single transcript. All intervals are stored relative to the
    strand of the transcript and the exons are ordered 5' to 3'

    Attributes:
        accession: the transcript identifier
        gene_symbol: the gene the transcript belongs to
        tx_region: the transcribed region
        cds_region: the coding region (empty for non-coding transcripts)
        exon_regions: the exons, ordered from the 5' to the 3' end of the transcript
        sequence: the spliced mRNA sequence of the transcript
    """

    def __init__(
        self,
        accession: str,
        gene_symbol: Optional[str],
        tx_region: GenomeInterval,
        cds_region: GenomeInterval,
        exon_regions: Iterable[GenomeInterval],
        sequence: str = '',
    ):
        self._accession = accession
        self._gene_symbol = gene_symbol
        self._tx_region = tx_region
        strand = tx_region.strand
        self._cds_region = cds_region.with_strand(strand)
        self._exon_regions: Tuple[GenomeInterval, ...] = tuple(
            sorted([e.with_strand(strand) for e in exon_regions], key=lambda e: (e.begin, e.end))
        )
        self._sequence = str(sequence).upper()
        self._validate()

    def _validate(self):
        if not self._exon_regions:
            raise MalformedTranscriptError('transcript must have at least one exon', self.accession)
        for region in (self._cds_region,) + self._exon_regions:
            if region.chr != self._tx_region.chr:
                raise MalformedTranscriptError(
                    'exon and CDS regions must be on the same contig as the transcript',
                    self.accession,
                    region,
                )
        for exon in self._exon_regions:
            if exon.length() == 0:
                raise MalformedTranscriptError('empty exon', self.accession, exon)
            if not self._tx_region.contains(exon):
                raise MalformedTranscriptError('exon outside the transcript', self.accession, exon)
        overlapping = Interval.overlapping_pairs([e.to_interval() for e in self._exon_regions])
        if overlapping:
            raise MalformedTranscriptError('exons cannot overlap', self.accession, overlapping)
        if self.is_coding():
            if not any([e.contains(self._cds_region.begin_pos) for e in self._exon_regions]):
                raise MalformedTranscriptError('CDS does not start in an exon', self.accession)
            if not any([e.contains(self._cds_region.end_pos.shifted(-1)) for e in self._exon_regions]):
                raise MalformedTranscriptError('CDS does not end in an exon', self.accession)

    @property
    def accession(self) -> str:
        return self._accession

    @property
    def gene_symbol(self) -> Optional[str]:
        return self._gene_symbol

    @property
    def strand(self) -> str:
        return self._tx_region.strand

    @property
    def chr(self):
        return self._tx_region.chr

    @property
    def ref_dict(self) -> ReferenceDictionary:
        return self._tx_region.ref_dict

    @property
    def tx_region(self) -> GenomeInterval:
        return self._tx_region

    @property
    def cds_region(self) -> GenomeInterval:
        return self._cds_region

    @property
    def exon_regions(self) -> Tuple[GenomeInterval, ...]:
        return self._exon_regions

    @property
    def sequence(self) -> str:
        return self._sequence

    def is_coding(self) -> bool:
        return self._cds_region.length() > 0

    def intron_regions(self) -> List[GenomeInterval]:
        """
        the gaps between consecutive exons
        """
        introns = []
        for prev, curr in zip(self._exon_regions, self._exon_regions[1:]):
            introns.append(
                GenomeInterval(self.ref_dict, self.chr, prev.end, curr.begin, self.strand)
            )
        return introns

    def transcript_length(self) -> int:
        """the number of exonic bases"""
        return sum([e.length() for e in self._exon_regions])

    def start_codon_interval(self) -> GenomeInterval:
        begin = self._cds_region.begin
        return GenomeInterval(self.ref_dict, self.chr, begin, begin + CODON_SIZE, self.strand)

    def stop_codon_interval(self) -> GenomeInterval:
        end = self._cds_region.end
        return GenomeInterval(self.ref_dict, self.chr, end - CODON_SIZE, end, self.strand)

    def __repr__(self):
        return '{}({}, {}, {})'.format(
            self.__class__.__name__, self.accession, self.gene_symbol, self.tx_region
        )


def build_transcript(
    accession: str,
    chr: str,
    strand: str,
    tx_start: int,
    tx_end: int,
    cds_start: int,
    cds_end: int,
    exons: Iterable[Tuple[int, int]],
    sequence: str = '',
    gene_symbol: Optional[str] = None,
    ref_dict: ReferenceDictionary = HG19,
) -> TranscriptModel:
    """
    create a transcript model from UCSC style coordinates: zero-based, half-open, relative to the
    forward strand regardless of the strand of the transcript
    """
    def forward(begin, end):
        return GenomeInterval(ref_dict, chr, begin, end, STRAND.POS)

    tx_region = forward(tx_start, tx_end).with_strand(strand)
    return TranscriptModel(
        accession,
        gene_symbol,
        tx_region,
        forward(cds_start, cds_end),
        [forward(start, end) for start, end in exons],
        sequence,
    )


def parse_known_genes_line(
    line: str, sequence: str = '', gene_symbol: Optional[str] = None, ref_dict: ReferenceDictionary = HG19
) -> TranscriptModel:
    """
    parse a single line of a UCSC knownGene table

    Example:
        >>> line = 'uc001anx.3\\tchr1\\t+\\t6640062\\t6649340\\t6640669\\t6649272\\t1\\t6640062,\\t6649340,\\tP10074\\tuc001anx.3'
        >>> parse_known_genes_line(line).accession
        'uc001anx.3'
    """
    fields = line.rstrip('\n').split('\t')
    if len(fields) < 10:
        raise MalformedTranscriptError('knownGene lines require at least 10 columns', line)
    try:
        starts = [int(s) for s in fields[8].split(',') if s]
        ends = [int(s) for s in fields[9].split(',') if s]
        if len(starts) != int(fields[7]) or len(ends) != len(starts):
            raise MalformedTranscriptError('exon count does not match the exon coordinates', line)
        return build_transcript(
            fields[0],
            fields[1],
            fields[2],
            int(fields[3]),
            int(fields[4]),
            int(fields[5]),
            int(fields[6]),
            zip(starts, ends),
            sequence=sequence,
            gene_symbol=gene_symbol,
            ref_dict=ref_dict,
        )
    except (ValueError, AttributeError, KeyError) as err:
        raise MalformedTranscriptError('unable to parse knownGene line', line, err) from err


def genome_position(transcript: TranscriptModel, pos: int) -> GenomePosition:
    """a position on the strand of the transcript"""
    return GenomePosition(transcript.ref_dict, transcript.chr, pos, transcript.strand)
