"""
sequence ontology checks: overlap of genomic intervals with the functional regions of a transcript
"""
from typing import List, Optional

from .constants import (
    FLANK_LENGTH,
    SPLICE_REGION_EXONIC_LENGTH,
    SPLICE_REGION_INTRONIC_LENGTH,
    SPLICE_SITE_LENGTH,
    SPLICE_SITE_TYPE,
)
from .position import GenomeInterval, GenomePosition
from .transcript import TranscriptModel


def _overlaps_any(regions: List[GenomeInterval], interval: GenomeInterval) -> bool:
    return any([region.overlaps(interval) for region in regions])


class TranscriptRegions:
    """
    the functional regions of a transcript, computed once on the strand of the transcript. The
    donor, acceptor and splice region windows do not overlap each other
    """

    def __init__(
        self,
        transcript: TranscriptModel,
        upstream_length: int = FLANK_LENGTH,
        downstream_length: int = FLANK_LENGTH,
        splice_site_length: int = SPLICE_SITE_LENGTH,
        splice_region_exonic_length: int = SPLICE_REGION_EXONIC_LENGTH,
        splice_region_intronic_length: int = SPLICE_REGION_INTRONIC_LENGTH,
    ):
        self.transcript = transcript
        exons = transcript.exon_regions
        cds = transcript.cds_region
        tx_region = transcript.tx_region

        def region(begin, end):
            return GenomeInterval(
                transcript.ref_dict, transcript.chr, max(begin, 0), max(end, 0), transcript.strand
            )

        self.exons = list(exons)
        self.introns = transcript.intron_regions()
        self.cds_exons: List[GenomeInterval] = []
        self.cds_introns: List[GenomeInterval] = []
        self.five_prime_utr: Optional[GenomeInterval] = None
        self.three_prime_utr: Optional[GenomeInterval] = None
        if transcript.is_coding():
            for exon in self.exons:
                overlap = exon.intersection(cds)
                if overlap is not None and overlap.length():
                    self.cds_exons.append(overlap)
            for intron in self.introns:
                overlap = intron.intersection(cds)
                if overlap is not None and overlap.length():
                    self.cds_introns.append(overlap)
            self.five_prime_utr = region(tx_region.begin, cds.begin)
            self.three_prime_utr = region(cds.end, tx_region.end)

        # windows are clipped to their exon or intron and never overlap each other
        self.donor_sites = []
        self.acceptor_sites = []
        self.splice_regions = []
        for exon in self.exons:
            self.splice_regions.extend(
                [
                    region(exon.begin, min(exon.begin + splice_region_exonic_length, exon.end)),
                    region(max(exon.end - splice_region_exonic_length, exon.begin), exon.end),
                ]
            )
        # no splice region at the start and end of the transcript
        self.splice_regions = self.splice_regions[1:-1]
        for intron in self.introns:
            donor_end = min(intron.begin + splice_site_length, intron.end)
            acceptor_begin = max(intron.end - splice_site_length, donor_end)
            self.donor_sites.append(region(intron.begin, donor_end))
            self.acceptor_sites.append(region(acceptor_begin, intron.end))
            left_end = min(intron.begin + splice_region_intronic_length, acceptor_begin)
            self.splice_regions.append(region(donor_end, max(left_end, donor_end)))
            right_begin = max(intron.end - splice_region_intronic_length, left_end, donor_end)
            self.splice_regions.append(region(right_begin, acceptor_begin))
        self.splice_regions = [r for r in self.splice_regions if r.length()]
        self.upstream = region(tx_region.begin - upstream_length, tx_region.begin)
        self.downstream = region(tx_region.end, tx_region.end + downstream_length)

    def overlaps_exon(self, interval: GenomeInterval) -> bool:
        return _overlaps_any(self.exons, interval)

    def overlaps_cds_exon(self, interval: GenomeInterval) -> bool:
        return _overlaps_any(self.cds_exons, interval)

    def overlaps_cds_intron(self, interval: GenomeInterval) -> bool:
        return _overlaps_any(self.cds_introns, interval)

    def overlaps_intron(self, interval: GenomeInterval) -> bool:
        return _overlaps_any(self.introns, interval)

    def overlaps_cds(self, interval: GenomeInterval) -> bool:
        return self.transcript.is_coding() and self.transcript.cds_region.overlaps(interval)

    def contains_exon(self, interval: GenomeInterval) -> bool:
        """the interval covers at least one exon completely"""
        return any([interval.contains(exon) for exon in self.exons])

    def overlaps_translational_start(self, interval: GenomeInterval) -> bool:
        return self.transcript.is_coding() and self.transcript.start_codon_interval().overlaps(interval)

    def overlaps_translational_stop(self, interval: GenomeInterval) -> bool:
        return self.transcript.is_coding() and self.transcript.stop_codon_interval().overlaps(interval)

    def overlaps_five_prime_utr(self, interval: GenomeInterval) -> bool:
        return self.five_prime_utr is not None and self.five_prime_utr.overlaps(interval)

    def overlaps_three_prime_utr(self, interval: GenomeInterval) -> bool:
        return self.three_prime_utr is not None and self.three_prime_utr.overlaps(interval)

    def overlaps_splice_donor_site(self, interval: GenomeInterval) -> bool:
        return _overlaps_any(self.donor_sites, interval)

    def overlaps_splice_acceptor_site(self, interval: GenomeInterval) -> bool:
        return _overlaps_any(self.acceptor_sites, interval)

    def overlaps_splice_region(self, interval: GenomeInterval) -> bool:
        return _overlaps_any(self.splice_regions, interval)

    def overlaps_upstream_region(self, interval: GenomeInterval) -> bool:
        return self.upstream.overlaps(interval)

    def overlaps_downstream_region(self, interval: GenomeInterval) -> bool:
        return self.downstream.overlaps(interval)

    def splice_site_type(self, interval: GenomeInterval) -> Optional[str]:
        """
        the splice window overlapped by the interval, in order of priority: donor, acceptor, region
        """
        if self.overlaps_splice_donor_site(interval):
            return SPLICE_SITE_TYPE.DONOR
        elif self.overlaps_splice_acceptor_site(interval):
            return SPLICE_SITE_TYPE.ACCEPTOR
        elif self.overlaps_splice_region(interval):
            return SPLICE_SITE_TYPE.REGION
        return None

    def _base(self, pos: GenomePosition) -> GenomeInterval:
        return GenomeInterval.from_position(pos, 1)

    def lies_in_exon(self, pos: GenomePosition) -> bool:
        return self.overlaps_exon(self._base(pos))

    def lies_in_cds_exon(self, pos: GenomePosition) -> bool:
        return self.overlaps_cds_exon(self._base(pos))

    def lies_in_cds_intron(self, pos: GenomePosition) -> bool:
        return self.overlaps_cds_intron(self._base(pos))

    def lies_in_cds(self, pos: GenomePosition) -> bool:
        return self.overlaps_cds(self._base(pos))

    def lies_in_intron(self, pos: GenomePosition) -> bool:
        return self.overlaps_intron(self._base(pos))
