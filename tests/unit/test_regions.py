import pytest
from varnomen.constants import STRAND
from varnomen.reference.constants import SPLICE_SITE_TYPE
from varnomen.reference.position import GenomeInterval, GenomePosition
from varnomen.reference.regions import TranscriptRegions
from varnomen.reference.transcript import build_transcript

from .mock import REF_DICT, forward_transcript, mirror, non_coding_transcript, reverse_transcript


def interval(begin, end, strand=STRAND.POS):
    return GenomeInterval(REF_DICT, '1', begin, end, strand)


def coords(regions):
    return [(r.begin, r.end) for r in regions]


@pytest.fixture(scope='module')
def regions():
    return TranscriptRegions(forward_transcript())


class TestTranscriptRegions:
    def test_cds_parts(self, regions):
        assert coords(regions.cds_exons) == [(110, 120), (200, 230), (300, 320)]
        assert coords(regions.cds_introns) == [(120, 200), (230, 300)]
        assert coords([regions.five_prime_utr, regions.three_prime_utr]) == [(100, 110), (320, 330)]

    def test_splice_sites(self, regions):
        assert coords(regions.donor_sites) == [(120, 122), (230, 232)]
        assert coords(regions.acceptor_sites) == [(198, 200), (298, 300)]
        assert sorted(coords(regions.splice_regions)) == [
            (117, 120),
            (122, 128),
            (192, 198),
            (200, 203),
            (227, 230),
            (232, 238),
            (292, 298),
            (300, 303),
        ]

    def test_flanks_clipped_to_contig(self, regions):
        assert (regions.upstream.begin, regions.upstream.end) == (0, 100)
        assert (regions.downstream.begin, regions.downstream.end) == (330, 1330)

    def test_custom_lengths(self):
        regions = TranscriptRegions(
            forward_transcript(),
            upstream_length=10,
            downstream_length=20,
            splice_site_length=1,
            splice_region_exonic_length=2,
            splice_region_intronic_length=4,
        )
        assert (regions.upstream.begin, regions.downstream.end) == (90, 350)
        assert coords(regions.donor_sites) == [(120, 121), (230, 231)]
        assert (121, 124) in coords(regions.splice_regions)
        assert (118, 120) in coords(regions.splice_regions)

    def test_splice_site_type(self, regions):
        assert regions.splice_site_type(interval(120, 121)) == SPLICE_SITE_TYPE.DONOR
        assert regions.splice_site_type(interval(199, 200)) == SPLICE_SITE_TYPE.ACCEPTOR
        assert regions.splice_site_type(interval(125, 126)) == SPLICE_SITE_TYPE.REGION
        assert regions.splice_site_type(interval(118, 119)) == SPLICE_SITE_TYPE.REGION
        assert regions.splice_site_type(interval(150, 151)) is None
        # donor takes priority over the region
        assert regions.splice_site_type(interval(118, 122)) == SPLICE_SITE_TYPE.DONOR

    def test_overlaps(self, regions):
        assert regions.contains_exon(interval(195, 235))
        assert not regions.contains_exon(interval(195, 225))
        assert regions.overlaps_translational_start(interval(112, 113))
        assert not regions.overlaps_translational_start(interval(113, 114))
        assert regions.overlaps_translational_stop(interval(319, 320))
        assert regions.overlaps_five_prime_utr(interval(105, 106))
        assert regions.overlaps_three_prime_utr(interval(325, 326))
        assert regions.overlaps_upstream_region(interval(50, 51))
        assert regions.overlaps_downstream_region(interval(400, 401))
        assert not regions.overlaps_downstream_region(interval(1400, 1401))
        assert regions.overlaps_cds(interval(150, 151))
        assert not regions.overlaps_cds(interval(105, 106))

    def test_lies_in(self, regions):
        assert regions.lies_in_cds_exon(GenomePosition(REF_DICT, '1', 115))
        assert not regions.lies_in_cds_exon(GenomePosition(REF_DICT, '1', 105))
        assert regions.lies_in_exon(GenomePosition(REF_DICT, '1', 105))
        assert regions.lies_in_cds_intron(GenomePosition(REF_DICT, '1', 150))
        assert regions.lies_in_intron(GenomePosition(REF_DICT, '1', 150))
        assert regions.lies_in_cds(GenomePosition(REF_DICT, '1', 150))

    def test_reverse_strand(self):
        regions = TranscriptRegions(reverse_transcript())
        assert regions.splice_site_type(interval(mirror(120), mirror(120) + 1)) == SPLICE_SITE_TYPE.DONOR
        assert regions.overlaps_translational_start(interval(mirror(112), mirror(112) + 1))
        assert regions.overlaps_upstream_region(interval(mirror(50), mirror(50) + 1))

    def test_non_coding(self):
        regions = TranscriptRegions(non_coding_transcript())
        assert regions.five_prime_utr is None
        assert regions.cds_exons == []
        assert not regions.overlaps_cds(interval(105, 106))
        assert not regions.overlaps_translational_start(interval(100, 101))
        assert regions.overlaps_exon(interval(105, 106))


class TestShortIntron:
    @pytest.fixture(scope='class')
    def regions(self):
        transcript = build_transcript(
            'TX_SHORT',
            '1',
            STRAND.POS,
            100,
            325,
            110,
            310,
            [(100, 120), (125, 155), (300, 325)],
            ref_dict=REF_DICT,
        )
        return TranscriptRegions(transcript)

    def test_windows_clipped_to_intron(self, regions):
        assert coords(regions.donor_sites) == [(120, 122), (155, 157)]
        assert coords(regions.acceptor_sites) == [(123, 125), (298, 300)]
        assert (122, 123) in coords(regions.splice_regions)
        assert all(r.end <= 120 or r.begin >= 122 for r in regions.splice_regions)

    def test_splice_site_type(self, regions):
        assert regions.splice_site_type(interval(120, 121)) == SPLICE_SITE_TYPE.DONOR
        assert regions.splice_site_type(interval(121, 122)) == SPLICE_SITE_TYPE.DONOR
        assert regions.splice_site_type(interval(122, 123)) == SPLICE_SITE_TYPE.REGION
        assert regions.splice_site_type(interval(123, 124)) == SPLICE_SITE_TYPE.ACCEPTOR
        assert regions.splice_site_type(interval(124, 125)) == SPLICE_SITE_TYPE.ACCEPTOR

    def test_windows_disjoint(self, regions):
        for pos in range(100, 325):
            base = interval(pos, pos + 1)
            matches = [
                regions.overlaps_splice_donor_site(base),
                regions.overlaps_splice_acceptor_site(base),
                regions.overlaps_splice_region(base),
            ]
            assert sum(matches) <= 1, pos
