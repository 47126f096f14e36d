import pytest
from varnomen.constants import RANK_TYPE, STRAND
from varnomen.error import ProjectionError
from varnomen.reference.position import GenomeInterval, GenomePosition
from varnomen.reference.projection import CDSPosition, TranscriptProjector

from .mock import (
    CDS,
    REF_DICT,
    SEQUENCE,
    THREE_PRIME_UTR,
    forward_transcript,
    mirror,
    non_coding_transcript,
    reverse_transcript,
    variant,
)


def position(pos, strand=STRAND.POS):
    return GenomePosition(REF_DICT, '1', pos, strand)


@pytest.fixture(scope='module')
def projector():
    return TranscriptProjector(forward_transcript())


@pytest.fixture(scope='module')
def reverse_projector():
    return TranscriptProjector(reverse_transcript())


class TestCDSPosition:
    def test_frame(self):
        assert CDSPosition(10).frameshift == 1
        assert CDSPosition(10).aa_pos == 3
        assert CDSPosition(9).frameshift == 0

    def test_shifted_keeps_flags(self):
        pos = CDSPosition(10, in_intron=True).shifted(-1)
        assert pos.pos == 9
        assert pos.in_intron


class TestTranscriptProjector:
    def test_cds_offsets(self, projector):
        assert projector.cds_begin_tx_pos == 10
        assert projector.cds_end_tx_pos == 70
        assert projector.cds_length() == 60

    def test_genome_to_transcript(self, projector):
        assert projector.genome_to_transcript_pos(position(100)) == 0
        assert projector.genome_to_transcript_pos(position(205)) == 25
        assert projector.genome_to_cds_pos(position(205)) == 15
        assert projector.genome_to_cds_pos(position(105)) == -5

    def test_intronic_position_error(self, projector):
        with pytest.raises(ProjectionError):
            projector.genome_to_transcript_pos(position(150))

    def test_other_contig_error(self, projector):
        with pytest.raises(ProjectionError):
            projector.exon_index(GenomePosition(REF_DICT, 'X', 105))

    def test_transcript_to_genome(self, projector):
        assert projector.transcript_to_genome_pos(25).pos == 205
        assert projector.cds_to_genome_pos(15).pos == 205
        with pytest.raises(ProjectionError):
            projector.transcript_to_genome_pos(80)
        with pytest.raises(ProjectionError):
            projector.transcript_to_genome_pos(-1)

    def test_round_trip(self, projector):
        for begin, end in [(100, 120), (200, 230), (300, 330)]:
            for pos in range(begin, end):
                assert projector.cds_to_genome_pos(projector.genome_to_cds_pos(position(pos))).pos == pos

    def test_exon_index(self, projector):
        assert projector.exon_index(position(100)) == 0
        assert projector.exon_index(position(229)) == 1
        assert projector.exon_index(position(230)) is None

    def test_project_to_cds(self, projector):
        assert projector.project_genome_to_cds_position(position(115)) == CDSPosition(5)
        assert projector.project_genome_to_cds_position(position(150)) == CDSPosition(10, in_intron=True)
        assert projector.project_genome_to_cds_position(position(105)) == CDSPosition(0, outside_cds=True)
        assert projector.project_genome_to_cds_position(position(325)) == CDSPosition(60, outside_cds=True)

    def test_sequences(self, projector):
        assert projector.reconstruct_cds_sequence() == CDS
        assert projector.transcript_starting_at_cds() == CDS + THREE_PRIME_UTR

    def test_transcript_with_variant(self, projector):
        result = projector.transcript_with_variant(variant(113, 'G', 'A'))
        assert result == SEQUENCE[:13] + 'A' + SEQUENCE[14:]
        assert projector.apply_variant_to_cds(variant(113, 'G', 'A')) == 'ATGACT' + CDS[6:] + THREE_PRIME_UTR

    def test_transcript_with_variant_drops_intronic_bases(self, projector):
        # deletion of the last exon 1 base and the first 5 intron bases
        result = projector.transcript_with_variant(variant(119, 'CGCGCG', ''))
        assert result == SEQUENCE[:19] + SEQUENCE[20:]

    def test_locate(self, projector):
        assert projector.locate(GenomeInterval(REF_DICT, '1', 150, 152)) == (RANK_TYPE.INTRON, 1, 2)
        assert projector.locate(GenomeInterval(REF_DICT, '1', 205, 206)) == (RANK_TYPE.EXON, 2, 3)
        assert projector.locate(GenomeInterval(REF_DICT, '1', 115, 205)) == (RANK_TYPE.EXON, 1, 3)
        assert projector.locate(GenomeInterval(REF_DICT, '1', 50, 52)) is None

    def test_hgvs_position(self, projector):
        assert projector.hgvs_position(position(115)) == '6'
        assert projector.hgvs_position(position(110)) == '1'
        assert projector.hgvs_position(position(102)) == '-8'
        assert projector.hgvs_position(position(325)) == '*6'
        assert projector.hgvs_position(position(50)) == '-60'
        assert projector.hgvs_position(position(400)) == '*81'

    def test_hgvs_position_intronic(self, projector):
        assert projector.hgvs_position(position(150)) == '10+31'
        assert projector.hgvs_position(position(195)) == '11-5'
        assert projector.hgvs_position(position(159)) == '10+40'
        assert projector.hgvs_position(position(160)) == '11-40'

    def test_hgvs_prefix(self, projector):
        assert projector.hgvs_prefix() == 'c.'


class TestReverseTranscriptProjector:
    def test_positions_given_on_forward_strand(self, reverse_projector):
        assert reverse_projector.genome_to_cds_pos(position(mirror(113))) == 3
        assert reverse_projector.genome_to_cds_pos(position(113, STRAND.NEG)) == 3
        assert reverse_projector.hgvs_position(position(mirror(115))) == '6'
        assert reverse_projector.hgvs_position(position(mirror(150))) == '10+31'

    def test_cds_to_genome_on_transcript_strand(self, reverse_projector):
        pos = reverse_projector.cds_to_genome_pos(15)
        assert pos.strand == STRAND.NEG
        assert pos.pos == 205
        assert pos.with_strand(STRAND.POS).pos == mirror(205)

    def test_sequences(self, reverse_projector):
        assert reverse_projector.reconstruct_cds_sequence() == CDS


class TestNonCodingProjector:
    def test_hgvs(self):
        projector = TranscriptProjector(non_coding_transcript())
        assert projector.hgvs_prefix() == 'n.'
        assert projector.hgvs_position(position(105)) == '6'
        assert projector.hgvs_position(position(150)) == '20+31'
        assert projector.hgvs_position(position(50)) == '-50'
        assert projector.hgvs_position(position(330)) == '*1'
