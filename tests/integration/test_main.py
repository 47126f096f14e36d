import os

import pandas as pd
import pytest
from varnomen.annotation.main import annotate_row, main as annotate_main, overlapping_transcripts
from varnomen.config import AnnotationOptions
from varnomen.constants import COLUMNS, EXIT_ERROR, EXIT_OK, POSITION_TYPE, VARIANT_EFFECT
from varnomen.main import main
from varnomen.reference.file_io import load_transcripts
from varnomen.util import variant_from_row

from ..util import get_data, glob_exists


@pytest.fixture(scope='module')
def transcripts():
    return load_transcripts(get_data('known_genes.json'))


def read_output(filename):
    return pd.read_csv(filename, sep='\t', dtype=str, keep_default_na=False)


def row(chr, pos, ref, alt):
    return {COLUMNS.chr: chr, COLUMNS.pos: pos, COLUMNS.ref: ref, COLUMNS.alt: alt}


class TestOverlappingTranscripts:
    def test_inside(self, transcripts):
        variant = variant_from_row(row('chr1', 6640670, 'A', 'G'), transcripts.ref_dict)
        result = overlapping_transcripts(transcripts, variant, AnnotationOptions())
        assert [t.accession for t in result] == ['uc001anx.3']

    def test_flanking(self, transcripts):
        variant = variant_from_row(row('chr1', 6639500, 'A', 'G'), transcripts.ref_dict)
        assert len(overlapping_transcripts(transcripts, variant, AnnotationOptions())) == 1
        assert overlapping_transcripts(transcripts, variant, AnnotationOptions(upstream_length=100)) == []

    def test_other_contig(self, transcripts):
        variant = variant_from_row(row('chr2', 6640670, 'A', 'G'), transcripts.ref_dict)
        assert overlapping_transcripts(transcripts, variant, AnnotationOptions()) == []


class TestAnnotateRow:
    def test_coding(self, transcripts):
        results = annotate_row(
            {**row('chr1', 6640670, 'A', 'G'), 'sample': 'S1'},
            transcripts,
            AnnotationOptions(),
            POSITION_TYPE.ONE_BASED,
        )
        assert len(results) == 1
        assert results[0]['sample'] == 'S1'
        assert results[0][COLUMNS.transcript] == 'uc001anx.3'
        assert results[0][COLUMNS.effects] == VARIANT_EFFECT.START_LOST
        assert results[0][COLUMNS.nucleotide_hgvs] == 'c.1A>G'
        assert results[0][COLUMNS.error] is None
        assert results[0][COLUMNS.annotation_id]

    def test_intergenic(self, transcripts):
        results = annotate_row(row('chr1', 1000, 'C', 'T'), transcripts, AnnotationOptions(), POSITION_TYPE.ONE_BASED)
        assert len(results) == 1
        assert results[0][COLUMNS.transcript] is None
        assert results[0][COLUMNS.effects] == VARIANT_EFFECT.INTERGENIC_VARIANT
        assert results[0][COLUMNS.nucleotide_hgvs] == 'g.1000C>T'

    def test_invalid_variant(self, transcripts):
        results = annotate_row(row('chr99', 100, 'C', 'T'), transcripts, AnnotationOptions(), POSITION_TYPE.ONE_BASED)
        assert len(results) == 1
        assert results[0][COLUMNS.error].startswith('InvalidGenomeChange')
        assert results[0][COLUMNS.chr] == 'chr99'


class TestAnnotateMain:
    def test_without_transcripts(self, tmp_path):
        output = annotate_main([get_data('variants.tab')], str(tmp_path / 'out' / 'annotations.tab'))
        assert os.path.isfile(output)
        df = read_output(output)
        assert len(df) == 4
        assert df[COLUMNS.transcript].tolist() == ['None'] * 4
        assert df[COLUMNS.effects].tolist()[:3] == [VARIANT_EFFECT.INTERGENIC_VARIANT] * 3


class TestMain:
    def test_annotate(self, tmp_path):
        output = str(tmp_path / 'annotations.tab')
        result = main(
            [
                'annotate',
                '-n',
                get_data('variants.tab'),
                '-o',
                output,
                '--transcripts',
                get_data('known_genes.json'),
            ]
        )
        assert result == EXIT_OK
        assert glob_exists(output)
        df = read_output(output)
        assert len(df) == 4
        for col in [
            COLUMNS.chr,
            COLUMNS.pos,
            COLUMNS.ref,
            COLUMNS.alt,
            'sample',
            COLUMNS.transcript,
            COLUMNS.effects,
            COLUMNS.nucleotide_hgvs,
            COLUMNS.protein_hgvs,
            COLUMNS.annotation_id,
            COLUMNS.error,
        ]:
            assert col in df.columns
        assert df[COLUMNS.transcript].tolist() == ['uc001anx.3', 'uc001anx.3', 'None', 'None']
        assert df[COLUMNS.nucleotide_hgvs].tolist()[:3] == ['c.1A>G', 'c.-198C>T', 'g.1000C>T']
        assert df[COLUMNS.error].tolist()[:3] == ['None'] * 3
        assert df[COLUMNS.error].tolist()[3].startswith('InvalidGenomeChange')
        assert len(set(df[COLUMNS.annotation_id])) == 4

    def test_annotate_zero_based(self, tmp_path):
        config = tmp_path / 'config.json'
        config.write_text('{"input.position_type": "zero_based"}')
        output = str(tmp_path / 'annotations.tab')
        result = main(
            [
                'annotate',
                '-n',
                get_data('variants.tab'),
                '-o',
                output,
                '-c',
                str(config),
                '--transcripts',
                get_data('known_genes.json'),
            ]
        )
        assert result == EXIT_OK
        df = read_output(output)
        assert df[COLUMNS.nucleotide_hgvs].tolist()[0] == 'c.2A>G'

    def test_missing_inputs(self, tmp_path):
        with pytest.raises(SystemExit):
            main(['annotate', '-n', str(tmp_path / 'missing.tab'), '-o', str(tmp_path / 'out.tab')])

    def test_pedigree(self, capsys):
        assert main(['pedigree', get_data('family.ped')]) == EXIT_OK
        captured = capsys.readouterr()
        assert 'FAM:DAUGHTER[affected;female]' in captured.out

    def test_bad_pedigree(self, tmp_path):
        ped = tmp_path / 'bad.ped'
        ped.write_text('FAM CHILD NOBODY 0 1 2\n')
        assert main(['pedigree', str(ped)]) == EXIT_ERROR

    def test_missing_subcommand(self):
        with pytest.raises(SystemExit):
            main([])
