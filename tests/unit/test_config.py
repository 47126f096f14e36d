import json

import pytest
from jsonschema import ValidationError
from varnomen.config import AnnotationOptions, get_metavar, load_config, validate_config
from varnomen.constants import POSITION_TYPE
from varnomen.schemas import DEFAULTS, get_by_prefix
from varnomen.util import cast_boolean, filepath


class TestDefaults:
    def test_defaults(self):
        assert DEFAULTS['annotate.upstream_length'] == 1000
        assert DEFAULTS['annotate.downstream_length'] == 1000
        assert DEFAULTS['annotate.splice_site_length'] == 2
        assert DEFAULTS['annotate.splice_region_exonic_length'] == 3
        assert DEFAULTS['annotate.splice_region_intronic_length'] == 8
        assert DEFAULTS['annotate.structural_variant_min_length'] == 1000
        assert DEFAULTS['annotate.sv_max_displayed_sequence_length'] == 3
        assert DEFAULTS['input.position_type'] == POSITION_TYPE.ONE_BASED
        assert DEFAULTS['reference.transcripts'] == []

    def test_immutable(self):
        with pytest.raises(TypeError):
            DEFAULTS['annotate.upstream_length'] = 1

    def test_get_by_prefix(self):
        assert get_by_prefix({'a.b': 1, 'a.c': 2, 'b.a': 3}, 'a.') == {'b': 1, 'c': 2}


class TestValidateConfig:
    def test_fills_defaults(self):
        config = validate_config({'annotate.upstream_length': 10})
        assert config['annotate.upstream_length'] == 10
        assert config['annotate.downstream_length'] == 1000
        assert config['reference.transcripts'] == []

    def test_input_not_modified(self):
        original = {'annotate.upstream_length': 10}
        validate_config(original)
        assert original == {'annotate.upstream_length': 10}

    def test_empty(self):
        assert validate_config() == dict(DEFAULTS)

    def test_negative_length_error(self):
        with pytest.raises(ValidationError):
            validate_config({'annotate.upstream_length': -1})

    def test_unknown_key_error(self):
        with pytest.raises(ValidationError):
            validate_config({'annotate.bad_key': 1})

    def test_bad_position_type_error(self):
        with pytest.raises(ValidationError):
            validate_config({'input.position_type': 'two_based'})

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv('VARNOMEN_ANNOTATE_UPSTREAM_LENGTH', '50')
        monkeypatch.setenv('VARNOMEN_INPUT_POSITION_TYPE', POSITION_TYPE.ZERO_BASED)
        config = validate_config({'annotate.upstream_length': 10})
        assert config['annotate.upstream_length'] == 50
        assert config['input.position_type'] == POSITION_TYPE.ZERO_BASED

    def test_environment_override_validated(self, monkeypatch):
        monkeypatch.setenv('VARNOMEN_ANNOTATE_SPLICE_SITE_LENGTH', '0')
        with pytest.raises(ValidationError):
            validate_config()

    def test_load_config(self, tmp_path):
        filename = tmp_path / 'config.json'
        filename.write_text(json.dumps({'annotate.splice_site_length': 3, 'reference.transcripts': ['a.json']}))
        config = load_config(str(filename))
        assert config['annotate.splice_site_length'] == 3
        assert config['reference.transcripts'] == ['a.json']


class TestAnnotationOptions:
    def test_defaults_match_config(self):
        assert AnnotationOptions.from_config(validate_config()) == AnnotationOptions()

    def test_from_config(self):
        options = AnnotationOptions.from_config(validate_config({'annotate.splice_region_intronic_length': 10}))
        assert options.splice_region_intronic_length == 10
        assert options.region_settings()['splice_region_intronic_length'] == 10
        assert 'structural_variant_min_length' not in options.region_settings()

    def test_negative_error(self):
        with pytest.raises(ValueError):
            AnnotationOptions(upstream_length=-1)

    def test_region_shorter_than_site_error(self):
        with pytest.raises(ValueError):
            AnnotationOptions(splice_site_length=5, splice_region_intronic_length=4)


class TestGetMetavar:
    def test_types(self):
        assert get_metavar(bool) == '{True,False}'
        assert get_metavar(cast_boolean) == '{True,False}'
        assert get_metavar(float) == 'FLOAT'
        assert get_metavar(int) == 'INT'
        assert get_metavar(filepath) == 'FILEPATH'
        assert get_metavar(str) is None
